"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from conference.domain.errors import CapacityExceededError, ErrorCode
from conference.domain.models import AttendanceStats, Attendee, Event, Registration
from conference.domain.results import BanActions, Result
from conference.domain.value_objects import (
    BanState,
    Capacity,
    EventId,
    EventStatus,
    Money,
    RegistrationStatus,
    UserId,
)


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money(amount=Decimal("0")).amount == 0

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(amount=Decimal("-1"))

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(amount=Decimal("249"))) == "249.00"

    def test_missing_price_is_zero(self):
        """A missing or empty stored price reads as zero."""
        assert Money.from_raw(None).amount == 0
        assert Money.from_raw("").amount == 0

    def test_to_raw_keeps_integers_integral(self):
        """Whole amounts are stored as ints, fractional ones as floats."""
        assert Money.from_raw(249).to_raw() == 249
        assert isinstance(Money.from_raw(249).to_raw(), int)
        assert Money.from_raw("10.5").to_raw() == 10.5

    def test_garbage_price_rejected(self):
        """A non-numeric price raises ValueError."""
        with pytest.raises(ValueError):
            Money.from_raw("free")


class TestCapacity:
    """Tests for Capacity value object."""

    @pytest.mark.parametrize("raw", [None, 0, "", -5])
    def test_missing_or_non_positive_means_unlimited(self, raw):
        """Absent, zero or negative maxTickets mean no limit."""
        assert Capacity.from_raw(raw) is None

    def test_reached_at_limit(self):
        """Capacity is reached when the count equals the limit."""
        capacity = Capacity.from_raw(50)
        assert not capacity.is_reached_by(49)
        assert capacity.is_reached_by(50)

    def test_occupancy(self):
        """Occupancy is count over limit."""
        assert Capacity(value=4).occupancy(3) == 0.75


class TestIdentifiers:
    """Tests for EventId and UserId."""

    @pytest.mark.parametrize("raw", ["", "   ", "a/b", "a.b", "a#b", "a$b", "a[b", "a]b"])
    def test_reserved_or_empty_ids_rejected(self, raw):
        """Ids cannot be empty or contain store-reserved characters."""
        with pytest.raises(ValueError):
            EventId.from_string(raw)
        with pytest.raises(ValueError):
            UserId.from_string(raw)

    def test_from_string_strips(self):
        """Surrounding whitespace is dropped."""
        assert str(EventId.from_string(" ev1 ")) == "ev1"


class TestEventStatus:
    """Tests for the active flag."""

    def test_missing_flag_is_active(self):
        """Events without an active flag are orderable."""
        assert EventStatus.from_flag(None) is EventStatus.ACTIVE

    def test_only_explicit_false_is_inactive(self):
        """Only active == False deactivates."""
        assert EventStatus.from_flag(False) is EventStatus.INACTIVE
        assert EventStatus.from_flag(True).is_active


class TestBanState:
    """Tests for BanState."""

    def test_unbanned_cannot_carry_timestamp(self):
        """A lifted ban never has a bannedAt."""
        with pytest.raises(ValueError):
            BanState(banned=False, banned_at=datetime.now(timezone.utc))

    def test_banned_since(self):
        """A ban keeps its timestamp."""
        at = datetime(2025, 1, 1, tzinfo=timezone.utc)
        state = BanState.banned_since(at)
        assert state.banned
        assert state.banned_at == at


class TestEvent:
    """Tests for Event document mapping."""

    def test_from_document_defaults(self):
        """A sparse document yields an active, unlimited, free event."""
        event = Event.from_document("ev1", {"title": "Hunt Safari"})
        assert event.id.value == "ev1"
        assert event.is_active
        assert event.max_tickets is None
        assert event.price.amount == 0

    def test_to_document_omits_unlimited_capacity(self):
        """maxTickets is only written when a limit exists."""
        event = Event.from_document("ev1", {"title": "Hunt Safari", "price": 99})
        doc = event.to_document()
        assert "maxTickets" not in doc
        assert doc["price"] == 99
        assert doc["active"] is True


def _attendee(user_id: str, attended: bool) -> Attendee:
    return Attendee(
        user_id=user_id,
        registration=Registration(
            event_id="ev1",
            event_name="Code Clash",
            event_date="2025-03-01",
            event_time="TBD",
            venue="TBD",
            payment_id="TXN1",
            amount=Money.from_raw(249),
            quantity=1,
            registered_at=None,
            status=RegistrationStatus.REGISTERED,
            attended=attended,
        ),
    )


class TestAttendanceStats:
    """Tests for attendance rate computation."""

    def test_rate_for_six_of_ten(self):
        """10 registrations with 6 attended give a rate of 60."""
        attendees = [_attendee(f"u{i}", i < 6) for i in range(10)]
        stats = AttendanceStats.from_attendees(attendees)
        assert stats.total_registered == 10
        assert stats.attended == 6
        assert stats.not_attended == 4
        assert stats.attendance_rate == 60

    def test_rate_rounds_half_up(self):
        """1 of 8 is 12.5 percent, rounded to 13."""
        attendees = [_attendee(f"u{i}", i == 0) for i in range(8)]
        assert AttendanceStats.from_attendees(attendees).attendance_rate == 13

    def test_rate_zero_without_registrations(self):
        """No registrations means a rate of 0."""
        assert AttendanceStats.from_attendees([]).attendance_rate == 0


class TestResults:
    """Tests for Result and BanActions."""

    def test_unwrap_raises_carried_error(self):
        """unwrap re-raises the domain error of a failed Result."""
        result = Result.fail(CapacityExceededError("ev1"))
        with pytest.raises(CapacityExceededError) as exc_info:
            result.unwrap()
        assert exc_info.value.code is ErrorCode.CAPACITY_EXCEEDED
        assert exc_info.value.message == "Event is at full capacity"

    def test_mixed_selection_offers_nothing(self):
        """A selection with banned and unbanned users allows neither action."""
        actions = BanActions.for_counts(banned=1, unbanned=2)
        assert actions.mixed
        assert not actions.can_ban
        assert not actions.can_unban

    def test_uniform_selections(self):
        """All unbanned allows ban only; all banned allows unban only."""
        assert BanActions.for_counts(banned=0, unbanned=3).can_ban
        assert not BanActions.for_counts(banned=0, unbanned=3).can_unban
        assert BanActions.for_counts(banned=3, unbanned=0).can_unban
