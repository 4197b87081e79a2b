"""Registration ledger: who holds a ticket for which event.

Registrations are keyed by (userId, eventId), so a user holds at most one
registration per event and registering again overwrites the previous one.
A full event refuses every registration, including a repeat from a user
who already holds a seat.

Capacity admission runs inside a store transaction on admissions/{eventId},
the set of seat holders for the event. The capacity check and the seat claim
therefore happen atomically, and two sessions racing for the last seat
cannot both get it. The seat map is seeded from a registrations scan the
first time an event is admitted to.
"""

import logging
from typing import Any, Iterable

from conference.domain.errors import (
    BannedFromEventError,
    CapacityExceededError,
    EventInactiveError,
)
from conference.domain.models import (
    Event,
    EventStats,
    Participant,
    Profile,
    Registration,
    RegistrationDetails,
    format_timestamp,
)
from conference.domain.value_objects import RegistrationStatus
from conference.services.ban_registry import BanRegistry
from conference.services.boundary import operation
from conference.services.clock import Clock, utcnow
from conference.services.event_service import EventService
from conference.services.ids import parse_event_id, parse_user_id
from conference.stores.interfaces import DocumentStore, StoreError
from conference.stores.paths import (
    EVENTS,
    REGISTRATIONS,
    admission_path,
    event_path,
    registration_path,
    user_path,
    user_registrations_path,
)

logger = logging.getLogger(__name__)


def scan_event_registrations(store: DocumentStore, event_id: str) -> list[tuple[str, dict[str, Any]]]:
    """Return (userId, registration document) for every registrant of event_id."""
    everyone = store.get(REGISTRATIONS) or {}
    return [
        (user_id, regs[event_id])
        for user_id, regs in everyone.items()
        if isinstance(regs, dict) and regs.get(event_id)
    ]


class RegistrationLedger:
    """Owns the registrations/* and admissions/* key spaces."""

    def __init__(
        self,
        store: DocumentStore,
        events: EventService,
        bans: BanRegistry,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._events = events
        self._bans = bans
        self._clock = clock

    @operation
    def register_for_event(
        self, user_id: str, event_id: str, details: RegistrationDetails
    ) -> None:
        """Admit the user to the event and write their registration.

        Raises:
            EventNotFoundError: If the event does not exist.
            BannedFromEventError: If the user holds an event ban.
            CapacityExceededError: If every seat is taken.
            EventInactiveError: If the event is not orderable.
        """
        uid = parse_user_id(user_id).value
        event = self._events.load_event(event_id)
        eid = event.id.value
        if self._bans.event_ban_state(uid, eid).banned:
            raise BannedFromEventError(uid, eid)

        stamp = format_timestamp(self._clock())
        admission: dict[str, Any] = {"new_seat": False, "limit": None}

        def admit(current: dict[str, Any] | None) -> dict[str, Any]:
            seats = dict(current) if current else self._seat_holders(eid)
            fresh = self._events.load_event(eid)
            admission["limit"] = fresh.max_tickets
            if fresh.max_tickets and fresh.max_tickets.is_reached_by(len(seats)):
                logger.info(
                    "Registration rejected for user %s - event %s at capacity (%d/%d)",
                    uid,
                    eid,
                    len(seats),
                    fresh.max_tickets.value,
                )
                raise CapacityExceededError(eid)
            if not fresh.is_active:
                raise EventInactiveError(eid)
            if uid not in seats:
                seats[uid] = stamp
                admission["new_seat"] = True
            return seats

        seats = self._store.transaction(admission_path(eid), admit)

        doc = {
            **details.to_document(),
            "eventId": eid,
            "registeredAt": stamp,
            "status": RegistrationStatus.REGISTERED.value,
            "attended": False,
        }
        try:
            self._store.set(registration_path(uid, eid), doc)
        except StoreError:
            if admission["new_seat"]:
                self._release_seat(uid, eid)
            raise
        logger.info("User %s registered for event %s", uid, eid)

        limit = admission["limit"]
        if limit is not None and limit.is_reached_by(len(seats)):
            self._deactivate_full_event(eid, len(seats), limit.value)

    def _seat_holders(self, event_id: str) -> dict[str, Any]:
        return {
            user_id: doc.get("registeredAt") or True
            for user_id, doc in scan_event_registrations(self._store, event_id)
        }

    def _release_seat(self, user_id: str, event_id: str) -> None:
        def release(current: dict[str, Any] | None) -> dict[str, Any] | None:
            seats = dict(current or {})
            seats.pop(user_id, None)
            return seats or None

        try:
            self._store.transaction(admission_path(event_id), release)
        except StoreError:
            logger.exception("Failed to release seat of user %s for event %s", user_id, event_id)

    def _deactivate_full_event(self, event_id: str, count: int, limit: int) -> None:
        try:
            self._store.update(
                event_path(event_id),
                {"active": False, "updatedAt": format_timestamp(self._clock())},
            )
        except StoreError:
            # Registration already succeeded; deactivation is best effort.
            logger.exception("Error deactivating event %s after registration", event_id)
            return
        logger.info(
            "Event %s automatically deactivated - reached capacity (%d/%d)",
            event_id,
            count,
            limit,
        )

    @operation
    def get_user_registrations(self, user_id: str) -> dict[str, Registration]:
        uid = parse_user_id(user_id).value
        docs = self._store.get(user_registrations_path(uid)) or {}
        return {eid: Registration.from_document(eid, doc) for eid, doc in docs.items()}

    @operation
    def get_event_registrations(self, event_id: str) -> list[Participant]:
        """Return every registrant of the event joined with their profile."""
        eid = parse_event_id(event_id).value
        participants = []
        for user_id, doc in scan_event_registrations(self._store, eid):
            profile_doc = self._store.get(user_path(user_id)) or {}
            participants.append(
                Participant(
                    user_id=user_id,
                    registration=Registration.from_document(eid, doc),
                    profile=Profile.from_document(user_id, profile_doc),
                )
            )
        return participants

    @operation
    def count_event_registrations(self, event_id: str) -> int:
        eid = parse_event_id(event_id).value
        return len(scan_event_registrations(self._store, eid))

    @operation
    def get_participant_counts(self, event_ids: Iterable[str]) -> dict[str, int]:
        """Registrations per event, from a single scan."""
        counts = {eid: 0 for eid in event_ids}
        everyone = self._store.get(REGISTRATIONS) or {}
        for regs in everyone.values():
            for eid in regs or {}:
                if eid in counts:
                    counts[eid] += 1
        return counts

    @operation
    def list_events_with_counts(self) -> list[tuple[Event, int]]:
        """Every event, oldest first, paired with its registration count."""
        events = self._events.load_events()
        counts = self.get_participant_counts([e.id.value for e in events]).unwrap()
        return [(event, counts[event.id.value]) for event in events]

    @operation
    def get_event_stats(self) -> EventStats:
        events = self._store.get(EVENTS) or {}
        everyone = self._store.get(REGISTRATIONS) or {}
        total = 0
        confirmed = 0
        for regs in everyone.values():
            for doc in (regs or {}).values():
                total += 1
                if doc.get("status") == RegistrationStatus.CONFIRMED.value:
                    confirmed += 1
        return EventStats(
            total_events=len(events),
            active_events=sum(1 for doc in events.values() if doc.get("active") is not False),
            total_registrations=total,
            confirmed_payments=confirmed,
        )
