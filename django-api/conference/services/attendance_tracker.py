"""Attendance tracking for registered users."""

import logging
from dataclasses import dataclass

from conference.domain.errors import NotRegisteredError
from conference.domain.models import AttendanceStats, Attendee, Registration, format_timestamp
from conference.domain.results import BatchResult, Result
from conference.services.ban_registry import BanRegistry
from conference.services.boundary import batch_outcome, operation, run_batch
from conference.services.clock import Clock, utcnow
from conference.services.ids import parse_event_id, parse_user_id
from conference.services.registration_ledger import scan_event_registrations
from conference.stores.interfaces import DocumentStore
from conference.stores.paths import registration_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceChange:
    user_id: str
    event_id: str
    attended: bool = True


class AttendanceTracker:
    """Marks attended/not-attended on existing registrations."""

    def __init__(self, store: DocumentStore, bans: BanRegistry, clock: Clock = utcnow) -> None:
        self._store = store
        self._bans = bans
        self._clock = clock

    def _mark(self, user_id: str, event_id: str, attended: bool) -> None:
        uid = parse_user_id(user_id).value
        eid = parse_event_id(event_id).value
        path = registration_path(uid, eid)
        if not self._store.get(path):
            raise NotRegisteredError(uid, eid)
        now = format_timestamp(self._clock())
        self._store.update(
            path,
            {"attended": attended, "attendedAt": now if attended else None, "updatedAt": now},
        )

    @operation
    def mark_attendance(self, user_id: str, event_id: str, attended: bool = True) -> None:
        """Set the attended flag on a registration.

        Raises:
            NotRegisteredError: If the user has no registration for the event.
        """
        self._mark(user_id, event_id, attended)

    @operation
    def mark_multiple_attendance(self, changes: list[AttendanceChange]) -> Result[BatchResult]:
        """Apply each change in order; failures are collected, not fatal.

        The Result is unsuccessful when any change failed, and its data still
        lists which changes went through.
        """
        batch = run_batch(
            changes, lambda c: self._mark(c.user_id, c.event_id, c.attended), "attendance"
        )
        return batch_outcome(batch, "mark attendance")

    @operation
    def mark_attendance_for_selected(
        self, user_ids: list[str], event_id: str, attended: bool
    ) -> Result[BatchResult]:
        """Bulk-mark an admin selection, skipping users banned from the event.

        Users without a registration are skipped as well. When nobody is
        eligible nothing is written and an empty batch is returned.
        """
        eid = parse_event_id(event_id).value
        registered = {uid for uid, _ in scan_event_registrations(self._store, eid)}
        eligible = [
            uid
            for uid in dict.fromkeys(user_ids)
            if uid in registered and not self._bans.event_ban_state(uid, eid).banned
        ]
        if not eligible:
            logger.info("No eligible users selected for attendance on event %s", eid)
            return Result.ok(BatchResult())
        changes = [AttendanceChange(user_id=uid, event_id=eid, attended=attended) for uid in eligible]
        return self.mark_multiple_attendance(changes)

    @operation
    def get_event_attendees(self, event_id: str) -> list[Attendee]:
        eid = parse_event_id(event_id).value
        return [
            Attendee(user_id=uid, registration=Registration.from_document(eid, doc))
            for uid, doc in scan_event_registrations(self._store, eid)
        ]

    @operation
    def get_attendance_stats(self, event_id: str) -> AttendanceStats:
        attendees = self.get_event_attendees(event_id).unwrap()
        return AttendanceStats.from_attendees(attendees)
