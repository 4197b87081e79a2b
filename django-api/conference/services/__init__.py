from dataclasses import dataclass

from conference.services.attendance_tracker import AttendanceChange, AttendanceTracker
from conference.services.ban_registry import BanRegistry
from conference.services.checkout_service import CheckoutService
from conference.services.clock import Clock, utcnow
from conference.services.event_service import EventService
from conference.services.profile_service import ProfileService
from conference.services.registration_ledger import RegistrationLedger
from conference.stores.interfaces import DocumentStore


@dataclass(frozen=True)
class Services:
    """Every service, wired to one store."""

    store: DocumentStore
    events: EventService
    bans: BanRegistry
    ledger: RegistrationLedger
    attendance: AttendanceTracker
    checkout: CheckoutService
    profiles: ProfileService


def build_services(
    store: DocumentStore,
    clock: Clock = utcnow,
    *,
    venue: str = "TBD",
    event_time: str = "TBD",
) -> Services:
    events = EventService(store, clock)
    bans = BanRegistry(store, clock)
    ledger = RegistrationLedger(store, events, bans, clock)
    return Services(
        store=store,
        events=events,
        bans=bans,
        ledger=ledger,
        attendance=AttendanceTracker(store, bans, clock),
        checkout=CheckoutService(ledger, clock, venue=venue, event_time=event_time),
        profiles=ProfileService(store, clock),
    )


__all__ = [
    "Services",
    "build_services",
    "EventService",
    "BanRegistry",
    "RegistrationLedger",
    "AttendanceTracker",
    "AttendanceChange",
    "CheckoutService",
    "ProfileService",
]
