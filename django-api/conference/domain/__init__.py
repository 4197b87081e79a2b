from conference.domain.cart import Cart, CartItem
from conference.domain.models import (
    Attendee,
    AttendanceStats,
    DirectoryUser,
    Event,
    EventBan,
    EventStats,
    Participant,
    Profile,
    RegisteredEvent,
    Registration,
    RegistrationDetails,
)
from conference.domain.results import BanActions, BatchFailure, BatchResult, Result
from conference.domain.value_objects import (
    BanState,
    Capacity,
    EventId,
    EventStatus,
    Money,
    RegistrationStatus,
    UserId,
)

__all__ = [
    "Cart",
    "CartItem",
    "Event",
    "EventBan",
    "Registration",
    "RegistrationDetails",
    "Profile",
    "Participant",
    "Attendee",
    "RegisteredEvent",
    "DirectoryUser",
    "EventStats",
    "AttendanceStats",
    "Result",
    "BatchResult",
    "BatchFailure",
    "BanActions",
    "EventId",
    "UserId",
    "Money",
    "Capacity",
    "EventStatus",
    "RegistrationStatus",
    "BanState",
]
