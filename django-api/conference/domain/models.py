"""Domain models representing persisted state.

These are pure domain objects with no API input rules. Each model knows how
to read itself from, and write itself to, the camelCase document stored
under its path (see conference/stores/paths.py).
"""

from dataclasses import dataclass, field
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Self

from conference.domain.errors import InvalidDocumentError
from conference.domain.value_objects import (
    BanState,
    Capacity,
    EventId,
    EventStatus,
    Money,
    RegistrationStatus,
)

Document = dict[str, Any]


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def parse_timestamp(raw: object) -> datetime | None:
    if not raw:
        return None
    if isinstance(raw, datetime):
        return raw
    return datetime.fromisoformat(str(raw))


def decodes_document(from_document: Callable) -> Callable:
    """Turn malformed stored fields into InvalidDocumentError."""

    @wraps(from_document)
    def wrapper(cls, key: str, doc: Document):
        try:
            return from_document(cls, key, doc)
        except (AttributeError, TypeError, ValueError) as exc:
            raise InvalidDocumentError(cls.__name__) from exc

    return wrapper


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    description: str
    category: str
    price: Money
    duration: str
    prize: str
    image: str
    icon: str
    max_tickets: Capacity | None
    status: EventStatus
    created_at: datetime | None
    updated_at: datetime | None

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    @classmethod
    @decodes_document
    def from_document(cls, event_id: str, doc: Document) -> Self:
        return cls(
            id=EventId.from_string(doc.get("id") or event_id),
            title=doc.get("title", ""),
            description=doc.get("description", ""),
            category=doc.get("category", ""),
            price=Money.from_raw(doc.get("price")),
            duration=doc.get("duration", ""),
            prize=doc.get("prize", ""),
            image=doc.get("image", ""),
            icon=doc.get("icon", ""),
            max_tickets=Capacity.from_raw(doc.get("maxTickets")),
            status=EventStatus.from_flag(doc.get("active")),
            created_at=parse_timestamp(doc.get("createdAt")),
            updated_at=parse_timestamp(doc.get("updatedAt")),
        )

    def to_document(self) -> Document:
        doc: Document = {
            "id": self.id.value,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "price": self.price.to_raw(),
            "duration": self.duration,
            "prize": self.prize,
            "image": self.image,
            "icon": self.icon,
            "active": self.is_active,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }
        if self.max_tickets is not None:
            doc["maxTickets"] = self.max_tickets.value
        return doc


@dataclass(frozen=True)
class RegistrationDetails:
    """Caller-supplied part of a registration, before the ledger stamps it."""

    event_id: str
    event_name: str
    event_date: str
    event_time: str
    venue: str
    payment_id: str
    amount: Money
    quantity: int = 1

    def to_document(self) -> Document:
        return {
            "eventId": self.event_id,
            "eventName": self.event_name,
            "eventDate": self.event_date,
            "eventTime": self.event_time,
            "venue": self.venue,
            "paymentId": self.payment_id,
            "amount": self.amount.to_raw(),
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class Registration:
    """Domain representation of a (user, event) registration."""

    event_id: str
    event_name: str
    event_date: str
    event_time: str
    venue: str
    payment_id: str
    amount: Money
    quantity: int
    registered_at: datetime | None
    status: RegistrationStatus
    attended: bool = False
    attended_at: datetime | None = None

    @classmethod
    @decodes_document
    def from_document(cls, event_id: str, doc: Document) -> Self:
        return cls(
            event_id=doc.get("eventId") or event_id,
            event_name=doc.get("eventName", ""),
            event_date=doc.get("eventDate", ""),
            event_time=doc.get("eventTime", ""),
            venue=doc.get("venue", ""),
            payment_id=doc.get("paymentId", ""),
            amount=Money.from_raw(doc.get("amount")),
            quantity=int(doc.get("quantity") or 1),
            registered_at=parse_timestamp(doc.get("registeredAt")),
            status=RegistrationStatus.from_raw(doc.get("status")),
            attended=bool(doc.get("attended", False)),
            attended_at=parse_timestamp(doc.get("attendedAt")),
        )


@dataclass(frozen=True)
class EventBan:
    """A user's ban from one event."""

    event_id: str
    state: BanState

    @classmethod
    @decodes_document
    def from_document(cls, event_id: str, doc: Document) -> Self:
        if doc.get("banned"):
            state = BanState.banned_since(parse_timestamp(doc.get("bannedAt")))
        else:
            state = BanState.not_banned()
        return cls(event_id=doc.get("eventId") or event_id, state=state)


@dataclass(frozen=True)
class Profile:
    """User profile stored under users/{userId}."""

    user_id: str
    name: str = ""
    email: str = ""
    college: str = ""
    phone: str = ""
    role: str = "user"
    ban: BanState = field(default_factory=BanState.not_banned)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    @decodes_document
    def from_document(cls, user_id: str, doc: Document) -> Self:
        if doc.get("banned"):
            ban = BanState.banned_since(parse_timestamp(doc.get("bannedAt")))
        else:
            ban = BanState.not_banned()
        return cls(
            user_id=user_id,
            name=doc.get("name", ""),
            email=doc.get("email", ""),
            college=doc.get("college", ""),
            phone=doc.get("phone", ""),
            role=doc.get("role", "user"),
            ban=ban,
            created_at=parse_timestamp(doc.get("createdAt")),
            updated_at=parse_timestamp(doc.get("updatedAt")),
        )


@dataclass(frozen=True)
class Participant:
    """A registration joined with the registrant's profile."""

    user_id: str
    registration: Registration
    profile: Profile


@dataclass(frozen=True)
class Attendee:
    user_id: str
    registration: Registration


@dataclass(frozen=True)
class RegisteredEvent:
    """One line of the admin user directory."""

    event_id: str
    event_title: str
    event_category: str
    registered_at: datetime | None
    status: RegistrationStatus
    attended: bool


@dataclass(frozen=True)
class DirectoryUser:
    profile: Profile
    registered_events: tuple[RegisteredEvent, ...]

    @property
    def total_events(self) -> int:
        return len(self.registered_events)

    @property
    def banned(self) -> bool:
        return self.profile.ban.banned


@dataclass(frozen=True)
class EventStats:
    total_events: int
    active_events: int
    total_registrations: int
    confirmed_payments: int


@dataclass(frozen=True)
class AttendanceStats:
    total_registered: int
    attended: int
    not_attended: int
    attendance_rate: int

    @classmethod
    def from_attendees(cls, attendees: list[Attendee]) -> Self:
        total = len(attendees)
        attended = sum(1 for a in attendees if a.registration.attended)
        # Half-up rounding of the percentage.
        rate = int(attended * 100 / total + 0.5) if total else 0
        return cls(
            total_registered=total,
            attended=attended,
            not_attended=total - attended,
            attendance_rate=rate,
        )
