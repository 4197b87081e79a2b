"""Event catalog service.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return Results wrapping domain models or domain errors
"""

from typing import Any

from conference.domain.errors import EventNotFoundError, InvalidEventDataError
from conference.domain.models import Event, format_timestamp
from conference.domain.value_objects import Capacity, Money
from conference.services.boundary import operation
from conference.services.clock import Clock, utcnow
from conference.services.ids import parse_event_id
from conference.stores.interfaces import DocumentStore
from conference.stores.paths import EVENTS, event_path

EDITABLE_FIELDS = (
    "title",
    "description",
    "category",
    "price",
    "duration",
    "prize",
    "image",
    "icon",
    "maxTickets",
)


def _clean_fields(data: dict[str, Any]) -> dict[str, Any]:
    fields = {k: data[k] for k in EDITABLE_FIELDS if k in data}
    try:
        if "price" in fields:
            fields["price"] = Money.from_raw(fields["price"]).to_raw()
        if "maxTickets" in fields:
            capacity = Capacity.from_raw(fields["maxTickets"])
            fields["maxTickets"] = capacity.value if capacity else None
    except (TypeError, ValueError) as exc:
        raise InvalidEventDataError(str(exc)) from exc
    if "title" in fields and not str(fields["title"]).strip():
        raise InvalidEventDataError("title is required")
    return fields


class EventService:
    """Service for event catalog operations."""

    def __init__(self, store: DocumentStore, clock: Clock = utcnow) -> None:
        self._store = store
        self._clock = clock

    def load_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is malformed.
            EventNotFoundError: If the event does not exist.
        """
        eid = parse_event_id(event_id)
        doc = self._store.get(event_path(eid.value))
        if not doc:
            raise EventNotFoundError(eid.value)
        return Event.from_document(eid.value, doc)

    def load_events(self) -> list[Event]:
        docs = self._store.get(EVENTS) or {}
        events = [Event.from_document(key, doc) for key, doc in docs.items()]
        return sorted(events, key=lambda e: (e.created_at is None, e.created_at or 0, e.id.value))

    @operation
    def list_events(self) -> list[Event]:
        """Return all events, active or not, oldest first."""
        return self.load_events()

    @operation
    def get_event(self, event_id: str) -> Event:
        return self.load_event(event_id)

    @operation
    def create_event(self, data: dict[str, Any]) -> Event:
        """Create an active event under a store-generated id.

        Raises:
            InvalidEventDataError: If a field fails validation.
        """
        fields = _clean_fields(data)
        if "title" not in fields:
            raise InvalidEventDataError("title is required")
        event_id = self._store.generate_id(EVENTS)
        now = format_timestamp(self._clock())
        doc = {
            **{k: v for k, v in fields.items() if v is not None},
            "id": event_id,
            "active": True,
            "createdAt": now,
            "updatedAt": now,
        }
        self._store.set(event_path(event_id), doc)
        return Event.from_document(event_id, doc)

    @operation
    def update_event(self, event_id: str, updates: dict[str, Any]) -> Event:
        event = self.load_event(event_id)
        fields = _clean_fields(updates)
        fields["updatedAt"] = format_timestamp(self._clock())
        self._store.update(event_path(event.id.value), fields)
        return self.load_event(event.id.value)

    @operation
    def toggle_event_status(self, event_id: str, active: bool) -> Event:
        """Manually activate or deactivate an event."""
        event = self.load_event(event_id)
        self._store.update(
            event_path(event.id.value),
            {"active": bool(active), "updatedAt": format_timestamp(self._clock())},
        )
        return self.load_event(event.id.value)
