"""Parsing of raw identifiers into domain ids with domain errors."""

from conference.domain.errors import InvalidEventIdError, InvalidUserIdError
from conference.domain.value_objects import EventId, UserId


def parse_event_id(raw: str) -> EventId:
    try:
        return EventId.from_string(raw)
    except (AttributeError, ValueError) as exc:
        raise InvalidEventIdError() from exc


def parse_user_id(raw: str) -> UserId:
    try:
        return UserId.from_string(raw)
    except (AttributeError, ValueError) as exc:
        raise InvalidUserIdError() from exc
