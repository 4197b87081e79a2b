"""Persisted layout and nested-document helpers shared by the stores.

    events/{eventId}                  -> Event
    registrations/{userId}/{eventId}  -> Registration
    eventBans/{userId}/{eventId}      -> EventBan
    users/{userId}                    -> Profile (+ banned, bannedAt)
    admissions/{eventId}              -> {userId: registeredAt}
"""

import copy
from typing import Any

EVENTS = "events"
REGISTRATIONS = "registrations"
EVENT_BANS = "eventBans"
USERS = "users"
ADMISSIONS = "admissions"


def split_path(path: str) -> list[str]:
    segments = [s for s in path.strip("/").split("/") if s]
    if not segments:
        raise ValueError("Path must contain at least one segment")
    return segments


def join_path(*segments: str) -> str:
    return "/".join(split_path("/".join(segments)))


def event_path(event_id: str) -> str:
    return join_path(EVENTS, event_id)


def registration_path(user_id: str, event_id: str) -> str:
    return join_path(REGISTRATIONS, user_id, event_id)


def user_registrations_path(user_id: str) -> str:
    return join_path(REGISTRATIONS, user_id)


def event_ban_path(user_id: str, event_id: str) -> str:
    return join_path(EVENT_BANS, user_id, event_id)


def user_event_bans_path(user_id: str) -> str:
    return join_path(EVENT_BANS, user_id)


def user_path(user_id: str) -> str:
    return join_path(USERS, user_id)


def admission_path(event_id: str) -> str:
    return join_path(ADMISSIONS, event_id)


def descend(value: Any, segments: list[str]) -> Any | None:
    """Walk into nested mappings; None when any segment is missing."""
    for segment in segments:
        if not isinstance(value, dict) or segment not in value:
            return None
        value = value[segment]
    return value


def splice(tree: Any, segments: list[str], value: Any) -> Any | None:
    """Return a copy of tree with value placed at segments.

    A None value removes the key; mappings left empty are pruned.
    """
    if not segments:
        return copy.deepcopy(value)
    root = copy.deepcopy(tree) if isinstance(tree, dict) else {}
    head, rest = segments[0], segments[1:]
    child = splice(root.get(head), rest, value)
    if child is None or child == {}:
        root.pop(head, None)
    else:
        root[head] = child
    return root or None


def merge_fields(current: Any, fields: dict[str, Any]) -> dict[str, Any] | None:
    merged = dict(current) if isinstance(current, dict) else {}
    for key, value in fields.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = copy.deepcopy(value)
    return merged or None
