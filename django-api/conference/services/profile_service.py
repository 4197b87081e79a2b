"""User profiles and the admin user directory."""

import logging
from typing import Any

from conference.domain.errors import ProfileNotFoundError
from conference.domain.models import (
    DirectoryUser,
    Profile,
    RegisteredEvent,
    Registration,
    format_timestamp,
)
from conference.services.boundary import operation
from conference.services.clock import Clock, utcnow
from conference.services.ids import parse_user_id
from conference.stores.interfaces import DocumentStore
from conference.stores.paths import EVENTS, REGISTRATIONS, USERS, user_path

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "email", "college", "phone")
PLACEHOLDER = "Not specified"


def is_profile_complete(profile: Profile | None) -> bool:
    """Name, college and phone must be filled in with real values."""
    if profile is None:
        return False
    for value in (profile.name, profile.college, profile.phone):
        if not value or not value.strip():
            return False
    return PLACEHOLDER not in (profile.college, profile.phone)


class ProfileService:
    def __init__(self, store: DocumentStore, clock: Clock = utcnow) -> None:
        self._store = store
        self._clock = clock

    def _load(self, user_id: str) -> Profile:
        uid = parse_user_id(user_id).value
        doc = self._store.get(user_path(uid))
        if not doc:
            raise ProfileNotFoundError(uid)
        return Profile.from_document(uid, doc)

    @operation
    def save_profile(self, user_id: str, data: dict[str, Any]) -> Profile:
        """Write a fresh profile, replacing any previous one."""
        uid = parse_user_id(user_id).value
        now = format_timestamp(self._clock())
        doc = {k: data[k] for k in PROFILE_FIELDS if data.get(k) is not None}
        doc.update({"role": "user", "createdAt": now, "updatedAt": now})
        self._store.set(user_path(uid), doc)
        return Profile.from_document(uid, doc)

    @operation
    def get_profile(self, user_id: str) -> Profile:
        return self._load(user_id)

    @operation
    def update_profile(self, user_id: str, updates: dict[str, Any]) -> Profile:
        uid = parse_user_id(user_id).value
        fields = {k: updates[k] for k in PROFILE_FIELDS if k in updates}
        fields["updatedAt"] = format_timestamp(self._clock())
        self._store.update(user_path(uid), fields)
        return self._load(uid)

    def _set_role(self, user_id: str, role: str) -> Profile:
        profile = self._load(user_id)
        self._store.update(
            user_path(profile.user_id),
            {"role": role, "updatedAt": format_timestamp(self._clock())},
        )
        logger.info("User %s role set to %s", profile.user_id, role)
        return self._load(profile.user_id)

    @operation
    def make_admin(self, user_id: str) -> Profile:
        return self._set_role(user_id, "admin")

    @operation
    def remove_admin(self, user_id: str) -> Profile:
        return self._set_role(user_id, "user")

    @operation
    def is_admin(self, user_id: str) -> bool:
        return self._load(user_id).is_admin

    @operation
    def list_users(self) -> list[DirectoryUser]:
        """Every profile with the events it registered for.

        Registrations for events that no longer exist are left out.
        """
        users = self._store.get(USERS) or {}
        everyone = self._store.get(REGISTRATIONS) or {}
        events = self._store.get(EVENTS) or {}
        directory = []
        for user_id, doc in users.items():
            lines = []
            for event_id, reg in (everyone.get(user_id) or {}).items():
                event = events.get(event_id)
                if not event:
                    continue
                registration = Registration.from_document(event_id, reg)
                lines.append(
                    RegisteredEvent(
                        event_id=event_id,
                        event_title=event.get("title", ""),
                        event_category=event.get("category", ""),
                        registered_at=registration.registered_at,
                        status=registration.status,
                        attended=registration.attended,
                    )
                )
            directory.append(
                DirectoryUser(
                    profile=Profile.from_document(user_id, doc),
                    registered_events=tuple(lines),
                )
            )
        return directory
