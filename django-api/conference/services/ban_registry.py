"""Global and per-event user bans.

A global ban lives on the user's profile document; an event ban is its own
document under eventBans/{userId}/{eventId} and is deleted on unban, so
absence means not banned. The two are independent.
"""

import logging

from conference.domain.errors import EmptySelectionError, MixedSelectionError
from conference.domain.models import EventBan, Profile, format_timestamp
from conference.domain.results import BanActions, BatchResult, Result
from conference.domain.value_objects import BanState
from conference.services.boundary import batch_outcome, operation, run_batch
from conference.services.clock import Clock, utcnow
from conference.services.ids import parse_event_id, parse_user_id
from conference.stores.interfaces import DocumentStore
from conference.stores.paths import event_ban_path, user_event_bans_path, user_path

logger = logging.getLogger(__name__)


class BanRegistry:
    """Owns users/{id}.banned and the eventBans/* key space."""

    def __init__(self, store: DocumentStore, clock: Clock = utcnow) -> None:
        self._store = store
        self._clock = clock

    def _set_global(self, user_id: str, banned: bool) -> None:
        uid = parse_user_id(user_id).value
        now = format_timestamp(self._clock())
        self._store.update(
            user_path(uid),
            {"banned": banned, "bannedAt": now if banned else None, "updatedAt": now},
        )

    def _set_event(self, user_id: str, event_id: str, banned: bool) -> None:
        uid = parse_user_id(user_id).value
        eid = parse_event_id(event_id).value
        path = event_ban_path(uid, eid)
        if banned:
            self._store.set(
                path,
                {"banned": True, "bannedAt": format_timestamp(self._clock()), "eventId": eid},
            )
        else:
            self._store.remove(path)

    def event_ban_state(self, user_id: str, event_id: str) -> BanState:
        uid = parse_user_id(user_id).value
        eid = parse_event_id(event_id).value
        doc = self._store.get(event_ban_path(uid, eid))
        if not doc:
            return BanState.not_banned()
        return EventBan.from_document(eid, doc).state

    def global_ban_state(self, user_id: str) -> BanState:
        uid = parse_user_id(user_id).value
        doc = self._store.get(user_path(uid))
        if not doc:
            return BanState.not_banned()
        return Profile.from_document(uid, doc).ban

    @operation
    def ban_user_globally(self, user_id: str, banned: bool) -> None:
        self._set_global(user_id, banned)
        logger.info("User %s %s globally", user_id, "banned" if banned else "unbanned")

    @operation
    def get_global_ban(self, user_id: str) -> BanState:
        return self.global_ban_state(user_id)

    @operation
    def ban_user_from_event(self, user_id: str, event_id: str, banned: bool) -> None:
        self._set_event(user_id, event_id, banned)
        logger.info(
            "User %s %s from event %s", user_id, "banned" if banned else "unbanned", event_id
        )

    @operation
    def is_banned_from_event(self, user_id: str, event_id: str) -> BanState:
        return self.event_ban_state(user_id, event_id)

    @operation
    def list_event_bans(self, user_id: str) -> dict[str, EventBan]:
        uid = parse_user_id(user_id).value
        docs = self._store.get(user_event_bans_path(uid)) or {}
        return {eid: EventBan.from_document(eid, doc) for eid, doc in docs.items()}

    @operation
    def ban_multiple(self, user_ids: list[str], banned: bool) -> Result[BatchResult]:
        """Apply a global ban to each user in turn.

        Not atomic: users processed before a failure stay banned. The
        returned BatchResult lists which ids succeeded and which failed.
        """
        batch = run_batch(user_ids, lambda uid: self._set_global(uid, banned), "user")
        return batch_outcome(batch, "ban" if banned else "unban")

    @operation
    def ban_multiple_from_event(
        self, user_ids: list[str], event_id: str, banned: bool
    ) -> Result[BatchResult]:
        batch = run_batch(
            user_ids, lambda uid: self._set_event(uid, event_id, banned), "user"
        )
        return batch_outcome(batch, "ban from event" if banned else "unban from event")

    @operation
    def global_ban_actions(self, user_ids: list[str]) -> BanActions:
        """Bulk global actions allowed for the selection.

        Ban is offered only when nobody selected is banned, unban only when
        everybody is; a mixed selection gets neither.
        """
        if not user_ids:
            return BanActions()
        states = [self.global_ban_state(uid) for uid in user_ids]
        banned = sum(1 for s in states if s.banned)
        return BanActions.for_counts(banned=banned, unbanned=len(states) - banned)

    @operation
    def event_ban_actions(self, user_ids: list[str], event_id: str) -> BanActions:
        if not user_ids or not event_id:
            return BanActions()
        states = [self.event_ban_state(uid, event_id) for uid in user_ids]
        banned = sum(1 for s in states if s.banned)
        return BanActions.for_counts(banned=banned, unbanned=len(states) - banned)

    @operation
    def ban_selected(self, user_ids: list[str], banned: bool) -> Result[BatchResult]:
        """Global ban/unban for an admin selection, refusing mixed selections."""
        if not user_ids:
            raise EmptySelectionError()
        actions = self.global_ban_actions(user_ids).unwrap()
        if (banned and not actions.can_ban) or (not banned and not actions.can_unban):
            raise MixedSelectionError("ban" if banned else "unban")
        return self.ban_multiple(user_ids, banned)

    @operation
    def ban_selected_from_event(
        self, user_ids: list[str], event_id: str, banned: bool
    ) -> Result[BatchResult]:
        if not user_ids:
            raise EmptySelectionError()
        actions = self.event_ban_actions(user_ids, event_id).unwrap()
        if (banned and not actions.can_ban) or (not banned and not actions.can_unban):
            raise MixedSelectionError("ban" if banned else "unban")
        return self.ban_multiple_from_event(user_ids, event_id, banned)
