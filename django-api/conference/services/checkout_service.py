"""Cart gating and checkout.

Checkout drains the cart through the ledger one item at a time. Items are
never registered concurrently: the cart left after checkout is exactly the
set of items whose registration did not succeed, ready for a retry.
"""

import logging
import random
import string
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping

from conference.domain.cart import Cart, CartItem
from conference.domain.errors import DomainError, NotAuthenticatedError, StoreUnavailableError
from conference.domain.models import Event, EventBan, RegistrationDetails
from conference.services.boundary import operation
from conference.services.clock import Clock, utcnow
from conference.services.registration_ledger import RegistrationLedger

logger = logging.getLogger(__name__)

_PAYMENT_ID_CHARS = string.digits + string.ascii_uppercase


class CartNotice(Enum):
    """What a toggle did, for the UI to render."""

    ADDED = "added"
    REMOVED = "removed"
    LOGIN_REQUIRED = "login_required"
    ALREADY_REGISTERED = "already_registered"
    EVENT_INACTIVE = "event_inactive"
    EVENT_FULL = "event_full"
    BANNED_FROM_EVENT = "banned_from_event"


class CheckoutStatus(Enum):
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"
    EMPTY = "empty"


@dataclass(frozen=True)
class CartToggle:
    cart: Cart
    notice: CartNotice

    @property
    def changed(self) -> bool:
        return self.notice in (CartNotice.ADDED, CartNotice.REMOVED)


@dataclass(frozen=True)
class FailedItem:
    item: CartItem
    error: DomainError


@dataclass(frozen=True)
class CheckoutOutcome:
    """Result of draining a cart; ``cart`` holds the items left to retry."""

    status: CheckoutStatus
    cart: Cart
    registered: tuple[CartItem, ...]
    failed: tuple[FailedItem, ...]

    @property
    def message(self) -> str:
        lines = "\n".join(f"{f.item.event.title}: {f.error.message}" for f in self.failed)
        if self.status is CheckoutStatus.PARTIAL:
            return f"Some registrations failed:\n{lines}\n\nYou can retry the failed registrations."
        if self.status is CheckoutStatus.FAILED:
            return f"All registrations failed:\n{lines}\n\nPlease try again or contact support."
        if self.status is CheckoutStatus.EMPTY:
            return "Your cart is empty."
        return "Registration successful."


def generate_payment_id(now_ms: int, rng: random.Random | None = None) -> str:
    """``TXN`` + epoch milliseconds + five random base36 characters."""
    rng = rng or random.SystemRandom()
    suffix = "".join(rng.choice(_PAYMENT_ID_CHARS) for _ in range(5))
    return f"TXN{now_ms}{suffix}"


class CheckoutService:
    """Owns cart transitions and the checkout loop."""

    def __init__(
        self,
        ledger: RegistrationLedger,
        clock: Clock = utcnow,
        *,
        venue: str = "TBD",
        event_time: str = "TBD",
        payment_id_factory: Callable[[int], str] = generate_payment_id,
    ) -> None:
        self._ledger = ledger
        self._clock = clock
        self._venue = venue
        self._event_time = event_time
        self._payment_id_factory = payment_id_factory

    def toggle_cart(
        self,
        cart: Cart,
        event: Event,
        *,
        user_id: str | None,
        user_registrations: Mapping[str, object],
        participant_counts: Mapping[str, int],
        event_bans: Mapping[str, EventBan] | None = None,
    ) -> CartToggle:
        """Flip the event's membership in the cart, unless gated.

        Gating is checked in order: login, existing registration, inactive
        event, event ban, full capacity. A gated toggle leaves the cart as is.
        """
        eid = event.id.value
        if not user_id:
            return CartToggle(cart, CartNotice.LOGIN_REQUIRED)
        if user_registrations.get(eid):
            return CartToggle(cart, CartNotice.ALREADY_REGISTERED)
        if not event.is_active:
            return CartToggle(cart, CartNotice.EVENT_INACTIVE)
        ban = (event_bans or {}).get(eid)
        if ban is not None and ban.state.banned:
            return CartToggle(cart, CartNotice.BANNED_FROM_EVENT)
        if event.max_tickets and event.max_tickets.occupancy(participant_counts.get(eid, 0)) >= 1:
            return CartToggle(cart, CartNotice.EVENT_FULL)
        if eid in cart:
            return CartToggle(cart.remove(eid), CartNotice.REMOVED)
        return CartToggle(cart.add(event), CartNotice.ADDED)

    def _details_for(self, item: CartItem) -> RegistrationDetails:
        now = self._clock()
        return RegistrationDetails(
            event_id=item.event_id,
            event_name=item.event.title,
            event_date=now.date().isoformat(),
            event_time=self._event_time,
            venue=self._venue,
            payment_id=self._payment_id_factory(int(now.timestamp() * 1000)),
            amount=item.event.price,
            quantity=item.quantity,
        )

    @operation
    def checkout(self, user_id: str | None, cart: Cart) -> CheckoutOutcome:
        """Register the user for every cart item, strictly in cart order.

        Raises:
            NotAuthenticatedError: If no user is signed in.
        """
        if not user_id:
            raise NotAuthenticatedError()
        if not len(cart):
            return CheckoutOutcome(CheckoutStatus.EMPTY, cart.clear(), (), ())

        registered: list[CartItem] = []
        failed: list[FailedItem] = []
        for item in cart:
            result = self._ledger.register_for_event(user_id, item.event_id, self._details_for(item))
            if result.success:
                logger.info("Successfully registered user %s for event %s", user_id, item.event_id)
                registered.append(item)
            else:
                error = result.error or StoreUnavailableError()
                logger.warning(
                    "Failed to register user %s for event %s: %s", user_id, item.event_id, error
                )
                failed.append(FailedItem(item=item, error=error))

        if not failed:
            status = CheckoutStatus.COMPLETED
        elif registered:
            status = CheckoutStatus.PARTIAL
        else:
            status = CheckoutStatus.FAILED
        remaining = cart.retain_failed(f.item.event_id for f in failed)
        return CheckoutOutcome(status, remaining, tuple(registered), tuple(failed))
