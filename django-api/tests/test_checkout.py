"""Unit tests for cart gating and checkout.

Run with: pytest tests/test_checkout.py -v
"""

import random
import re

import pytest

from conference.domain.cart import Cart
from conference.domain.errors import ErrorCode
from conference.services.checkout_service import CartNotice, CheckoutStatus, generate_payment_id


@pytest.fixture
def three_events(make_event):
    return [
        make_event(title="Shark Tank: The Pitch Battle", price=299),
        make_event(title="Design Duel", price=179),
        make_event(title="Hunt Safari", price=99),
    ]


def _cart(*events) -> Cart:
    cart = Cart()
    for event in events:
        cart = cart.add(event)
    return cart


class TestCheckout:
    """Tests for CheckoutService.checkout."""

    def test_all_items_register(self, services, three_events):
        """A clean checkout registers everything and empties the cart."""
        result = services.checkout.checkout("u1", _cart(*three_events))

        outcome = result.data
        assert outcome.status is CheckoutStatus.COMPLETED
        assert len(outcome.cart) == 0
        assert len(outcome.registered) == 3
        regs = services.ledger.get_user_registrations("u1").data
        assert set(regs) == {e.id.value for e in three_events}

    def test_partial_failure_keeps_failed_item(self, services, three_events):
        """With the second of three items failing, the cart keeps exactly that item."""
        first, second, third = three_events
        services.events.toggle_event_status(second.id.value, False)

        outcome = services.checkout.checkout("u1", _cart(*three_events)).data
        assert outcome.status is CheckoutStatus.PARTIAL
        assert outcome.cart.event_ids == [second.id.value]
        assert [i.event_id for i in outcome.registered] == [first.id.value, third.id.value]
        assert outcome.failed[0].error.code is ErrorCode.EVENT_INACTIVE
        assert outcome.message.startswith("Some registrations failed:\nDesign Duel: ")
        assert outcome.message.endswith("You can retry the failed registrations.")

    def test_all_fail(self, services, three_events):
        """When nothing registers the whole cart is kept."""
        for event in three_events:
            services.events.toggle_event_status(event.id.value, False)
        cart = _cart(*three_events)

        outcome = services.checkout.checkout("u1", cart).data
        assert outcome.status is CheckoutStatus.FAILED
        assert outcome.cart == cart
        assert outcome.message.startswith("All registrations failed:")
        assert outcome.message.endswith("Please try again or contact support.")

    def test_capacity_failure_reported_per_item(self, services, make_event, register):
        """A full event fails with the capacity message, the rest still registers."""
        full = make_event(title="Data Detectives", maxTickets=1)
        open_event = make_event(title="Story Weavers")
        register("someone", full)

        outcome = services.checkout.checkout("u1", _cart(full, open_event)).data
        assert outcome.status is CheckoutStatus.PARTIAL
        assert outcome.failed[0].error.message == "Event is at full capacity"
        assert outcome.cart.event_ids == [full.id.value]

    def test_unauthenticated(self, services, three_events):
        """Checkout without a user fails and registers nothing."""
        result = services.checkout.checkout(None, _cart(*three_events))
        assert result.error.code is ErrorCode.NOT_AUTHENTICATED
        assert services.ledger.get_event_stats().data.total_registrations == 0

    def test_empty_cart(self, services):
        """An empty cart checks out to an empty outcome."""
        outcome = services.checkout.checkout("u1", Cart()).data
        assert outcome.status is CheckoutStatus.EMPTY
        assert not outcome.registered and not outcome.failed

    def test_registration_details(self, services, make_event):
        """Registrations carry the event name, price and a payment id."""
        event = make_event(title="Code Clash", price=249)
        services.checkout.checkout("u1", _cart(event))

        reg = services.ledger.get_user_registrations("u1").data[event.id.value]
        assert reg.event_name == "Code Clash"
        assert reg.amount.to_raw() == 249
        assert reg.venue == "TBD"
        assert re.fullmatch(r"TXN\d+[0-9A-Z]{5}", reg.payment_id)


class TestToggleCart:
    """Tests for cart gating on toggle."""

    def _toggle(self, services, cart, event, **overrides):
        kwargs = {
            "user_id": "u1",
            "user_registrations": {},
            "participant_counts": {},
            "event_bans": {},
            **overrides,
        }
        return services.checkout.toggle_cart(cart, event, **kwargs)

    def test_add_then_remove(self, services, make_event):
        """Toggling twice adds then removes."""
        event = make_event()
        added = self._toggle(services, Cart(), event)
        assert added.notice is CartNotice.ADDED
        removed = self._toggle(services, added.cart, event)
        assert removed.notice is CartNotice.REMOVED
        assert len(removed.cart) == 0

    def test_login_required(self, services, make_event):
        """Anonymous users cannot change the cart."""
        toggle = self._toggle(services, Cart(), make_event(), user_id=None)
        assert toggle.notice is CartNotice.LOGIN_REQUIRED
        assert not toggle.changed

    def test_already_registered(self, services, make_event):
        """An event the user holds a registration for is not added."""
        event = make_event()
        toggle = self._toggle(
            services, Cart(), event, user_registrations={event.id.value: object()}
        )
        assert toggle.notice is CartNotice.ALREADY_REGISTERED
        assert len(toggle.cart) == 0

    def test_inactive_event_never_changes_cart(self, services, make_event):
        """An inactive event can be neither added nor removed."""
        event = make_event()
        in_cart = _cart(event)
        services.events.toggle_event_status(event.id.value, False)
        inactive = services.events.get_event(event.id.value).data

        toggle = self._toggle(services, in_cart, inactive)
        assert toggle.notice is CartNotice.EVENT_INACTIVE
        assert toggle.cart is in_cart

    def test_banned_from_event(self, services, make_event):
        """An event ban blocks adding the event."""
        event = make_event()
        services.bans.ban_user_from_event("u1", event.id.value, True)
        bans = services.bans.list_event_bans("u1").data

        toggle = self._toggle(services, Cart(), event, event_bans=bans)
        assert toggle.notice is CartNotice.BANNED_FROM_EVENT

    def test_full_event(self, services, make_event):
        """An event at capacity is not added."""
        event = make_event(maxTickets=2)
        toggle = self._toggle(
            services, Cart(), event, participant_counts={event.id.value: 2}
        )
        assert toggle.notice is CartNotice.EVENT_FULL
        assert len(toggle.cart) == 0


class TestPaymentId:
    """Tests for payment id generation."""

    def test_format(self):
        """TXN, the millisecond timestamp, then five base36 characters."""
        payment_id = generate_payment_id(1700000000000, random.Random(7))
        assert payment_id.startswith("TXN1700000000000")
        assert re.fullmatch(r"TXN1700000000000[0-9A-Z]{5}", payment_id)
