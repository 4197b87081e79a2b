"""Client-side cart state.

The cart is an immutable value: every transition returns a new Cart, so
handlers can keep it in the session and hand it to the checkout service
without shared mutable state. Quantity is always exactly one per event.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Iterator, Self

from conference.domain.models import Event
from conference.domain.value_objects import Money


@dataclass(frozen=True)
class CartItem:
    """One ticket for one event."""

    event: Event
    quantity: int = 1

    @property
    def event_id(self) -> str:
        return self.event.id.value

    @property
    def subtotal(self) -> Money:
        return Money(amount=self.event.price.amount * self.quantity)

    def to_session(self) -> dict[str, Any]:
        return {"event": self.event.to_document(), "quantity": self.quantity}

    @classmethod
    def from_session(cls, data: dict[str, Any]) -> Self:
        doc = data["event"]
        return cls(event=Event.from_document(doc["id"], doc), quantity=1)


@dataclass(frozen=True)
class Cart:
    """Ordered set of cart items keyed by event id."""

    items: tuple[CartItem, ...] = ()

    def __iter__(self) -> Iterator[CartItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, event_id: object) -> bool:
        return any(item.event_id == event_id for item in self.items)

    @property
    def event_ids(self) -> list[str]:
        return [item.event_id for item in self.items]

    def add(self, event: Event) -> "Cart":
        """Add one ticket; adding an event already present is a no-op."""
        if event.id.value in self:
            return self
        return Cart(items=self.items + (CartItem(event=event),))

    def remove(self, event_id: str) -> "Cart":
        return Cart(items=tuple(i for i in self.items if i.event_id != event_id))

    def toggle(self, event: Event) -> "Cart":
        if event.id.value in self:
            return self.remove(event.id.value)
        return self.add(event)

    def clear(self) -> "Cart":
        return Cart()

    def retain_failed(self, failed_ids: Iterable[str]) -> "Cart":
        """Keep only the items whose event id is in ``failed_ids``, in cart order."""
        keep = set(failed_ids)
        return Cart(items=tuple(i for i in self.items if i.event_id in keep))

    def total_price(self) -> Money:
        return Money(amount=sum((i.subtotal.amount for i in self.items), Decimal("0")))

    def total_items(self) -> int:
        return sum(i.quantity for i in self.items)

    def to_session(self) -> list[dict[str, Any]]:
        return [item.to_session() for item in self.items]

    @classmethod
    def from_session(cls, data: list[dict[str, Any]] | None) -> Self:
        return cls(items=tuple(CartItem.from_session(d) for d in data or ()))
