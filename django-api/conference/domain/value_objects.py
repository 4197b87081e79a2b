"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Self

# Characters the document store reserves inside a path segment.
_RESERVED_KEY_CHARS = frozenset("/.#$[]")


def _validate_key(value: str, kind: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{kind} cannot be empty")
    if _RESERVED_KEY_CHARS.intersection(value):
        raise ValueError(f"{kind} contains a reserved character")


@dataclass(frozen=True)
class EventId:
    """Store-generated identifier for an Event."""

    value: str

    def __post_init__(self) -> None:
        _validate_key(self.value, "EventId")

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=value.strip())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UserId:
    """Identifier handed out by the identity provider."""

    value: str

    def __post_init__(self) -> None:
        _validate_key(self.value, "UserId")

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=value.strip())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def from_raw(cls, raw: object) -> Self:
        """Build from a stored number or numeric string; missing means zero."""
        if raw is None or raw == "":
            return cls(amount=Decimal("0"))
        try:
            return cls(amount=Decimal(str(raw)))
        except InvalidOperation as exc:
            raise ValueError(f"Invalid money amount: {raw!r}") from exc

    def to_raw(self) -> int | float:
        if self.amount == self.amount.to_integral_value():
            return int(self.amount)
        return float(self.amount)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Positive ticket limit of an event."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")

    @classmethod
    def from_raw(cls, raw: object) -> Self | None:
        """Parse a stored ``maxTickets``; absent or falsy means unlimited."""
        if not raw:
            return None
        value = int(raw)
        if value <= 0:
            return None
        return cls(value=value)

    def is_reached_by(self, count: int) -> bool:
        return count >= self.value

    def occupancy(self, count: int) -> float:
        return count / self.value if self.value else 1.0


class EventStatus(Enum):
    """Whether an event can be ordered."""

    ACTIVE = "active"
    INACTIVE = "inactive"

    @classmethod
    def from_flag(cls, active: object) -> "EventStatus":
        # Only an explicit false deactivates; a missing flag means active.
        return cls.INACTIVE if active is False else cls.ACTIVE

    @property
    def is_active(self) -> bool:
        return self is EventStatus.ACTIVE


class RegistrationStatus(Enum):
    REGISTERED = "registered"
    CONFIRMED = "confirmed"

    @classmethod
    def from_raw(cls, raw: object) -> "RegistrationStatus":
        # Unknown or missing statuses read as a plain registration.
        try:
            return cls(raw)
        except ValueError:
            return cls.REGISTERED


@dataclass(frozen=True)
class BanState:
    """Either not banned, or banned since a point in time.

    A not-banned state never carries a timestamp.
    """

    banned: bool
    banned_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.banned and self.banned_at is not None:
            raise ValueError("A lifted ban cannot carry a timestamp")

    @classmethod
    def not_banned(cls) -> Self:
        return cls(banned=False)

    @classmethod
    def banned_since(cls, at: datetime | None) -> Self:
        return cls(banned=True, banned_at=at)
