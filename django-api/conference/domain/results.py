"""Result values returned by every public service operation."""

from dataclasses import dataclass, field
from typing import Any, Generic, Self, TypeVar

from conference.domain.errors import DomainError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation: success with data, or failure with an error.

    A failed batch may still carry its partial data.
    """

    success: bool
    data: T | None = None
    error: DomainError | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> Self:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: DomainError, data: T | None = None) -> Self:
        return cls(success=False, data=data, error=error)

    def unwrap(self) -> T:
        """Return data, or raise the carried error."""
        if not self.success and self.error is not None:
            raise self.error
        return self.data  # type: ignore[return-value]


@dataclass(frozen=True)
class BatchFailure:
    """One failed item of a batch operation."""

    item: Any
    error: DomainError


@dataclass(frozen=True)
class BatchResult:
    """Per-item outcome of a sequential batch; never atomic."""

    succeeded: tuple[Any, ...] = ()
    failed: tuple[BatchFailure, ...] = ()

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def with_success(self, item: Any) -> "BatchResult":
        return BatchResult(succeeded=self.succeeded + (item,), failed=self.failed)

    def with_failure(self, item: Any, error: DomainError) -> "BatchResult":
        return BatchResult(
            succeeded=self.succeeded,
            failed=self.failed + (BatchFailure(item=item, error=error),),
        )


@dataclass(frozen=True)
class BanActions:
    """Bulk ban actions offered for a selection of users."""

    can_ban: bool = False
    can_unban: bool = False
    mixed: bool = False
    counts: dict[str, int] = field(default_factory=dict)

    @classmethod
    def for_counts(cls, banned: int, unbanned: int) -> Self:
        return cls(
            can_ban=unbanned > 0 and banned == 0,
            can_unban=banned > 0 and unbanned == 0,
            mixed=banned > 0 and unbanned > 0,
            counts={"banned": banned, "unbanned": unbanned},
        )
