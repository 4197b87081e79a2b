"""Operation boundary shared by all services.

Services raise domain errors internally. Public operations are wrapped with
``@operation`` so callers always receive a Result and never a raw store
failure. Batch operations go through ``run_batch``, which runs every item
and reports per-item outcomes instead of stopping at the first failure.
"""

import functools
import logging
from typing import Any, Callable, ParamSpec, TypeVar

from conference.domain.errors import DomainError, PartialBatchFailure, StoreUnavailableError
from conference.domain.results import BatchResult, Result
from conference.stores.interfaces import StoreError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def operation(func: Callable[P, T]) -> Callable[P, Result[T]]:
    """Convert the outcome of func into a Result."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
        try:
            value = func(*args, **kwargs)
        except DomainError as exc:
            logger.info("%s rejected: %s", func.__qualname__, exc)
            return Result.fail(exc)
        except StoreError:
            logger.exception("%s failed on the document store", func.__qualname__)
            return Result.fail(StoreUnavailableError())
        if isinstance(value, Result):
            return value
        return Result.ok(value)

    return wrapper


def run_batch(items: list[Any], apply: Callable[[Any], Any], label: str = "item") -> BatchResult:
    """Apply to every item in order, collecting failures."""
    batch = BatchResult()
    for item in items:
        try:
            apply(item)
        except DomainError as exc:
            batch = batch.with_failure(item, exc)
        except StoreError:
            logger.exception("Store failure while processing %s %s", label, item)
            batch = batch.with_failure(item, StoreUnavailableError())
        else:
            batch = batch.with_success(item)
    return batch


def batch_outcome(batch: BatchResult, what: str) -> Result[BatchResult]:
    """Successful Result when nothing failed, else a failure carrying the batch."""
    if batch.success:
        return Result.ok(batch)
    logger.warning("Failed to %s for %d of %d items", what, len(batch.failed), batch.total)
    return Result.fail(PartialBatchFailure(batch.failed, batch.total), data=batch)
