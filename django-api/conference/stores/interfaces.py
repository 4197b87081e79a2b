"""Store interfaces (repository pattern).

The conference core talks to a path-addressed hierarchical document store.
Stores must be swappable; services depend on this interface only.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable


class StoreError(Exception):
    """Raised when the underlying storage fails (I/O, connection, locking)."""


class DocumentStore(ABC):
    """Interface for keyed document persistence.

    Paths are slash-separated keys such as ``registrations/{userId}/{eventId}``.
    Reading a path returns the whole subtree under it as nested dicts.
    """

    @abstractmethod
    def get(self, path: str) -> Any | None:
        """Return the value at path, or None if absent."""
        ...

    @abstractmethod
    def set(self, path: str, value: Any) -> None:
        """Overwrite the value at path. Setting None removes it."""
        ...

    @abstractmethod
    def update(self, path: str, fields: dict[str, Any]) -> None:
        """Merge fields into the mapping at path, creating it if absent.

        A field whose value is None is removed.
        """
        ...

    @abstractmethod
    def remove(self, path: str) -> None:
        """Remove the value at path and everything under it."""
        ...

    @abstractmethod
    def generate_id(self, parent_path: str) -> str:
        """Return a new unique child key for parent_path."""
        ...

    @abstractmethod
    def transaction(self, path: str, update_fn: Callable[[Any | None], Any]) -> Any:
        """Atomically replace the value at path with ``update_fn(current)``.

        No other writer can change the value between the read and the write.
        If update_fn raises, nothing is written and the exception propagates.
        Returns the committed value.
        """
        ...
