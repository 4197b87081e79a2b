"""In-process implementation of the DocumentStore.

Holds the whole tree in a nested dict behind a re-entrant lock, so
transactions are serialized against every other write.
"""

import copy
import threading
import uuid
from typing import Any, Callable

from conference.stores.interfaces import DocumentStore
from conference.stores.paths import descend, merge_fields, splice, split_path


class InMemoryDocumentStore(DocumentStore):
    """Thread-safe nested-dict store for tests and local runs."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._root: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._lock = threading.RLock()

    def get(self, path: str) -> Any | None:
        with self._lock:
            return copy.deepcopy(descend(self._root, split_path(path)))

    def set(self, path: str, value: Any) -> None:
        segments = split_path(path)
        with self._lock:
            self._root = splice(self._root, segments, value) or {}

    def update(self, path: str, fields: dict[str, Any]) -> None:
        segments = split_path(path)
        with self._lock:
            merged = merge_fields(descend(self._root, segments), fields)
            self._root = splice(self._root, segments, merged) or {}

    def remove(self, path: str) -> None:
        self.set(path, None)

    def generate_id(self, parent_path: str) -> str:
        split_path(parent_path)
        return uuid.uuid4().hex

    def transaction(self, path: str, update_fn: Callable[[Any | None], Any]) -> Any:
        segments = split_path(path)
        with self._lock:
            current = copy.deepcopy(descend(self._root, segments))
            new_value = update_fn(current)
            self._root = splice(self._root, segments, new_value) or {}
            return copy.deepcopy(new_value)

    def snapshot(self) -> dict[str, Any]:
        """Return a deep copy of the whole tree."""
        with self._lock:
            return copy.deepcopy(self._root)
