"""Django ORM implementation of the DocumentStore.

Every written path becomes one Document row holding the JSON value under
it. A read resolves against the deepest row at or above the path, or else
assembles the subtree from the rows below it. Writes that land inside an
existing row are spliced into that row's value.
"""

import logging
import uuid
from typing import Any, Callable

from django.db import DatabaseError, transaction

from conference.models import Document
from conference.stores.interfaces import DocumentStore, StoreError
from conference.stores.paths import descend, merge_fields, splice, split_path

logger = logging.getLogger(__name__)


def _ancestors(segments: list[str]) -> list[str]:
    return ["/".join(segments[:i]) for i in range(1, len(segments))]


class DjangoDocumentStore(DocumentStore):
    """PostgreSQL-backed document store using Django ORM."""

    def get(self, path: str) -> Any | None:
        segments = split_path(path)
        try:
            return self._read(segments)
        except DatabaseError as exc:
            raise StoreError(f"Failed to read {path}") from exc

    def set(self, path: str, value: Any) -> None:
        segments = split_path(path)
        try:
            with transaction.atomic():
                self._write(segments, value)
        except DatabaseError as exc:
            raise StoreError(f"Failed to write {path}") from exc

    def update(self, path: str, fields: dict[str, Any]) -> None:
        segments = split_path(path)
        try:
            with transaction.atomic():
                self._lock_owner(segments)
                merged = merge_fields(self._read(segments), fields)
                self._write(segments, merged)
        except DatabaseError as exc:
            raise StoreError(f"Failed to update {path}") from exc

    def remove(self, path: str) -> None:
        self.set(path, None)

    def generate_id(self, parent_path: str) -> str:
        split_path(parent_path)
        return uuid.uuid4().hex

    def transaction(self, path: str, update_fn: Callable[[Any | None], Any]) -> Any:
        segments = split_path(path)
        try:
            with transaction.atomic():
                self._lock_owner(segments)
                new_value = update_fn(self._read(segments))
                self._write(segments, new_value)
                return new_value
        except DatabaseError as exc:
            raise StoreError(f"Transaction on {path} failed") from exc

    def _owner(self, segments: list[str], *, for_update: bool = False) -> Document | None:
        """Return the deepest row at or above the path."""
        candidates = _ancestors(segments) + ["/".join(segments)]
        qs = Document.objects.filter(path__in=candidates)
        if for_update:
            qs = qs.select_for_update()
        rows = sorted(qs, key=lambda row: len(row.segments))
        return rows[-1] if rows else None

    def _lock_owner(self, segments: list[str]) -> Document:
        """Lock the row owning the path, materializing one if none exists."""
        owner = self._owner(segments, for_update=True)
        if owner is not None:
            return owner
        path = "/".join(segments)
        current = self._assemble(path)
        Document.objects.filter(path__startswith=f"{path}/").delete()
        row, _ = Document.objects.select_for_update().get_or_create(
            path=path, defaults={"value": current}
        )
        return row

    def _read(self, segments: list[str]) -> Any | None:
        owner = self._owner(segments)
        if owner is not None:
            return descend(owner.value, segments[len(owner.segments):])
        return self._assemble("/".join(segments))

    def _assemble(self, path: str) -> Any | None:
        tree: Any = None
        base = len(path.split("/"))
        for row in Document.objects.filter(path__startswith=f"{path}/"):
            if row.value is None:
                continue
            tree = splice(tree, row.segments[base:], row.value)
        return tree

    def _write(self, segments: list[str], value: Any) -> None:
        path = "/".join(segments)
        owner = self._owner(segments)
        if owner is not None and owner.path != path:
            relative = segments[len(owner.segments):]
            owner.value = splice(owner.value, relative, value)
            if owner.value is None:
                owner.delete()
            else:
                owner.save(update_fields=["value", "updated_at"])
            return

        for row in Document.objects.filter(path__startswith=f"{path}/"):
            row.delete()
        if value is None:
            Document.objects.filter(path=path).delete()
            return
        Document.objects.update_or_create(path=path, defaults={"value": value})
        logger.debug("Wrote document %s", path)
