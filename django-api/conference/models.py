"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

from django.db import models


class Document(models.Model):
    """One written path of the document store and the JSON value under it."""

    path = models.CharField(max_length=512, primary_key=True)
    value = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["path"]

    def __str__(self) -> str:
        return self.path

    @property
    def segments(self) -> list[str]:
        return self.path.split("/")
