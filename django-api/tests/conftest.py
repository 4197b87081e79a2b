"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from typing import Any, Callable

import pytest
from rest_framework.test import APIClient

from conference.domain.models import Event, RegistrationDetails
from conference.services import Services, build_services
from conference.stores import InMemoryDocumentStore, StoreError

FIXED_NOW = datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)


class FailingStore(InMemoryDocumentStore):
    """In-memory store whose writes fail under chosen path prefixes."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fail_on: set[str] = set()

    def _check(self, path: str) -> None:
        if any(path.startswith(prefix) for prefix in self.fail_on):
            raise StoreError(f"Write to {path} refused")

    def set(self, path: str, value: Any) -> None:
        self._check(path)
        super().set(path, value)

    def update(self, path: str, fields: dict[str, Any]) -> None:
        self._check(path)
        super().update(path, fields)

    def transaction(self, path: str, update_fn: Callable[[Any | None], Any]) -> Any:
        self._check(path)
        return super().transaction(path, update_fn)


def details_for(event: Event, payment_id: str = "TXN1") -> RegistrationDetails:
    return RegistrationDetails(
        event_id=event.id.value,
        event_name=event.title,
        event_date="2025-03-01",
        event_time="TBD",
        venue="TBD",
        payment_id=payment_id,
        amount=event.price,
    )


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return FailingStore()


@pytest.fixture
def services(store: InMemoryDocumentStore) -> Services:
    return build_services(store, lambda: FIXED_NOW)


@pytest.fixture
def make_event(services: Services) -> Callable[..., Event]:
    def _make(**overrides: Any) -> Event:
        data = {
            "title": "Code Clash",
            "category": "Technology",
            "price": 249,
            "maxTickets": 75,
            **overrides,
        }
        return services.events.create_event(data).unwrap()

    return _make


@pytest.fixture
def register(services: Services) -> Callable[[str, Event], Any]:
    def _register(user_id: str, event: Event):
        return services.ledger.register_for_event(user_id, event.id.value, details_for(event))

    return _register
