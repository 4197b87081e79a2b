"""Process-wide service wiring, built from Django settings."""

import functools

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver
from django.utils.module_loading import import_string

from conference.services import Services, build_services


@functools.lru_cache(maxsize=None)
def get_services() -> Services:
    store_class = import_string(settings.CONFERENCE_DOCUMENT_STORE)
    return build_services(
        store_class(),
        venue=settings.CONFERENCE_CHECKOUT_VENUE,
        event_time=settings.CONFERENCE_CHECKOUT_TIME,
    )


@receiver(setting_changed)
def reset_services(setting: str, **kwargs) -> None:
    if setting.startswith("CONFERENCE_"):
        get_services.cache_clear()
