"""Django signals for cache invalidation.

The event listing embeds participant counts, so it goes stale whenever an
event, a registration or a seat changes.
"""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from conference.models import Document
from conference.stores.paths import ADMISSIONS, EVENTS, REGISTRATIONS

EVENT_LIST_KEY = "events:list"


def event_detail_key(event_id: str) -> str:
    return f"events:{event_id}"


@receiver([post_save, post_delete], sender=Document)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when a document under events/, registrations/ or admissions/ changes."""
    root, *rest = instance.segments
    if root == EVENTS:
        if rest:
            keys = [event_detail_key(rest[0])]
        else:
            value = instance.value if isinstance(instance.value, dict) else {}
            keys = [event_detail_key(eid) for eid in value]
        cache.delete_many([EVENT_LIST_KEY, *keys])
    elif root in (REGISTRATIONS, ADMISSIONS):
        cache.delete(EVENT_LIST_KEY)
