"""
Page-cache invalidation hooks.

Called after a status transition (or deletion of a published item) so the
public pages that render the item can be revalidated. Fire-and-forget:
callers log and ignore failures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from src.domain.entities import ContentItem, ContentStatus
from src.rules.models import Rules

logger = logging.getLogger(__name__)


@dataclass
class InvalidationEvent:
    """One invalidation request."""

    collection: str
    item_id: str
    previous_status: ContentStatus
    status: ContentStatus
    paths: list[str] = field(default_factory=list)


class NullCacheInvalidator:
    """Discards every notification."""

    def invalidate(self, item: ContentItem, previous_status: ContentStatus) -> None:
        return None


class LoggingCacheInvalidator:
    """
    Logs the public paths to revalidate and keeps the last events.

    A real deployment swaps this for a CDN or framework revalidation call.
    """

    def __init__(self, rules: Rules, history_size: int = 100) -> None:
        self._rules = rules
        self._history_size = history_size
        self.events: list[InvalidationEvent] = []

    def paths_for(self, item: ContentItem) -> list[str]:
        config = self._rules.collections.get(item.collection)
        if config is None:
            return []
        paths = []
        url = config.public_url(item.slug, item.group_id)
        if url:
            paths.append(url)
        # List pages embed the item too
        index = config.public_path.split("{", 1)[0].rstrip("/") if config.public_path else ""
        if index and index not in paths:
            paths.append(index)
        return paths

    def invalidate(self, item: ContentItem, previous_status: ContentStatus) -> None:
        event = InvalidationEvent(
            collection=item.collection,
            item_id=str(item.id),
            previous_status=previous_status,
            status=item.status,
            paths=self.paths_for(item),
        )
        self.events.append(event)
        del self.events[: -self._history_size]
        logger.info(
            "Invalidate %s %s (%s -> %s): %s",
            event.collection,
            event.item_id,
            event.previous_status,
            event.status,
            ", ".join(event.paths) or "-",
        )
