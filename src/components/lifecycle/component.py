"""
Lifecycle component - draft / published / archived transitions.

Every write to is_active, published_at and archived_at goes through here,
so stored flags and derived status can never diverge.

State Machine:
- draft → published (completeness check; published_at set once)
- draft → archived
- published → draft (unpublish; published_at kept as history)
- published → archived (published_at kept)
- archived → draft
- archived → published (published_at only set if still null)
"""

import logging
from collections.abc import Iterable, Mapping
from uuid import UUID

from src.components.lifecycle.models import (
    ArchiveInput,
    LifecycleError,
    PublishInput,
    TransitionInput,
    TransitionOutput,
    UnpublishInput,
)
from src.components.lifecycle.ports import CacheInvalidationPort, ClockPort, ContentRepoPort
from src.domain.entities import ContentItem, ContentStatus
from src.domain.errors import ContentEngineError, ItemNotFoundError
from src.domain.state import DEFAULT_PUBLISH_REQUIRES, DEFAULT_TRANSITIONS, transition

logger = logging.getLogger(__name__)

# Type alias for all supported inputs
LifecycleInput = TransitionInput | PublishInput | UnpublishInput | ArchiveInput


class LifecycleComponent:
    """Component for managing content lifecycle transitions."""

    def __init__(
        self,
        content_repo: ContentRepoPort,
        clock: ClockPort,
        invalidator: CacheInvalidationPort | None = None,
        transitions: Mapping[ContentStatus, Iterable[ContentStatus]] | None = None,
        publish_requires: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        self._content_repo = content_repo
        self._clock = clock
        self._invalidator = invalidator
        self._transitions = transitions if transitions is not None else DEFAULT_TRANSITIONS
        self._publish_requires = publish_requires or {}

    def run(self, input_data: LifecycleInput) -> TransitionOutput:
        """Main dispatcher - routes to the target status based on input type."""
        if isinstance(input_data, TransitionInput):
            target: ContentStatus = input_data.to_status
        elif isinstance(input_data, PublishInput):
            target = "published"
        elif isinstance(input_data, UnpublishInput):
            target = "draft"
        elif isinstance(input_data, ArchiveInput):
            target = "archived"
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

        item = self._content_repo.get_by_id(input_data.item_id)
        previous = item.status if item else None
        try:
            updated = self.transition_status(input_data.item_id, target)
        except ContentEngineError as e:
            return TransitionOutput(
                item=item,
                previous_status=previous,
                changed=False,
                errors=[
                    LifecycleError(
                        code=getattr(e, "reason", e.code),
                        message=e.message,
                        field=e.field,
                    )
                ],
                success=False,
            )

        return TransitionOutput(
            item=updated,
            previous_status=previous,
            changed=previous != updated.status,
            errors=[],
            success=True,
        )

    def transition_status(self, item_id: UUID, to_status: ContentStatus) -> ContentItem:
        """
        Transition an item and persist the new flags.

        Same-status requests are no-ops: nothing is written and no hook fires.
        Raises ValidationError (no mutation) or ConcurrencyConflictError.
        """
        item = self._content_repo.get_by_id(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)

        previous = item.status
        if previous == to_status:
            return item

        required = self._publish_requires.get(item.collection, DEFAULT_PUBLISH_REQUIRES)
        updated = transition(
            item,
            to_status,
            self._clock.now(),
            transitions=self._transitions,
            publish_requires=required,
        )
        [saved] = self._content_repo.commit_group(upserts=[updated])
        logger.info("Transitioned %s %s: %s -> %s", item.collection, item.id, previous, to_status)

        self._notify(saved, previous)
        return saved

    def _notify(self, item: ContentItem, previous: ContentStatus) -> None:
        if self._invalidator is None:
            return
        try:
            self._invalidator.invalidate(item, previous)
        except Exception:
            # Fire-and-forget: the transition is already committed
            logger.exception("Cache invalidation failed for %s", item.id)
