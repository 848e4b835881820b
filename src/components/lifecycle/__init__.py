"""Lifecycle component - manages content publication status."""

from src.components.lifecycle.component import LifecycleComponent
from src.components.lifecycle.models import (
    ArchiveInput,
    LifecycleError,
    PublishInput,
    TransitionInput,
    TransitionOutput,
    UnpublishInput,
)
from src.components.lifecycle.ports import CacheInvalidationPort, ClockPort, ContentRepoPort

__all__ = [
    # Component
    "LifecycleComponent",
    # Models
    "TransitionInput",
    "PublishInput",
    "UnpublishInput",
    "ArchiveInput",
    "TransitionOutput",
    "LifecycleError",
    # Ports
    "ContentRepoPort",
    "CacheInvalidationPort",
    "ClockPort",
]
