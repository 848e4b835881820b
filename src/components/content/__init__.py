"""
Content component - Content publishing and ordering engine.

Slug generation, lifecycle transitions and display ordering per collection.
"""

from ._impl import EDITABLE_FIELDS, ContentService
from .legacy import legacy_groups, legacy_item
from .component import (
    run_create,
    run_delete,
    run_get,
    run_list,
    run_list_published,
    run_move,
    run_reorder,
    run_transition,
    run_update,
    to_validation_error,
)
from .models import (
    ContentListOutput,
    ContentOperationOutput,
    ContentOutput,
    ContentValidationError,
    CreateContentInput,
    DeleteContentInput,
    GetContentInput,
    ListContentInput,
    MoveContentInput,
    ReorderContentInput,
    TransitionContentInput,
    UpdateContentInput,
)
from .ports import CacheInvalidationPort, ClockPort, ContentRepoPort

__all__ = [
    # Entry points
    "run_create",
    "run_update",
    "run_get",
    "run_list",
    "run_list_published",
    "run_transition",
    "run_move",
    "run_reorder",
    "run_delete",
    "to_validation_error",
    # Input models
    "CreateContentInput",
    "UpdateContentInput",
    "GetContentInput",
    "ListContentInput",
    "TransitionContentInput",
    "MoveContentInput",
    "ReorderContentInput",
    "DeleteContentInput",
    # Output models
    "ContentOutput",
    "ContentListOutput",
    "ContentOperationOutput",
    "ContentValidationError",
    # Ports
    "ContentRepoPort",
    "ClockPort",
    "CacheInvalidationPort",
    # Service
    "ContentService",
    "EDITABLE_FIELDS",
    # Legacy import
    "legacy_groups",
    "legacy_item",
]
