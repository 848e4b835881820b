"""
Ordering component - Contiguous display order per sibling group.
"""

from ._impl import (
    OrderingService,
    OrderPlan,
    apply_plan,
    check_permutation,
    is_contiguous,
    next_order,
    plan_move,
    plan_remove,
    plan_reorder,
    plan_updates,
    renumber,
    sort_siblings,
)
from .component import run_heal, run_move, run_remove, run_reorder
from .models import (
    HealGroupInput,
    MoveItemInput,
    OrderingError,
    OrderingOutput,
    RemoveItemInput,
    ReorderGroupInput,
)
from .ports import ClockPort, OrderingRepoPort

__all__ = [
    # Entry points
    "run_move",
    "run_reorder",
    "run_remove",
    "run_heal",
    # Input models
    "MoveItemInput",
    "ReorderGroupInput",
    "RemoveItemInput",
    "HealGroupInput",
    # Output models
    "OrderingOutput",
    "OrderingError",
    # Ports
    "OrderingRepoPort",
    "ClockPort",
    # Functional core
    "OrderingService",
    "OrderPlan",
    "sort_siblings",
    "is_contiguous",
    "next_order",
    "renumber",
    "plan_remove",
    "plan_move",
    "plan_reorder",
    "plan_updates",
    "check_permutation",
    "apply_plan",
]
