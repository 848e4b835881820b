"""
Slugs component - URL slug generation per content collection.
"""

from ._impl import (
    DEFAULT_SLUG_PATTERN,
    check_manual_slug,
    generate_slug,
    is_valid_slug,
    next_free_slug,
    normalize_title,
)
from .component import run_check, run_generate
from .models import CheckSlugInput, GenerateSlugInput, SlugOutput, SlugValidationError

__all__ = [
    # Entry points
    "run_generate",
    "run_check",
    # Models
    "GenerateSlugInput",
    "CheckSlugInput",
    "SlugOutput",
    "SlugValidationError",
    # Functional core
    "DEFAULT_SLUG_PATTERN",
    "normalize_title",
    "generate_slug",
    "check_manual_slug",
    "is_valid_slug",
    "next_free_slug",
]
