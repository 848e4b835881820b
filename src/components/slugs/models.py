"""
Slugs component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# --- Validation Errors ---


@dataclass(frozen=True)
class SlugValidationError:
    """Slug validation error."""

    code: str
    message: str
    field: str | None = None
    suggestion: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class GenerateSlugInput:
    """Input for generating a slug from a title."""

    title: str
    existing_slugs: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class CheckSlugInput:
    """Input for validating an editor-chosen slug."""

    slug: str
    collection: str
    existing_slugs: frozenset[str] = field(default_factory=frozenset)


# --- Output Models ---


@dataclass(frozen=True)
class SlugOutput:
    """Output from slug operations."""

    slug: str | None
    errors: list[SlugValidationError]
    success: bool
