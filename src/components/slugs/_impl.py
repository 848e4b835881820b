"""
Slug generation - Functional Core.

Turns free-text titles into URL-safe slugs that are unique within a
collection. Pure functions: the live uniqueness check happens in the
repository, atomically with the write.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

from src.domain.errors import InvalidTitleError, SlugConflictError, ValidationError

DEFAULT_SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-{2,}")


def normalize_title(title: str) -> str:
    """
    Normalize a title into a bare slug candidate (may be empty).

    Diacritics are folded to ASCII so "Café" becomes "cafe" rather than "caf".
    """
    text = unicodedata.normalize("NFKD", title or "")
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower().strip()
    text = _DISALLOWED.sub("", text)
    text = _WHITESPACE.sub("-", text)
    text = _HYPHENS.sub("-", text)
    return text.strip("-")


def is_valid_slug(slug: str, pattern: str = DEFAULT_SLUG_PATTERN) -> bool:
    """Check if slug is valid (lowercase alphanumeric + hyphens by default)."""
    return bool(re.match(pattern, slug or ""))


def next_free_slug(base: str, existing: Iterable[str]) -> str:
    """
    Return base, or base-2, base-3, ... whichever is free first.

    Terminates within len(existing) + 1 candidates.
    """
    taken = set(existing)
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


def _trim(base: str, limit: int | None) -> str:
    return base if limit is None else base[:limit].rstrip("-")


def generate_slug(
    title: str,
    existing_slugs: Iterable[str],
    max_length: int | None = None,
) -> str:
    """
    Generate a unique slug for title.

    With max_length the base is cut back so the slug, suffix included,
    stays within the limit.

    Raises:
        InvalidTitleError: normalization produced an empty candidate.
    """
    base = _trim(normalize_title(title), max_length)
    if not base:
        raise InvalidTitleError(title)

    taken = set(existing_slugs)
    if base not in taken:
        return base
    n = 2
    while True:
        suffix = f"-{n}"
        limit = max_length - len(suffix) if max_length is not None else None
        candidate = _trim(base, limit) + suffix
        if candidate not in taken:
            return candidate
        n += 1


def check_manual_slug(
    slug: str,
    existing_slugs: Iterable[str],
    collection: str,
    pattern: str = DEFAULT_SLUG_PATTERN,
    max_length: int | None = None,
) -> str:
    """
    Validate an editor-chosen slug. Manual slugs are never auto-suffixed.

    Raises:
        ValidationError: slug does not match the allowed format.
        SlugConflictError: slug is already taken (carries a suggestion).
    """
    slug = (slug or "").strip()
    if not is_valid_slug(slug, pattern):
        raise ValidationError(
            "Slug must contain only lowercase letters, numbers, and hyphens",
            field="slug",
            reason="slug_invalid",
        )
    if max_length is not None and len(slug) > max_length:
        raise ValidationError(
            f"Slug must be {max_length} characters or less",
            field="slug",
            reason="slug_too_long",
        )

    taken = set(existing_slugs)
    if slug in taken:
        raise SlugConflictError(slug, collection, suggestion=next_free_slug(slug, taken))
    return slug
