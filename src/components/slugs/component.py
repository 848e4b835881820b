"""
Slugs component - URL slug generation and validation.

Shell Layer - converts domain errors into output models.
"""

from __future__ import annotations

from src.domain.errors import ContentEngineError, SlugConflictError

from ._impl import DEFAULT_SLUG_PATTERN, check_manual_slug, generate_slug
from .models import CheckSlugInput, GenerateSlugInput, SlugOutput, SlugValidationError


def _error_output(exc: ContentEngineError) -> SlugOutput:
    suggestion = exc.suggestion if isinstance(exc, SlugConflictError) else None
    reason = getattr(exc, "reason", exc.code)
    return SlugOutput(
        slug=None,
        errors=[
            SlugValidationError(
                code=reason,
                message=exc.message,
                field=exc.field,
                suggestion=suggestion,
            )
        ],
        success=False,
    )


def run_generate(input_data: GenerateSlugInput) -> SlugOutput:
    """Generate a unique slug for a title."""
    try:
        slug = generate_slug(input_data.title, input_data.existing_slugs)
    except ContentEngineError as e:
        return _error_output(e)
    return SlugOutput(slug=slug, errors=[], success=True)


def run_check(
    input_data: CheckSlugInput,
    pattern: str = DEFAULT_SLUG_PATTERN,
    max_length: int | None = None,
) -> SlugOutput:
    """Validate an editor-chosen slug against format and uniqueness."""
    try:
        slug = check_manual_slug(
            input_data.slug,
            input_data.existing_slugs,
            input_data.collection,
            pattern=pattern,
            max_length=max_length,
        )
    except ContentEngineError as e:
        return _error_output(e)
    return SlugOutput(slug=slug, errors=[], success=True)
