"""
Content engine error taxonomy.

Every error is recoverable at the request boundary. Shell layers turn these
into output models; routes turn those into HTTP responses.
"""

from __future__ import annotations


class ContentEngineError(Exception):
    """Base class for all content engine errors."""

    code = "content_error"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class InvalidTitleError(ContentEngineError):
    """Slug normalization produced an empty candidate."""

    code = "title_invalid"

    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(
            "Title must contain at least one letter or number",
            field="title",
        )


class SlugConflictError(ContentEngineError):
    """A slug collides with an existing one in the same collection."""

    code = "slug_conflict"

    def __init__(self, slug: str, collection: str, suggestion: str | None = None) -> None:
        self.slug = slug
        self.collection = collection
        self.suggestion = suggestion
        msg = f"Slug '{slug}' is already used in {collection}"
        if suggestion:
            msg += f"; try '{suggestion}'"
        super().__init__(msg, field="slug")


class ValidationError(ContentEngineError):
    """Illegal lifecycle transition or invalid field update. No mutation performed."""

    code = "validation_error"

    def __init__(self, message: str, field: str | None = None, reason: str = "") -> None:
        self.reason = reason or self.code
        super().__init__(message, field=field)


class OrderMismatchError(ContentEngineError):
    """Reorder payload is not a permutation of the current group."""

    code = "order_mismatch"

    def __init__(
        self,
        missing: list[str] | None = None,
        unexpected: list[str] | None = None,
        duplicated: list[str] | None = None,
    ) -> None:
        self.missing = missing or []
        self.unexpected = unexpected or []
        self.duplicated = duplicated or []
        super().__init__("List is out of date, please refresh and retry", field="ordered_ids")


class ConcurrencyConflictError(ContentEngineError):
    """Optimistic lock mismatch while committing a batch."""

    code = "concurrency_conflict"

    def __init__(self, item_id: object | None = None) -> None:
        self.item_id = item_id
        super().__init__("This list changed, please retry")


class ItemNotFoundError(ContentEngineError):
    code = "not_found"

    def __init__(self, item_id: object) -> None:
        self.item_id = item_id
        super().__init__(f"Content item {item_id} not found", field="id")


class UnknownCollectionError(ContentEngineError):
    code = "unknown_collection"

    def __init__(self, collection: str) -> None:
        self.collection = collection
        super().__init__(f"Unknown collection '{collection}'", field="collection")
