"""
Domain errors surfaced to GraphQL clients.

Every error carries a stable ``code`` which the schema copies into the
``extensions`` of the GraphQL error entry.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .domain import EntityKind


class BookshelfError(Exception):
    """Base exception for all bookshelf errors."""

    code = "INTERNAL_ERROR"


class StoreError(BookshelfError):
    """Store misuse or backend failure outside a batch fetch."""

    code = "STORE_ERROR"


class ReferenceNotFound(BookshelfError):
    """A new record references an author or category that does not exist."""

    code = "REFERENCE_NOT_FOUND"

    def __init__(self, kind: EntityKind, id: int):
        self.kind = kind
        self.id = id
        super().__init__(f"Referenced {kind.label.lower()} {id} does not exist")


class ValidationFailed(BookshelfError):
    """Mutation input failed validation."""

    code = "VALIDATION_FAILED"

    def __init__(self, message: str, field_errors: dict[str, str] | None = None):
        self.field_errors = field_errors or {}
        super().__init__(message)


class BatchFetchFailed(BookshelfError):
    """The store fetch behind a loader batch failed."""

    code = "BATCH_FETCH_FAILED"

    def __init__(self, kind: EntityKind, field: str, keys: Sequence[Any]):
        self.kind = kind
        self.field = field
        self.keys = list(keys)
        super().__init__(
            f"Failed to load {kind.label.lower()} records by {field} for {len(self.keys)} key(s)"
        )
