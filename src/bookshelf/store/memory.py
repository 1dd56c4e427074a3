"""In-memory domain store backed by per-kind record lists."""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from ..domain import (
    BOOK_REFERENCES,
    RECORD_TYPES,
    AuthorRecord,
    BookRecord,
    CategoryRecord,
    EntityKind,
    FieldFilter,
    Record,
)
from ..errors import ReferenceNotFound, StoreError
from ..logging import get_logger
from .base import DomainStore

logger = get_logger(__name__)


class InMemoryStore(DomainStore):
    """Store keeping records in insertion order for the life of the process.

    Identifiers are assigned as the highest existing identifier of the kind plus
    one, so they are never reused.
    """

    name = "memory"

    def __init__(
        self,
        *,
        books: Iterable[BookRecord] = (),
        authors: Iterable[AuthorRecord] = (),
        categories: Iterable[CategoryRecord] = (),
    ):
        self._records: dict[EntityKind, list[Record]] = {
            EntityKind.BOOK: list(books),
            EntityKind.AUTHOR: list(authors),
            EntityKind.CATEGORY: list(categories),
        }
        self._lock = asyncio.Lock()

    async def find_by_id(self, kind: EntityKind, id: int) -> Record | None:
        for record in self._records[kind]:
            if record.id == id:
                return record
        return None

    async def find_many(self, kind: EntityKind, filter: FieldFilter | None = None) -> list[Record]:
        self._check_filter(kind, filter)
        records = sorted(self._records[kind], key=lambda r: r.id)
        if filter is None:
            return records
        wanted = set(filter.values)
        return [r for r in records if getattr(r, filter.field) in wanted]

    async def create(self, kind: EntityKind, fields: Mapping[str, Any]) -> Record:
        async with self._lock:
            if kind is EntityKind.BOOK:
                for field, referenced in BOOK_REFERENCES.items():
                    if await self.find_by_id(referenced, fields.get(field)) is None:
                        raise ReferenceNotFound(referenced, fields.get(field))

            records = self._records[kind]
            try:
                next_id = max((r.id for r in records), default=0) + 1
                record = RECORD_TYPES[kind](**{**fields, "id": next_id})
            except ValidationError as e:
                raise StoreError(f"Invalid {kind.label.lower()} fields: {e}") from e

            records.append(record)

        logger.debug("Record created", kind=kind.value, id=record.id, store=self.name)
        return record
