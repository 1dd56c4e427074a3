from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...domain import AuthorRecord, EntityKind
from ...logging import get_logger
from ..context import get_loaders, get_store

if TYPE_CHECKING:
    from ..types.author import Author
    from ..types.book import Book

logger = get_logger(__name__)


def author_from_record(record: AuthorRecord) -> Author:
    from ..types.author import Author as AuthorType

    return AuthorType(id=record.id, name=record.name)


async def resolve_authors(info: strawberry.Info) -> list[Author]:
    records = await get_store(info).find_many(EntityKind.AUTHOR)
    get_loaders(info).prime(EntityKind.AUTHOR, records)
    return [author_from_record(record) for record in records]


async def resolve_author_by_id(info: strawberry.Info, id: int) -> Author | None:
    record = await get_loaders(info).author_loader.load(id)
    if record is None:
        logger.info("Author not found", author_id=id)
        return None
    return author_from_record(record)


async def resolve_author_books(author: Author, info: strawberry.Info) -> list[Book]:
    """Resolve an author's books through the batched books-by-author loader."""
    from .book import book_from_record

    records = await get_loaders(info).books_by_author_loader.load(author.id)
    return [book_from_record(record) for record in records]
