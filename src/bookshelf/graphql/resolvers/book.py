from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import strawberry
from pydantic import ValidationError

from ...domain import BookRecord, CreateBookRequest, EntityKind
from ...errors import ReferenceNotFound, ValidationFailed
from ...logging import get_logger
from ..context import get_loaders, get_store

if TYPE_CHECKING:
    from ..mutations.root import BookInput
    from ..types.author import Author
    from ..types.book import Book
    from ..types.category import Category

logger = get_logger(__name__)


def book_from_record(record: BookRecord) -> Book:
    """Convert a domain record to the GraphQL type."""
    from ..types.book import Book as BookType

    return BookType(
        id=record.id,
        title=record.title,
        publication_date=record.publication_date,
        author_id=record.author_id,
        category_id=record.category_id,
    )


# Query resolvers
async def resolve_books(info: strawberry.Info) -> list[Book]:
    """Resolve every book, in identifier order."""
    records = await get_store(info).find_many(EntityKind.BOOK)
    get_loaders(info).prime(EntityKind.BOOK, records)
    return [book_from_record(record) for record in records]


async def resolve_book_by_id(info: strawberry.Info, id: int) -> Book | None:
    """Resolve a book by its ID; a missing book resolves to null."""
    record = await get_loaders(info).book_loader.load(id)
    if record is None:
        logger.info("Book not found", book_id=id)
        return None
    return book_from_record(record)


# Field resolvers
async def resolve_book_author(book: Book, info: strawberry.Info) -> Author | None:
    from .author import author_from_record

    record = await get_loaders(info).author_loader.load(book.author_id)
    if record is None:
        logger.warning("Book references a missing author", book_id=book.id, author_id=book.author_id)
        return None
    return author_from_record(record)


async def resolve_book_category(book: Book, info: strawberry.Info) -> Category | None:
    from .category import category_from_record

    record = await get_loaders(info).category_loader.load(book.category_id)
    if record is None:
        logger.warning(
            "Book references a missing category", book_id=book.id, category_id=book.category_id
        )
        return None
    return category_from_record(record)


# Mutation resolvers
def validate_book_input(input: BookInput) -> CreateBookRequest:
    """
    Validate createBook input at the boundary.

    Raises:
        ValidationFailed: With one message per invalid field
    """
    try:
        return CreateBookRequest(
            title=input.title,
            author_id=input.author_id,
            category_id=input.category_id,
            publication_date=input.publication_date,
        )
    except ValidationError as e:
        field_errors = {
            ".".join(str(part) for part in error["loc"]): error["msg"] for error in e.errors()
        }
        details = "; ".join(f"{field}: {msg}" for field, msg in field_errors.items())
        raise ValidationFailed(f"Invalid book input: {details}", field_errors) from e


async def create_book(info: strawberry.Info, input: BookInput) -> Book:
    """
    Create a new book.

    The author and category are checked through the request loaders before
    the store is called, so a bad reference never mutates the store.
    """
    request = validate_book_input(input)
    loaders = get_loaders(info)

    author, category = await asyncio.gather(
        loaders.author_loader.load(request.author_id),
        loaders.category_loader.load(request.category_id),
    )
    if author is None:
        logger.info("createBook rejected: unknown author", author_id=request.author_id)
        raise ReferenceNotFound(EntityKind.AUTHOR, request.author_id)
    if category is None:
        logger.info("createBook rejected: unknown category", category_id=request.category_id)
        raise ReferenceNotFound(EntityKind.CATEGORY, request.category_id)

    record = await get_store(info).create(EntityKind.BOOK, request.model_dump())
    loaders.book_created(record)

    logger.info(
        "Book created",
        book_id=record.id,
        author_id=record.author_id,
        category_id=record.category_id,
    )
    return book_from_record(record)
