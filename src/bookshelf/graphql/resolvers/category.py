from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...domain import CategoryRecord, EntityKind
from ...logging import get_logger
from ..context import get_loaders, get_store

if TYPE_CHECKING:
    from ..types.book import Book
    from ..types.category import Category

logger = get_logger(__name__)


def category_from_record(record: CategoryRecord) -> Category:
    from ..types.category import Category as CategoryType

    return CategoryType(id=record.id, name=record.name)


async def resolve_categories(info: strawberry.Info) -> list[Category]:
    records = await get_store(info).find_many(EntityKind.CATEGORY)
    get_loaders(info).prime(EntityKind.CATEGORY, records)
    return [category_from_record(record) for record in records]


async def resolve_category_by_id(info: strawberry.Info, id: int) -> Category | None:
    record = await get_loaders(info).category_loader.load(id)
    if record is None:
        logger.info("Category not found", category_id=id)
        return None
    return category_from_record(record)


async def resolve_category_books(category: Category, info: strawberry.Info) -> list[Book]:
    from .book import book_from_record

    records = await get_loaders(info).books_by_category_loader.load(category.id)
    return [book_from_record(record) for record in records]
