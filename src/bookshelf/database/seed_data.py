"""
Reusable seed data functions for database initialization.

The same sample catalogue backs the in-memory store and the ``seed`` CLI
command, so both backends start from identical records.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Authors, Base, Books, Categories
from ..domain import AuthorRecord, BookRecord, CategoryRecord
from ..logging import get_logger
from ..store.memory import InMemoryStore

logger = get_logger(__name__)

SAMPLE_CATEGORIES: list[dict[str, Any]] = [
    {"id": 1, "name": "Fiction"},
    {"id": 2, "name": "Novel"},
]

SAMPLE_AUTHORS: list[dict[str, Any]] = [
    {"id": 1, "name": "Kate Chopin"},
    {"id": 2, "name": "Paul Auster"},
]

SAMPLE_BOOKS: list[dict[str, Any]] = [
    {
        "id": 1,
        "title": "The Awakening",
        "author_id": 1,
        "category_id": 1,
        "publication_date": "1899-04-22",
    },
    {
        "id": 2,
        "title": "City of Glass",
        "author_id": 2,
        "category_id": 1,
        "publication_date": "1985-03-12",
    },
    {
        "id": 3,
        "title": "The Awakening2",
        "author_id": 1,
        "category_id": 2,
        "publication_date": "1899-04-22",
    },
    {
        "id": 4,
        "title": "City of Glass2",
        "author_id": 2,
        "category_id": 2,
        "publication_date": "1985-03-12",
    },
]


def sample_store() -> InMemoryStore:
    """Build an in-memory store holding the sample catalogue."""
    return InMemoryStore(
        books=[BookRecord(**b) for b in SAMPLE_BOOKS],
        authors=[AuthorRecord(**a) for a in SAMPLE_AUTHORS],
        categories=[CategoryRecord(**c) for c in SAMPLE_CATEGORIES],
    )


async def ensure_row(db: AsyncSession, model: type[Base], values: dict[str, Any]) -> bool:
    """
    Insert a row with an explicit ID unless one with that ID already exists.

    Existing rows are left untouched.

    Returns:
        True if a row was inserted
    """
    existing = await db.get(model, values["id"])
    if existing is not None:
        logger.debug("Row already exists", table=model.__tablename__, id=values["id"])
        return False

    db.add(model(**values))
    await db.flush()
    logger.info("Inserted seed row", table=model.__tablename__, id=values["id"])
    return True


async def sync_id_sequences(db: AsyncSession) -> None:
    """Move PostgreSQL serial sequences past explicitly inserted IDs."""
    if db.get_bind().dialect.name != "postgresql":
        return

    for model in (Categories, Authors, Books):
        table = model.__tablename__
        max_id = (await db.execute(select(func.max(model.id)))).scalar()
        if max_id is None:
            continue
        await db.execute(
            text("SELECT setval(pg_get_serial_sequence(:table, 'id'), :max_id)"),
            {"table": table, "max_id": max_id},
        )


async def seed_initial_data(db: AsyncSession) -> dict[str, int]:
    """
    Seed the sample categories, authors and books.

    Safe to run repeatedly: rows whose ID already exists are skipped.
    Categories and authors are inserted before the books referencing them.

    Args:
        db: Database session

    Returns:
        Number of inserted rows per table
    """
    logger.info("Starting database seeding")

    inserted = {"categories": 0, "authors": 0, "books": 0}
    for model, rows in (
        (Categories, SAMPLE_CATEGORIES),
        (Authors, SAMPLE_AUTHORS),
        (Books, SAMPLE_BOOKS),
    ):
        for values in rows:
            if await ensure_row(db, model, values):
                inserted[model.__tablename__] += 1

    await sync_id_sequences(db)
    await db.commit()

    logger.info("Database seeding completed", **inserted)
    return inserted
