"""Tests for the sample catalogue and database seeding."""

import pytest
from sqlalchemy import func, select

from bookshelf.database.connection import Database, to_async_url
from bookshelf.database.seed_data import SAMPLE_BOOKS, sample_store, seed_initial_data
from bookshelf.dbmodels import Books
from bookshelf.domain import EntityKind


class TestSampleStore:
    @pytest.mark.asyncio
    async def test_sample_catalogue(self) -> None:
        store = sample_store()

        assert len(await store.find_many(EntityKind.BOOK)) == len(SAMPLE_BOOKS)
        assert [a.name for a in await store.find_many(EntityKind.AUTHOR)] == [
            "Kate Chopin",
            "Paul Auster",
        ]

    def test_each_call_builds_a_fresh_store(self) -> None:
        assert sample_store() is not sample_store()


@pytest.mark.integration
class TestSeedInitialData:
    @pytest.mark.asyncio
    async def test_seeding_is_idempotent(self, tmp_path) -> None:
        database = Database(f"sqlite:///{tmp_path / 'seed.db'}")
        database.init()
        await database.create_all()

        try:
            async with database.session() as db:
                first = await seed_initial_data(db)
            async with database.session() as db:
                second = await seed_initial_data(db)
                count = (await db.execute(select(func.count()).select_from(Books))).scalar()
        finally:
            await database.dispose()

        assert first == {"categories": 2, "authors": 2, "books": 4}
        assert second == {"categories": 0, "authors": 0, "books": 0}
        assert count == 4


class TestToAsyncUrl:
    def test_postgres_uses_asyncpg(self) -> None:
        assert (
            to_async_url("postgresql://u:p@localhost:5432/db")
            == "postgresql+asyncpg://u:p@localhost:5432/db"
        )

    def test_sqlite_uses_aiosqlite(self) -> None:
        assert to_async_url("sqlite:///tmp/x.db") == "sqlite+aiosqlite:///tmp/x.db"

    def test_explicit_driver_is_kept(self) -> None:
        url = "postgresql+psycopg://u:p@localhost/db"
        assert to_async_url(url) == url
