"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Generator, Mapping
from typing import Any

import pytest
import pytest_asyncio

from bookshelf.database.connection import Database
from bookshelf.database.seed_data import sample_store, seed_initial_data
from bookshelf.domain import AuthorRecord, BookRecord, CategoryRecord, EntityKind, FieldFilter
from bookshelf.graphql.context import build_context
from bookshelf.graphql.schema import schema
from bookshelf.store.base import DomainStore
from bookshelf.store.database import DatabaseStore
from bookshelf.store.memory import InMemoryStore


class CountingStore(DomainStore):
    """Store wrapper recording every call that reaches the backend."""

    name = "counting"

    def __init__(self, inner: DomainStore):
        self.inner = inner
        self.calls: list[tuple[Any, ...]] = []

    async def find_by_id(self, kind: EntityKind, id: int):
        self.calls.append(("find_by_id", kind, id))
        return await self.inner.find_by_id(kind, id)

    async def find_many(self, kind: EntityKind, filter: FieldFilter | None = None):
        self.calls.append(
            ("find_many", kind, filter.field if filter else None, tuple(filter.values) if filter else None)
        )
        return await self.inner.find_many(kind, filter)

    async def create(self, kind: EntityKind, fields: Mapping[str, Any]):
        self.calls.append(("create", kind, dict(fields)))
        return await self.inner.create(kind, fields)

    def fetches(self, kind: EntityKind, field: str | None = None) -> list[tuple[Any, ...]]:
        """Recorded find_many calls for ``kind`` (optionally filtered on ``field``)."""
        return [
            call
            for call in self.calls
            if call[0] == "find_many" and call[1] is kind and (field is None or call[2] == field)
        ]


def make_scenario_store() -> InMemoryStore:
    """Two authors, two categories and books 1 and 3 written by author 1."""
    return InMemoryStore(
        authors=[AuthorRecord(id=1, name="Kate Chopin"), AuthorRecord(id=2, name="Paul Auster")],
        categories=[CategoryRecord(id=1, name="Fiction"), CategoryRecord(id=2, name="Novel")],
        books=[
            BookRecord(id=1, title="The Awakening", author_id=1, category_id=1,
                       publication_date="1899-04-22"),
            BookRecord(id=2, title="City of Glass", author_id=2, category_id=1,
                       publication_date="1985-03-12"),
            BookRecord(id=3, title="The Awakening2", author_id=1, category_id=2,
                       publication_date="1899-04-22"),
        ],
    )


@pytest.fixture
def memory_store() -> InMemoryStore:
    """In-memory store holding the sample catalogue (4 books)."""
    return sample_store()


@pytest.fixture
def scenario_store() -> InMemoryStore:
    return make_scenario_store()


@pytest.fixture
def counting_store(scenario_store: InMemoryStore) -> CountingStore:
    return CountingStore(scenario_store)


@pytest.fixture
def make_counting_store():
    """Wrap an arbitrary store in a CountingStore."""
    return CountingStore


@pytest_asyncio.fixture
async def database_store(tmp_path) -> Any:
    """DatabaseStore over a fresh SQLite file, seeded with the sample catalogue."""
    database = Database(f"sqlite:///{tmp_path / 'bookshelf.db'}")
    store = DatabaseStore(database, create_schema=True)
    await store.open()

    async with database.session() as db:
        await seed_initial_data(db)

    yield store

    await store.close()


@pytest.fixture
def execute():
    """Execute a GraphQL document against a store with a fresh request context."""

    async def _execute(store: DomainStore, query: str, variables: dict[str, Any] | None = None):
        return await schema.execute(
            query,
            variable_values=variables,
            context_value=build_context(store),
        )

    return _execute


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
