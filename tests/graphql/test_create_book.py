"""
Tests for the createBook mutation
"""

import pytest

from bookshelf.domain import AuthorRecord, BookRecord, CategoryRecord, EntityKind
from bookshelf.graphql.context import build_context
from bookshelf.graphql.schema import schema
from bookshelf.store.memory import InMemoryStore

CREATE_BOOK = """
mutation CreateBook($input: BookInput!) {
    createBook(input: $input) {
        id
        title
        publicationDate
        author { name }
        category { name }
    }
}
"""


@pytest.fixture
def two_book_store() -> InMemoryStore:
    return InMemoryStore(
        authors=[AuthorRecord(id=1, name="Kate Chopin")],
        categories=[CategoryRecord(id=1, name="Fiction")],
        books=[
            BookRecord(id=1, title="The Awakening", author_id=1, category_id=1,
                       publication_date="1899-04-22"),
            BookRecord(id=2, title="A Pair of Silk Stockings", author_id=1, category_id=1,
                       publication_date="1897-09-01"),
        ],
    )


def book_input(**overrides):
    values = {
        "title": "X",
        "authorId": 1,
        "categoryId": 1,
        "publicationDate": "2020-01-01",
    }
    values.update(overrides)
    return {"input": values}


class TestCreateBook:
    @pytest.mark.asyncio
    async def test_creates_book_with_next_id(self, execute, two_book_store):
        result = await execute(two_book_store, CREATE_BOOK, book_input())

        assert result.errors is None
        assert result.data["createBook"] == {
            "id": 3,
            "title": "X",
            "publicationDate": "2020-01-01",
            "author": {"name": "Kate Chopin"},
            "category": {"name": "Fiction"},
        }

    @pytest.mark.asyncio
    async def test_created_book_is_listed(self, execute, two_book_store):
        await execute(two_book_store, CREATE_BOOK, book_input())

        result = await execute(two_book_store, "{ books { id title } }")

        assert result.data["books"][-1] == {"id": 3, "title": "X"}
        assert len(result.data["books"]) == 3

    @pytest.mark.asyncio
    async def test_created_book_appears_in_author_books_same_request(self, execute, two_book_store):
        query = """
        mutation CreateBook($input: BookInput!) {
            createBook(input: $input) { author { books { id } } }
        }
        """
        result = await execute(two_book_store, query, book_input())

        assert result.errors is None
        assert result.data["createBook"]["author"]["books"] == [{"id": 1}, {"id": 2}, {"id": 3}]

    @pytest.mark.asyncio
    async def test_create_then_list_in_new_request(self, execute, scenario_store):
        created = await execute(scenario_store, CREATE_BOOK, book_input(authorId=2, categoryId=2))

        assert created.errors is None
        assert created.data["createBook"]["id"] == 4

        listed = await execute(scenario_store, "{ books { id } }")

        assert [b["id"] for b in listed.data["books"]] == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_title_is_trimmed(self, execute, two_book_store):
        result = await execute(two_book_store, CREATE_BOOK, book_input(title="  Bayou Folk  "))

        assert result.data["createBook"]["title"] == "Bayou Folk"


class TestCreateBookReferences:
    @pytest.mark.asyncio
    async def test_unknown_author_is_rejected(self, execute, two_book_store):
        result = await execute(two_book_store, CREATE_BOOK, book_input(authorId=7))

        assert result.data is None
        assert result.errors[0].extensions["code"] == "REFERENCE_NOT_FOUND"
        assert "author 7" in result.errors[0].message
        assert len(await two_book_store.find_many(EntityKind.BOOK)) == 2

    @pytest.mark.asyncio
    async def test_unknown_category_is_rejected(self, execute, two_book_store):
        result = await execute(two_book_store, CREATE_BOOK, book_input(categoryId=5))

        assert result.errors[0].extensions["code"] == "REFERENCE_NOT_FOUND"
        assert "category 5" in result.errors[0].message
        assert len(await two_book_store.find_many(EntityKind.BOOK)) == 2

    @pytest.mark.asyncio
    async def test_rejected_before_store_create(self, execute, make_counting_store, two_book_store):
        store = make_counting_store(two_book_store)

        await execute(store, CREATE_BOOK, book_input(authorId=7))

        assert not [call for call in store.calls if call[0] == "create"]

    @pytest.mark.asyncio
    async def test_store_rejection_leaves_no_book(self, two_book_store):
        # The request cache claims author 7 exists, so only the store catches it
        context = build_context(two_book_store)
        context["loaders"].prime(EntityKind.AUTHOR, [AuthorRecord(id=7, name="Ghost")])

        result = await schema.execute(CREATE_BOOK, variable_values=book_input(authorId=7),
                                      context_value=context)

        assert result.data is None
        assert result.errors[0].extensions["code"] == "REFERENCE_NOT_FOUND"
        assert [b.id for b in await two_book_store.find_many(EntityKind.BOOK)] == [1, 2]

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_database_rejection_rolls_back(self, database_store):
        context = build_context(database_store)
        context["loaders"].prime(EntityKind.CATEGORY, [CategoryRecord(id=9, name="Ghost")])

        result = await schema.execute(CREATE_BOOK, variable_values=book_input(categoryId=9),
                                      context_value=context)

        assert result.errors[0].extensions["code"] == "REFERENCE_NOT_FOUND"
        assert len(await database_store.find_many(EntityKind.BOOK)) == 4


class TestCreateBookValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"title": "   "}, "title"),
            ({"publicationDate": "22/04/1899"}, "publication_date"),
            ({"publicationDate": "2020-02-30"}, "publication_date"),
            ({"publicationDate": "2020-W01-1"}, "publication_date"),
            ({"authorId": 0}, "author_id"),
            ({"categoryId": -1}, "category_id"),
        ],
    )
    async def test_malformed_input_fails_validation(
        self, execute, make_counting_store, two_book_store, overrides, field
    ):
        store = make_counting_store(two_book_store)

        result = await execute(store, CREATE_BOOK, book_input(**overrides))

        assert result.data is None
        assert result.errors[0].extensions["code"] == "VALIDATION_FAILED"
        assert field in result.errors[0].message
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_missing_field_is_rejected_by_schema(self, execute, two_book_store):
        result = await execute(
            two_book_store,
            CREATE_BOOK,
            {"input": {"title": "X", "authorId": 1, "categoryId": 1}},
        )

        assert result.errors
        assert "publicationDate" in result.errors[0].message
        assert len(await two_book_store.find_many(EntityKind.BOOK)) == 2
