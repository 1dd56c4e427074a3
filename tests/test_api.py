from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from bookshelf.api.app import create_app
from bookshelf.config import Settings
from bookshelf.database.seed_data import sample_store


def make_client(store=None, **overrides) -> TestClient:
    config = Settings(environment="test", debug=False, **overrides)
    return TestClient(create_app(config=config, store=store or sample_store()))


def test_health_reports_store():
    with make_client() as client:
        resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "version": "0.1.0", "store": "memory"}


def test_health_reports_unreachable_store():
    store = sample_store()
    store.ping = AsyncMock(return_value=(False, "connection refused"))

    with make_client(store=store) as client:
        body = client.get("/health").json()

    assert body["status"] == "unhealthy"
    assert body["error"] == "connection refused"


@pytest.mark.asyncio
async def test_production_startup_fails_when_store_unreachable():
    store = sample_store()
    store.ping = AsyncMock(return_value=(False, "connection refused"))
    store.close = AsyncMock()
    app = create_app(config=Settings(environment="production", debug=False), store=store)

    with pytest.raises(RuntimeError, match="Domain store unavailable"):
        async with app.router.lifespan_context(app):
            pass

    store.close.assert_awaited_once()


def test_graphql_query_over_http():
    with make_client() as client:
        resp = client.post(
            "/graphql",
            json={"query": "query Books { books { id author { name } } }"},
        )

    assert resp.status_code == 200, resp.text
    books = resp.json()["data"]["books"]
    assert len(books) == 4
    assert books[1] == {"id": 2, "author": {"name": "Paul Auster"}}


def test_graphql_create_book_over_http():
    mutation = """
    mutation CreateBook($input: BookInput!) {
        createBook(input: $input) { id title }
    }
    """
    variables = {
        "input": {
            "title": "Moon Palace",
            "authorId": 2,
            "categoryId": 1,
            "publicationDate": "1989-03-01",
        }
    }

    with make_client() as client:
        created = client.post("/graphql", json={"query": mutation, "variables": variables})
        listed = client.post("/graphql", json={"query": "{ books { id } }"})

    assert created.json()["data"]["createBook"] == {"id": 5, "title": "Moon Palace"}
    assert [b["id"] for b in listed.json()["data"]["books"]] == [1, 2, 3, 4, 5]


def test_graphql_error_carries_code_over_http():
    mutation = """
    mutation {
        createBook(input: {title: "X", authorId: 9, categoryId: 1, publicationDate: "2020-01-01"}) {
            id
        }
    }
    """

    with make_client() as client:
        body = client.post("/graphql", json={"query": mutation}).json()

    assert body["data"] is None
    assert body["errors"][0]["extensions"]["code"] == "REFERENCE_NOT_FOUND"


def test_request_id_is_echoed():
    with make_client() as client:
        resp = client.get("/health", headers={"X-Request-ID": "req-123"})
        generated = client.get("/health")

    assert resp.headers["X-Request-ID"] == "req-123"
    assert generated.headers["X-Request-ID"]
    assert generated.headers["X-Request-ID"] != "req-123"


def test_graphql_can_be_disabled(monkeypatch):
    monkeypatch.setenv("BOOKSHELF_DISABLE_GRAPHQL", "1")

    with make_client() as client:
        resp = client.post("/graphql", json={"query": "{ books { id } }"})

    assert resp.status_code == 404
