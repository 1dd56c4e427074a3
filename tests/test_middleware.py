"""Tests for request logging helpers."""

from bookshelf.logging import clear_request_context, get_request_id, set_request_context
from bookshelf.middleware import operation_name_from_query, sanitize_query_params


class TestSanitizeQueryParams:
    def test_redacts_sensitive_keys(self):
        params = {"access_token": "abc", "X-Api-Key": "k", "page": "2"}

        assert sanitize_query_params(params) == {
            "access_token": "[REDACTED]",
            "X-Api-Key": "[REDACTED]",
            "page": "2",
        }

    def test_empty(self):
        assert sanitize_query_params({}) == {}


class TestOperationNameFromQuery:
    def test_named_query(self):
        assert operation_name_from_query("query Books { books { id } }") == "Books"

    def test_named_mutation(self):
        query = "mutation CreateBook($input: BookInput!) { createBook(input: $input) { id } }"
        assert operation_name_from_query(query) == "mutation:CreateBook"

    def test_anonymous(self):
        assert operation_name_from_query("{ books { id } }") == "unnamed_operation"

    def test_introspection(self):
        assert operation_name_from_query("{ __schema { types { name } } }") == "__introspection"

    def test_not_a_query(self):
        assert operation_name_from_query(None) is None
        assert operation_name_from_query("") is None


class TestRequestContext:
    def test_explicit_request_id(self):
        assert set_request_context("abc") == "abc"
        assert get_request_id() == "abc"

        clear_request_context()
        assert get_request_id() is None

    def test_generated_request_id(self):
        request_id = set_request_context()
        try:
            assert len(request_id) == 14
            assert get_request_id() == request_id
        finally:
            clear_request_context()
