"""
Root GraphQL query definitions
"""

import strawberry

from ..types.author import Author
from ..types.book import Book
from ..types.category import Category


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def books(self, info: strawberry.Info) -> list[Book]:
        """Get all books."""
        from ..resolvers.book import resolve_books

        return await resolve_books(info)

    @strawberry.field
    async def authors(self, info: strawberry.Info) -> list[Author]:
        """Get all authors."""
        from ..resolvers.author import resolve_authors

        return await resolve_authors(info)

    @strawberry.field
    async def categories(self, info: strawberry.Info) -> list[Category]:
        """Get all categories."""
        from ..resolvers.category import resolve_categories

        return await resolve_categories(info)

    @strawberry.field
    async def book(self, info: strawberry.Info, id: int) -> Book | None:
        """Get a book by ID."""
        from ..resolvers.book import resolve_book_by_id

        return await resolve_book_by_id(info, id)

    @strawberry.field
    async def author(self, info: strawberry.Info, id: int) -> Author | None:
        """Get an author by ID."""
        from ..resolvers.author import resolve_author_by_id

        return await resolve_author_by_id(info, id)

    @strawberry.field
    async def category(self, info: strawberry.Info, id: int) -> Category | None:
        """Get a category by ID."""
        from ..resolvers.category import resolve_category_by_id

        return await resolve_category_by_id(info, id)
