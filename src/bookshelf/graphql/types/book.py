"""
Book GraphQL type definitions
"""

from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .author import Author
    from .category import Category


@strawberry.type
class Book:
    """Book type for GraphQL API."""

    id: int
    title: str
    publication_date: str | None
    author_id: int
    category_id: int

    @strawberry.field
    async def author(
        self, info: strawberry.Info
    ) -> Annotated["Author", strawberry.lazy(".author")] | None:
        """Get the author of this book."""
        from ..resolvers.book import resolve_book_author

        return await resolve_book_author(self, info)

    @strawberry.field
    async def category(
        self, info: strawberry.Info
    ) -> Annotated["Category", strawberry.lazy(".category")] | None:
        """Get the category of this book."""
        from ..resolvers.book import resolve_book_category

        return await resolve_book_category(self, info)
