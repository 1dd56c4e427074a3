"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.book import Book


@strawberry.input
class BookInput:
    """Input for creating a new book."""

    title: str
    author_id: int
    category_id: int
    publication_date: str


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation(name="createBook")
    async def create_book(self, info: strawberry.Info, input: BookInput) -> Book:
        """Create a new book for an existing author and category."""
        from ..resolvers.book import create_book

        return await create_book(info, input)
