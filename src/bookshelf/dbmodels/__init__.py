"""
Database models for Bookshelf (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from sqlalchemy import (
    ForeignKeyConstraint,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Authors(Base):
    __tablename__ = "authors"
    __table_args__ = (PrimaryKeyConstraint("id", name="authors_pkey"),)

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    books: Mapped[list["Books"]] = relationship("Books", uselist=True, back_populates="author")


class Categories(Base):
    __tablename__ = "categories"
    __table_args__ = (PrimaryKeyConstraint("id", name="categories_pkey"),)

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    books: Mapped[list["Books"]] = relationship("Books", uselist=True, back_populates="category")


class Books(Base):
    __tablename__ = "books"
    __table_args__ = (
        ForeignKeyConstraint(
            ["author_id"],
            ["authors.id"],
            name="books_author_id_fkey",
        ),
        ForeignKeyConstraint(
            ["category_id"],
            ["categories.id"],
            name="books_category_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="books_pkey"),
        Index("idx_books_author", "author_id"),
        Index("idx_books_category", "category_id"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    publication_date: Mapped[str | None] = mapped_column(String(32))
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    category_id: Mapped[int] = mapped_column(Integer, nullable=False)

    author: Mapped["Authors"] = relationship("Authors", back_populates="books")
    category: Mapped["Categories"] = relationship("Categories", back_populates="books")


# Expose metadata for Alembic
target_metadata = Base.metadata

__all__ = ["Base", "Authors", "Categories", "Books", "target_metadata"]
