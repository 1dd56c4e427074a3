"""
Domain records shared by the stores, loaders and resolvers.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator


class EntityKind(Enum):
    """Kinds of records held by the domain store."""

    BOOK = "book"
    AUTHOR = "author"
    CATEGORY = "category"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class AuthorRecord(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str


class CategoryRecord(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str


class BookRecord(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    title: str
    publication_date: str | None = None
    author_id: int
    category_id: int


Record = BookRecord | AuthorRecord | CategoryRecord

RECORD_TYPES: dict[EntityKind, type[BaseModel]] = {
    EntityKind.BOOK: BookRecord,
    EntityKind.AUTHOR: AuthorRecord,
    EntityKind.CATEGORY: CategoryRecord,
}

# Fields a store accepts in a FieldFilter, per kind
FILTERABLE_FIELDS: dict[EntityKind, frozenset[str]] = {
    EntityKind.BOOK: frozenset({"id", "author_id", "category_id"}),
    EntityKind.AUTHOR: frozenset({"id"}),
    EntityKind.CATEGORY: frozenset({"id"}),
}

# Foreign keys a book must satisfy, mapped to the referenced kind
BOOK_REFERENCES: dict[str, EntityKind] = {
    "author_id": EntityKind.AUTHOR,
    "category_id": EntityKind.CATEGORY,
}


@dataclass(frozen=True)
class FieldFilter:
    """Match records whose ``field`` is one of ``values``."""

    field: str
    values: Sequence[int]


ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class CreateBookRequest(BaseModel):
    """Validated input for creating a book."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    author_id: PositiveInt
    category_id: PositiveInt
    publication_date: str

    @field_validator("publication_date")
    @classmethod
    def validate_publication_date(cls, value: str) -> str:
        # fromisoformat alone also takes week dates and compact forms
        if not ISO_DATE_PATTERN.fullmatch(value):
            raise ValueError("publication_date must be a YYYY-MM-DD date")
        try:
            date.fromisoformat(value)
        except ValueError as e:
            raise ValueError("publication_date must be a YYYY-MM-DD date") from e
        return value
