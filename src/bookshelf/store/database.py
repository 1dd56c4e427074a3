"""Relational domain store on top of the async SQLAlchemy ORM."""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..database.connection import Database
from ..dbmodels import Authors, Base, Books, Categories
from ..domain import BOOK_REFERENCES, RECORD_TYPES, EntityKind, FieldFilter, Record
from ..errors import ReferenceNotFound, StoreError
from ..logging import get_logger
from .base import DomainStore

logger = get_logger(__name__)

MODELS: dict[EntityKind, type[Base]] = {
    EntityKind.BOOK: Books,
    EntityKind.AUTHOR: Authors,
    EntityKind.CATEGORY: Categories,
}


def to_record(kind: EntityKind, row: Base) -> Record:
    return RECORD_TYPES[kind].model_validate(row, from_attributes=True)


class DatabaseStore(DomainStore):
    """Store reading and writing the authors, categories and books tables."""

    name = "database"

    def __init__(self, database: Database, *, create_schema: bool = False):
        self.database = database
        self.create_schema = create_schema

    async def open(self) -> None:
        self.database.init()
        if self.create_schema:
            await self.database.create_all()

    async def close(self) -> None:
        await self.database.dispose()

    async def ping(self) -> tuple[bool, str | None]:
        return await self.database.test_connection()

    async def find_by_id(self, kind: EntityKind, id: int) -> Record | None:
        async with self.database.session() as session:
            row = await session.get(MODELS[kind], id)
            return to_record(kind, row) if row is not None else None

    async def find_many(self, kind: EntityKind, filter: FieldFilter | None = None) -> list[Record]:
        self._check_filter(kind, filter)
        model = MODELS[kind]

        stmt = select(model).order_by(model.id)
        if filter is not None:
            stmt = stmt.where(getattr(model, filter.field).in_(list(filter.values)))

        async with self.database.session() as session:
            result = await session.execute(stmt)
            return [to_record(kind, row) for row in result.scalars().all()]

    async def create(self, kind: EntityKind, fields: Mapping[str, Any]) -> Record:
        model = MODELS[kind]
        columns = {c.key for c in model.__table__.columns} - {"id"}
        unknown = set(fields) - columns
        if unknown:
            raise StoreError(f"Unknown {kind.label.lower()} fields: {', '.join(sorted(unknown))}")

        async with self.database.session() as session:
            if kind is EntityKind.BOOK:
                for field, referenced in BOOK_REFERENCES.items():
                    if fields.get(field) is None:
                        raise StoreError(f"Missing book field: {field}")
                    if await session.get(MODELS[referenced], fields[field]) is None:
                        raise ReferenceNotFound(referenced, fields[field])

            row = model(**fields)
            session.add(row)
            try:
                await session.flush()
            except IntegrityError as e:
                message = str(e.orig).lower()
                if kind is EntityKind.BOOK and "foreign key" in message:
                    # The referenced row vanished between the check and the insert
                    if "category_id" in message:
                        raise ReferenceNotFound(EntityKind.CATEGORY, fields["category_id"]) from e
                    raise ReferenceNotFound(EntityKind.AUTHOR, fields["author_id"]) from e
                raise StoreError(f"Could not create {kind.label.lower()}: {e.orig}") from e

            try:
                record = to_record(kind, row)
            except ValidationError as e:
                raise StoreError(f"Invalid {kind.label.lower()} fields: {e}") from e

        logger.debug("Record created", kind=kind.value, id=record.id, store=self.name)
        return record
