"""Domain store interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..domain import FILTERABLE_FIELDS, EntityKind, FieldFilter, Record
from ..errors import StoreError


class DomainStore(ABC):
    """Abstract base class for book, author and category storage backends.

    A store is opened once at process startup and closed at shutdown; it is
    shared by every request.
    """

    name: str = "abstract"

    async def open(self) -> None:
        """Acquire backend resources."""

    async def close(self) -> None:
        """Release backend resources."""

    async def ping(self) -> tuple[bool, str | None]:
        """Check that the backend is reachable.

        Returns:
            tuple: (success, error_message)
        """
        return True, None

    @abstractmethod
    async def find_by_id(self, kind: EntityKind, id: int) -> Record | None:
        """Return the record of ``kind`` with identifier ``id``, or None."""

    @abstractmethod
    async def find_many(self, kind: EntityKind, filter: FieldFilter | None = None) -> list[Record]:
        """Return records of ``kind`` matching ``filter``, in identifier order.

        Raises:
            StoreError: If the filter field is not filterable for ``kind``
        """

    @abstractmethod
    async def create(self, kind: EntityKind, fields: Mapping[str, Any]) -> Record:
        """Create a record of ``kind`` and return it with its assigned identifier.

        Raises:
            ReferenceNotFound: If a book references a missing author or category
            StoreError: If ``fields`` do not describe a valid record
        """

    def _check_filter(self, kind: EntityKind, filter: FieldFilter | None) -> None:
        if filter is not None and filter.field not in FILTERABLE_FIELDS[kind]:
            raise StoreError(f"Cannot filter {kind.label.lower()} records by '{filter.field}'")
