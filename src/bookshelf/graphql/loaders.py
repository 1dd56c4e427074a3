"""Request-scoped batched loaders.

Each GraphQL request gets its own ``Loaders`` so that batching boundaries and
caches never leak between requests. Loads issued in the same event loop tick
are coalesced into one store fetch over the distinct keys.
"""

from collections.abc import Sequence

from strawberry.dataloader import DataLoader

from ..domain import AuthorRecord, BookRecord, CategoryRecord, EntityKind, FieldFilter, Record
from ..errors import BatchFetchFailed
from ..logging import get_logger
from ..store.base import DomainStore

logger = get_logger(__name__)


async def fetch_batch(
    store: DomainStore, kind: EntityKind, field: str, keys: Sequence[int]
) -> list[Record]:
    """Run one store fetch for a batch, wrapping backend failures."""
    try:
        records = await store.find_many(kind, FieldFilter(field, list(keys)))
    except BatchFetchFailed:
        raise
    except Exception as e:
        logger.error("Batch fetch failed", kind=kind.value, field=field, keys=list(keys), error=str(e))
        raise BatchFetchFailed(kind, field, keys) from e

    logger.debug(
        "Batch loaded", kind=kind.value, field=field, keys=len(keys), records=len(records)
    )
    return records


async def load_by_id(
    store: DomainStore, kind: EntityKind, keys: list[int]
) -> list[Record | None]:
    """Batch load records by ID, aligned with ``keys`` (None for missing)."""
    records = await fetch_batch(store, kind, "id", keys)
    records_map = {record.id: record for record in records}
    return [records_map.get(key) for key in keys]


async def load_books_by(store: DomainStore, field: str, keys: list[int]) -> list[list[BookRecord]]:
    """Batch load books grouped by a foreign key, aligned with ``keys``."""
    books = await fetch_batch(store, EntityKind.BOOK, field, keys)
    books_by_key: dict[int, list[BookRecord]] = {key: [] for key in keys}
    for book in books:
        books_by_key.setdefault(getattr(book, field), []).append(book)
    return [books_by_key.get(key, []) for key in keys]


def forget(loader: DataLoader, key: int) -> None:
    """Drop a cached entry; keys never loaded in this request are ignored."""
    if loader.cache_map.get(key) is not None:
        loader.clear(key)


class Loaders:
    def __init__(self, store: DomainStore):
        self.store = store
        self.book_loader: DataLoader[int, BookRecord | None] = DataLoader(load_fn=self._load_books)
        self.author_loader: DataLoader[int, AuthorRecord | None] = DataLoader(
            load_fn=self._load_authors
        )
        self.category_loader: DataLoader[int, CategoryRecord | None] = DataLoader(
            load_fn=self._load_categories
        )
        self.books_by_author_loader: DataLoader[int, list[BookRecord]] = DataLoader(
            load_fn=self._load_books_by_author
        )
        self.books_by_category_loader: DataLoader[int, list[BookRecord]] = DataLoader(
            load_fn=self._load_books_by_category
        )

    async def _load_books(self, keys: list[int]) -> list[BookRecord | None]:
        return await load_by_id(self.store, EntityKind.BOOK, keys)

    async def _load_authors(self, keys: list[int]) -> list[AuthorRecord | None]:
        return await load_by_id(self.store, EntityKind.AUTHOR, keys)

    async def _load_categories(self, keys: list[int]) -> list[CategoryRecord | None]:
        return await load_by_id(self.store, EntityKind.CATEGORY, keys)

    async def _load_books_by_author(self, keys: list[int]) -> list[list[BookRecord]]:
        return await load_books_by(self.store, "author_id", keys)

    async def _load_books_by_category(self, keys: list[int]) -> list[list[BookRecord]]:
        return await load_books_by(self.store, "category_id", keys)

    def loader_for(self, kind: EntityKind) -> DataLoader:
        """Return the by-ID loader for ``kind``."""
        return {
            EntityKind.BOOK: self.book_loader,
            EntityKind.AUTHOR: self.author_loader,
            EntityKind.CATEGORY: self.category_loader,
        }[kind]

    def prime(self, kind: EntityKind, records: Sequence[Record]) -> None:
        """Seed the by-ID cache with records already in hand."""
        self.loader_for(kind).prime_many({record.id: record for record in records})

    def book_created(self, book: BookRecord) -> None:
        """Update caches after a book was created within this request."""
        self.book_loader.prime(book.id, book)
        forget(self.books_by_author_loader, book.author_id)
        forget(self.books_by_category_loader, book.category_id)
