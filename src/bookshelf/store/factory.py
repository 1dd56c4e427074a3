"""Factory for creating the domain store from configuration."""

from ..config import Settings, settings
from ..errors import StoreError
from ..logging import get_logger
from .base import DomainStore
from .database import DatabaseStore
from .memory import InMemoryStore

logger = get_logger(__name__)


def create_store(config: Settings | None = None) -> DomainStore:
    """Create an unopened store for the configured backend.

    Args:
        config: Settings to use (defaults to the global settings)

    Raises:
        StoreError: If the backend name is unknown
    """
    config = config or settings
    backend = config.store_backend.lower()

    if backend == "memory":
        if config.seed_sample_data:
            from ..database.seed_data import sample_store

            store = sample_store()
        else:
            store = InMemoryStore()
    elif backend == "database":
        from ..database.connection import Database

        store = DatabaseStore(
            Database.from_settings(config),
            create_schema=config.auto_create_schema,
        )
    else:
        raise StoreError(f"Unknown store backend: {config.store_backend}")

    logger.info("Domain store created", backend=store.name)
    return store
