"""Domain store backends for books, authors and categories."""

from .base import DomainStore
from .database import DatabaseStore
from .factory import create_store
from .memory import InMemoryStore

__all__ = ["DomainStore", "DatabaseStore", "InMemoryStore", "create_store"]
