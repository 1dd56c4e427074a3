"""
Bookshelf GraphQL API
Books, authors and categories served over GraphQL with batched loading
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
