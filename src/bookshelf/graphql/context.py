"""
GraphQL request context.

The context is a plain dict built fresh for every request. It carries the
shared domain store and a new ``Loaders`` bound to that store.
"""

from typing import Any

import strawberry

from ..store.base import DomainStore
from .loaders import Loaders


def build_context(store: DomainStore, request: Any = None) -> dict[str, Any]:
    """Build the resolver context for one request."""
    return {
        "request": request,
        "store": store,
        "loaders": Loaders(store),
    }


def get_store(info: strawberry.Info) -> DomainStore:
    return info.context["store"]


def get_loaders(info: strawberry.Info) -> Loaders:
    return info.context["loaders"]
