"""FastAPI dependencies for API routes."""

from typing import Annotated

from fastapi import Depends, Request

from scopedsearch.config import Settings, get_settings
from scopedsearch.domain.resources import RESOURCE_MODELS, build_default_registry
from scopedsearch.domain.search.ports import SearchStore
from scopedsearch.domain.search.resource import ResourceRegistry
from scopedsearch.domain.search.service import SearchService
from scopedsearch.infrastructure.database.connection import get_session_factory
from scopedsearch.infrastructure.database.memory_store import InMemorySearchStore
from scopedsearch.infrastructure.database.search_store import SqlAlchemySearchStore


def get_registry(request: Request) -> ResourceRegistry:
    """Get the resource registry (built once per FastAPI app)."""
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        registry = build_default_registry(get_settings())
        request.app.state.registry = registry
    return registry


def build_search_store(settings: Settings) -> SearchStore:
    """Build the configured search store.

    SEARCH_STORE=memory starts with no rows; callers seed it through
    ``InMemorySearchStore.add``.
    """
    if settings.search_store == "memory":
        return InMemorySearchStore({name: [] for name in RESOURCE_MODELS})
    return SqlAlchemySearchStore(get_session_factory(), RESOURCE_MODELS)


def get_search_store(request: Request) -> SearchStore:
    """Get the search store (built once per FastAPI app)."""
    store = getattr(request.app.state, "search_store", None)
    if store is None:
        store = build_search_store(get_settings())
        request.app.state.search_store = store
    return store


def get_search_service(
    registry: Annotated[ResourceRegistry, Depends(get_registry)],
    store: Annotated[SearchStore, Depends(get_search_store)],
) -> SearchService:
    return SearchService(registry, store)


RegistryDep = Annotated[ResourceRegistry, Depends(get_registry)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]

__all__ = [
    "RegistryDep",
    "SearchServiceDep",
    "build_search_store",
    "get_registry",
    "get_search_service",
    "get_search_store",
]
