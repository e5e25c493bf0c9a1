"""Ports for search engine dependencies."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from scopedsearch.domain.search.query import QueryDescriptor


class SearchStore(Protocol):
    """Persistence interface for executing a query descriptor."""

    async def fetch(self, descriptor: QueryDescriptor) -> tuple[Sequence[Any], int]:
        """Return the rows of the requested window and the total match count.

        Both values must be computed from ``descriptor.predicates``.

        Raises:
            StorageError: If the store fails or times out.
        """
