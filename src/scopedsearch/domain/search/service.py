"""Search operation: one request -> one paginated, access-scoped response."""

import time
from enum import Enum

from scopedsearch.domain.search.filters import build_filter_predicate
from scopedsearch.domain.search.pagination import normalize_page
from scopedsearch.domain.search.ports import SearchStore
from scopedsearch.domain.search.projection import project
from scopedsearch.domain.search.query import build_query
from scopedsearch.domain.search.resource import ResourceRegistry
from scopedsearch.domain.search.scope import (
    owner_narrowing,
    requested_owner_mismatch,
    resolve_scope,
)
from scopedsearch.domain.search.sorting import resolve_sort
from scopedsearch.domain.search.types import (
    Page,
    PageWindow,
    PredicateSet,
    Principal,
    SearchPage,
    SearchRequest,
)
from scopedsearch.observability.metrics import record_search
from scopedsearch.shared.exceptions import (
    AuthorizationError,
    ScopedSearchError,
    ScopeError,
    StorageError,
    ValidationError,
)
from scopedsearch.shared.logging import get_logger

logger = get_logger(__name__)


class SearchStage(str, Enum):
    """Progress of a single search operation."""

    UNAUTHORIZED = "unauthorized"
    SCOPE_RESOLVED = "scope_resolved"
    FILTER_BUILT = "filter_built"
    PAGINATED = "paginated"
    QUERIED = "queried"
    PROJECTED = "projected"
    DONE = "done"
    ERROR = "error"


_ERROR_OUTCOMES: dict[type[ScopedSearchError], str] = {
    AuthorizationError: "authorization_error",
    ScopeError: "scope_error",
    ValidationError: "validation_error",
    StorageError: "storage_error",
}


def _outcome_for(exc: ScopedSearchError) -> str:
    for error_type, outcome in _ERROR_OUTCOMES.items():
        if isinstance(exc, error_type):
            return outcome
    return "error"


def empty_page(window: PageWindow) -> SearchPage:
    """A valid page with no rows, echoing the requested page number."""
    return SearchPage(
        pagination=Page(current=window.page, limit=window.limit, records=0, pages=0),
        data=(),
    )


class SearchService:
    """Runs scoped searches against a store.

    Stateless apart from its collaborators; one instance can serve any number
    of concurrent requests.
    """

    def __init__(self, registry: ResourceRegistry, store: SearchStore) -> None:
        self.registry = registry
        self.store = store

    async def search(
        self,
        principal: Principal,
        resource: str,
        request: SearchRequest,
    ) -> SearchPage:
        """Search ``resource`` on behalf of ``principal``.

        Raises:
            NotFoundError: Unknown resource type.
            AuthorizationError: The principal's role may not search the resource.
            ScopeError: The principal lacks the scope id the resource needs.
            ValidationError: Malformed page/limit or filter values.
            StorageError: The store failed or timed out.
        """
        schema = self.registry.get(resource)
        log = logger.bind(resource=resource, principal_id=str(principal.id), role=principal.role)
        started = time.perf_counter()
        stage = SearchStage.UNAUTHORIZED

        def advance(next_stage: SearchStage, **context: object) -> None:
            nonlocal stage
            stage = next_stage
            log.debug("search_stage", stage=stage.value, **context)

        try:
            if not schema.permits(principal.role):
                raise AuthorizationError(schema.name, principal.role)

            scope = resolve_scope(principal, schema)
            if (
                schema.requires_scope
                and scope.is_empty
                and principal.role not in schema.unscoped_roles
            ):
                raise ScopeError(schema.name, schema.scope_field or "scope")
            advance(SearchStage.SCOPE_RESOLVED)

            filters = build_filter_predicate(schema.filters, request.filters)
            narrowing = owner_narrowing(principal, schema, request.filters)
            if narrowing:
                filters = PredicateSet(narrowing.clauses + filters.clauses)
            sort = resolve_sort(schema.sort, request.sort, request.sort_direction)
            advance(SearchStage.FILTER_BUILT, clauses=len(filters), sort=sort.field)

            assert schema.limit_policy is not None
            window = normalize_page(request.page, request.limit, schema.limit_policy)
            advance(SearchStage.PAGINATED, page=window.page, limit=window.limit)

            if requested_owner_mismatch(principal, schema, request.filters):
                log.info("search_owner_mismatch")
                record_search(resource, "owner_mismatch", time.perf_counter() - started)
                return empty_page(window)

            descriptor = build_query(schema.name, scope, filters, sort, window)
            try:
                rows, total = await self.store.fetch(descriptor)
            except TimeoutError as exc:
                raise StorageError(f"Search on {schema.name} timed out") from exc
            advance(SearchStage.QUERIED, total=total)

            result = project(schema.projection, rows, window, total)
            advance(SearchStage.PROJECTED)
        except ScopedSearchError as exc:
            outcome = _outcome_for(exc)
            log.warning(
                "search_failed",
                stage=SearchStage.ERROR.value,
                reached=stage.value,
                outcome=outcome,
                error=exc.message,
                details=exc.details,
            )
            record_search(resource, outcome, time.perf_counter() - started)
            raise

        advance(SearchStage.DONE, returned=len(result.data))
        record_search(resource, "ok" if result.data else "empty", time.perf_counter() - started)
        return result
