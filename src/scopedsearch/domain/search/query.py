"""Query descriptor composition."""

from dataclasses import dataclass

from scopedsearch.domain.search.pagination import beyond_store_range
from scopedsearch.domain.search.types import (
    AnyOf,
    Clause,
    PageWindow,
    PredicateSet,
    ScopePredicate,
    SortDirection,
    SortSpec,
)
from scopedsearch.shared.logging import get_logger

logger = get_logger(__name__)

TIEBREAK_FIELD = "id"


@dataclass(frozen=True)
class QueryDescriptor:
    """One immutable predicate snapshot plus ordering and window.

    Both the page query and the count query are derived from ``predicates``;
    neither is rebuilt separately.
    """

    resource: str
    predicates: PredicateSet
    scope: ScopePredicate
    order_by: tuple[SortSpec, ...]
    skip: int
    take: int

    @property
    def sort(self) -> SortSpec:
        return self.order_by[0]


def _drop_scope_collisions(
    filters: PredicateSet, scope: ScopePredicate
) -> tuple[tuple[Clause, ...], set[str]]:
    protected = scope.fields
    kept: list[Clause] = []
    dropped: set[str] = set()
    for clause in filters:
        if isinstance(clause, AnyOf):
            members = tuple(c for c in clause.conditions if c.field not in protected)
            dropped |= clause.fields & protected
            if members:
                kept.append(AnyOf(members))
        elif clause.field in protected:
            dropped.add(clause.field)
        else:
            kept.append(clause)
    return tuple(kept), dropped


def build_query(
    resource: str,
    scope: ScopePredicate,
    filters: PredicateSet,
    sort: SortSpec,
    window: PageWindow,
) -> QueryDescriptor:
    """Merge scope, filters, sort and window into a single descriptor.

    Scope clauses come first and cannot be overridden: any request filter
    targeting a scope column is dropped.
    """
    kept, dropped = _drop_scope_collisions(filters, scope)
    if dropped:
        logger.warning("search_scope_filter_dropped", resource=resource, fields=sorted(dropped))

    order_by: tuple[SortSpec, ...] = (sort,)
    if sort.field != TIEBREAK_FIELD:
        # Stable paging over rows that share the sort value
        order_by += (SortSpec(TIEBREAK_FIELD, SortDirection.ASC),)

    skip, take = window.skip, window.limit
    if beyond_store_range(window):
        logger.info("search_page_out_of_range", resource=resource, page=window.page)
        # Count only
        skip, take = 0, 0

    return QueryDescriptor(
        resource=resource,
        predicates=PredicateSet(scope.as_clauses() + kept),
        scope=scope,
        order_by=order_by,
        skip=skip,
        take=take,
    )
