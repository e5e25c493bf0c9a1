"""Request-scoped value types of the search engine.

All of these are immutable and live for exactly one search call.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any
from uuid import UUID


class SortDirection(str, Enum):
    """Ordering direction."""

    ASC = "asc"
    DESC = "desc"


class OwnershipModel(str, Enum):
    """How a resource's rows are partitioned between principals."""

    TENANT = "tenant"  # tenant_id == principal.tenant_id
    ORGANIZATION = "organization"  # organization_id == principal.organization_id
    OWNER = "owner"  # owner column == principal.id
    GLOBAL = "global"  # visible to every allowed role


class OverLimitPolicy(str, Enum):
    """What to do when a caller asks for more rows than the maximum page size."""

    CLAMP = "clamp"
    REJECT = "reject"


class Operator(str, Enum):
    """Comparison kinds a storage adapter must support."""

    EQ = "eq"
    IN = "in"
    CONTAINS = "contains"
    GTE = "gte"
    LTE = "lte"
    IS_NULL = "is_null"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, supplied by the authentication layer."""

    id: UUID
    role: str
    organization_id: UUID | None = None
    tenant_id: UUID | None = None
    email: str | None = None


@dataclass(frozen=True)
class Condition:
    """A single comparison against one storage column."""

    field: str
    op: Operator
    value: Any = None


@dataclass(frozen=True)
class AnyOf:
    """OR-combination of conditions, used for keyword fan-out."""

    conditions: tuple[Condition, ...]

    @property
    def fields(self) -> frozenset[str]:
        return frozenset(c.field for c in self.conditions)


Clause = Condition | AnyOf


@dataclass(frozen=True)
class PredicateSet:
    """AND-combination of clauses."""

    clauses: tuple[Clause, ...] = ()

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self.clauses)

    def __len__(self) -> int:
        return len(self.clauses)

    @property
    def fields(self) -> frozenset[str]:
        """Every storage column any clause targets."""
        names: set[str] = set()
        for clause in self.clauses:
            if isinstance(clause, AnyOf):
                names |= clause.fields
            else:
                names.add(clause.field)
        return frozenset(names)


@dataclass(frozen=True)
class ScopePredicate:
    """Mandatory visibility predicate derived from the principal.

    ``mandatory_equals`` pins scope columns to the principal's values.
    ``mandatory_null`` lists columns that must be NULL (soft-delete markers).
    """

    mandatory_equals: Mapping[str, Any] = field(default_factory=dict)
    mandatory_null: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "mandatory_equals", MappingProxyType(dict(self.mandatory_equals))
        )

    @property
    def fields(self) -> frozenset[str]:
        return frozenset(self.mandatory_equals) | frozenset(self.mandatory_null)

    @property
    def is_empty(self) -> bool:
        return not self.mandatory_equals

    def as_clauses(self) -> tuple[Condition, ...]:
        equals = tuple(
            Condition(name, Operator.EQ, value) for name, value in self.mandatory_equals.items()
        )
        nulls = tuple(Condition(name, Operator.IS_NULL) for name in self.mandatory_null)
        return equals + nulls


@dataclass(frozen=True)
class SortSpec:
    """Resolved ordering; ``field`` is always a member of the allowlist."""

    field: str
    direction: SortDirection


@dataclass(frozen=True)
class PageWindow:
    """Normalized pagination parameters."""

    page: int
    limit: int
    skip: int


@dataclass(frozen=True)
class SearchRequest:
    """Caller-supplied filter, sort and page parameters."""

    page: Any = None
    limit: Any = None
    filters: Mapping[str, Any] = field(default_factory=dict)
    sort: Any = None
    sort_direction: Any = None

    # Wire keys that are not filters
    RESERVED_KEYS = frozenset({"page", "limit", "sort", "sortDirection", "sort_direction", "order"})

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SearchRequest":
        """Split a flat wire body into paging/sort keys and filters."""
        direction = payload.get("sortDirection")
        if direction is None:
            direction = payload.get("sort_direction", payload.get("order"))
        return cls(
            page=payload.get("page"),
            limit=payload.get("limit"),
            sort=payload.get("sort"),
            sort_direction=direction,
            filters={k: v for k, v in payload.items() if k not in cls.RESERVED_KEYS},
        )


@dataclass(frozen=True)
class Page:
    """Pagination metadata returned with every search."""

    current: int
    limit: int
    records: int
    pages: int


@dataclass(frozen=True)
class SearchPage:
    """Terminal result of a search: metadata plus projected summaries."""

    pagination: Page
    data: tuple[dict[str, Any], ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "pagination": {
                "current": self.pagination.current,
                "limit": self.pagination.limit,
                "records": self.pagination.records,
                "pages": self.pagination.pages,
            },
            "data": [dict(item) for item in self.data],
        }
