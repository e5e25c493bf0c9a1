"""Resource declarations and the registry that holds them."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace

from scopedsearch.config import Settings
from scopedsearch.domain.search.filters import FilterSpec
from scopedsearch.domain.search.pagination import LimitPolicy
from scopedsearch.domain.search.projection import SummaryProjection
from scopedsearch.domain.search.sorting import SortAllowlist
from scopedsearch.domain.search.types import OverLimitPolicy, OwnershipModel
from scopedsearch.shared.exceptions import NotFoundError

_DEFAULT_SCOPE_FIELDS = {
    OwnershipModel.TENANT: "tenant_id",
    OwnershipModel.ORGANIZATION: "organization_id",
    OwnershipModel.OWNER: "owner_id",
}


@dataclass(frozen=True)
class ResourceSchema:
    """Everything the engine needs to search one resource type.

    ``limit_policy`` may be left unset, in which case the registry fills it
    from settings once at registration.
    """

    name: str
    ownership: OwnershipModel
    allowed_roles: frozenset[str]
    filters: FilterSpec
    sort: SortAllowlist
    projection: SummaryProjection
    scope_field: str | None = None
    # Roles allowed to search across every tenant; they get no scope predicate
    unscoped_roles: frozenset[str] = frozenset()
    # Request keys that name the owner of an owner-partitioned row
    owner_request_keys: tuple[str, ...] = ()
    limit_policy: LimitPolicy | None = None
    hide_deleted: bool = True
    deleted_field: str = "deleted_at"

    def __post_init__(self) -> None:
        if self.scope_field is None and self.ownership in _DEFAULT_SCOPE_FIELDS:
            object.__setattr__(self, "scope_field", _DEFAULT_SCOPE_FIELDS[self.ownership])
        overlap = self.filters.request_keys & set(self.owner_request_keys)
        if overlap:
            raise ValueError(f"Owner keys cannot also be filters: {sorted(overlap)}")

    @property
    def requires_scope(self) -> bool:
        return self.ownership is not OwnershipModel.GLOBAL

    def permits(self, role: str) -> bool:
        return role in self.allowed_roles or role in self.unscoped_roles


@dataclass
class ResourceRegistry:
    """Name -> schema lookup for searchable resources."""

    default_limits: LimitPolicy = field(default_factory=LimitPolicy)
    _schemas: dict[str, ResourceSchema] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResourceRegistry":
        return cls(
            default_limits=LimitPolicy(
                default_limit=settings.search_default_limit,
                max_limit=settings.search_max_limit,
                over_limit=OverLimitPolicy(settings.search_over_limit_policy),
            )
        )

    def register(self, schema: ResourceSchema) -> ResourceSchema:
        if schema.name in self._schemas:
            raise ValueError(f"Resource '{schema.name}' is already registered")
        if schema.limit_policy is None:
            schema = replace(schema, limit_policy=self.default_limits)
        self._schemas[schema.name] = schema
        return schema

    def register_all(self, schemas: Iterable[ResourceSchema]) -> None:
        for schema in schemas:
            self.register(schema)

    def get(self, name: str) -> ResourceSchema:
        try:
            return self._schemas[name]
        except KeyError:
            raise NotFoundError("Resource", name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __iter__(self) -> Iterator[ResourceSchema]:
        return iter(self._schemas.values())
