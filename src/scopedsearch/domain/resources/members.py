"""Member directory search for tenant administrators."""

from scopedsearch.domain.search.filters import FilterSpec, contains, equals
from scopedsearch.domain.search.projection import SummaryProjection, timestamp, value
from scopedsearch.domain.search.resource import ResourceSchema
from scopedsearch.domain.search.sorting import SortAllowlist
from scopedsearch.domain.search.types import OwnershipModel, SortDirection

# Never projected: password_hash, avatar_storage_uri
MEMBERS = ResourceSchema(
    name="members",
    ownership=OwnershipModel.TENANT,
    allowed_roles=frozenset({"admin", "owner"}),
    filters=FilterSpec(
        (
            contains("email"),
            contains("name", column="full_name"),
            equals("role"),
        )
    ),
    sort=SortAllowlist(
        fields=frozenset({"email", "full_name", "created_at", "last_login_at"}),
        default_field="email",
        default_direction=SortDirection.ASC,
    ),
    projection=SummaryProjection(
        (
            value("id"),
            value("email"),
            value("full_name"),
            value("role"),
            timestamp("last_login_at"),
            timestamp("created_at"),
        )
    ),
)
