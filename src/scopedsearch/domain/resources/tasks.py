"""Task search: tenant-scoped project board items."""

from datetime import datetime
from uuid import UUID

from scopedsearch.domain.search.filters import FilterSpec, enum_match, equals, keyword, value_range
from scopedsearch.domain.search.projection import SummaryProjection, timestamp, value
from scopedsearch.domain.search.resource import ResourceSchema
from scopedsearch.domain.search.sorting import SortAllowlist
from scopedsearch.domain.search.types import OwnershipModel, SortDirection
from scopedsearch.infrastructure.database.models.task import TaskStatus

TASKS = ResourceSchema(
    name="tasks",
    ownership=OwnershipModel.TENANT,
    allowed_roles=frozenset({"member", "admin", "owner"}),
    filters=FilterSpec(
        (
            keyword("search", "title", "description"),
            enum_match("status", TaskStatus),
            value_range("priority", int, lower_key="min_priority", upper_key="max_priority"),
            value_range("due_at", datetime, lower_key="due_from", upper_key="due_to"),
            equals("assignee_id", UUID),
        )
    ),
    sort=SortAllowlist(
        fields=frozenset({"created_at", "updated_at", "due_at", "priority", "title", "status"}),
        default_field="created_at",
        default_direction=SortDirection.DESC,
    ),
    projection=SummaryProjection(
        (
            value("id"),
            value("title"),
            value("status"),
            value("priority"),
            value("assignee_id"),
            timestamp("due_at"),
            timestamp("created_at"),
            timestamp("updated_at"),
        )
    ),
)
