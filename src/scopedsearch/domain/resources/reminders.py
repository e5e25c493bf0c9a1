"""Reminder search: notifications private to their recipient."""

from datetime import datetime

from scopedsearch.domain.search.filters import FilterSpec, enum_match, equals, value_range
from scopedsearch.domain.search.projection import SummaryProjection, timestamp, value
from scopedsearch.domain.search.resource import ResourceSchema
from scopedsearch.domain.search.sorting import SortAllowlist
from scopedsearch.domain.search.types import OwnershipModel, SortDirection
from scopedsearch.infrastructure.database.models.reminder import ReminderStatus

REMINDERS = ResourceSchema(
    name="reminders",
    ownership=OwnershipModel.OWNER,
    allowed_roles=frozenset({"member", "patient", "admin"}),
    unscoped_roles=frozenset({"support"}),
    owner_request_keys=("recipientUserId", "owner_id"),
    filters=FilterSpec(
        (
            equals("reminder_type"),
            enum_match("status", ReminderStatus),
            value_range(
                "scheduled_for",
                datetime,
                lower_key="scheduled_from",
                upper_key="scheduled_to",
            ),
            equals("delivered_at", datetime, null_matches_missing=True),
        )
    ),
    sort=SortAllowlist(
        fields=frozenset({"scheduled_for", "created_at", "delivered_at", "status"}),
        default_field="scheduled_for",
        default_direction=SortDirection.ASC,
    ),
    projection=SummaryProjection(
        (
            value("id"),
            value("recipient_user_id", "owner_id"),
            value("reminder_type"),
            value("message"),
            value("status"),
            timestamp("scheduled_for"),
            timestamp("delivered_at"),
            timestamp("acknowledged_at"),
            timestamp("created_at"),
        )
    ),
)
