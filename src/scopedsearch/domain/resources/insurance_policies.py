"""Insurance policy search: organization-scoped patient coverage records."""

from datetime import date

from scopedsearch.domain.search.filters import (
    FilterSpec,
    contains,
    enum_match,
    equals,
    value_range,
)
from scopedsearch.domain.search.pagination import LimitPolicy
from scopedsearch.domain.search.projection import (
    SummaryProjection,
    calendar_date,
    timestamp,
    value,
)
from scopedsearch.domain.search.resource import ResourceSchema
from scopedsearch.domain.search.sorting import SortAllowlist
from scopedsearch.domain.search.types import OverLimitPolicy, OwnershipModel, SortDirection
from scopedsearch.infrastructure.database.models.insurance_policy import PolicyStatus

INSURANCE_POLICIES = ResourceSchema(
    name="insurance_policies",
    ownership=OwnershipModel.ORGANIZATION,
    allowed_roles=frozenset({"organization_admin", "billing"}),
    filters=FilterSpec(
        (
            contains("policy_number"),
            contains("payer_name"),
            equals("plan_type"),
            enum_match("policy_status", PolicyStatus),
            value_range(
                "coverage_start_date",
                date,
                lower_key="coverage_start_from",
                upper_key="coverage_start_to",
            ),
            value_range(
                "coverage_end_date",
                date,
                lower_key="coverage_end_from",
                upper_key="coverage_end_to",
            ),
        )
    ),
    sort=SortAllowlist(
        fields=frozenset(
            {
                "created_at",
                "payer_name",
                "policy_number",
                "coverage_start_date",
                "coverage_end_date",
            }
        ),
        default_field="created_at",
        default_direction=SortDirection.DESC,
    ),
    projection=SummaryProjection(
        (
            value("id"),
            value("patient_id"),
            value("policy_number"),
            value("payer_name"),
            value("group_number"),
            value("plan_type"),
            value("policy_status"),
            calendar_date("coverage_start_date"),
            calendar_date("coverage_end_date"),
            timestamp("created_at"),
            timestamp("updated_at"),
        )
    ),
    limit_policy=LimitPolicy(default_limit=20, max_limit=100, over_limit=OverLimitPolicy.REJECT),
)
