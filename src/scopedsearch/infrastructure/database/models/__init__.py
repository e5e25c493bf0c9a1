"""SQLAlchemy ORM models."""

from scopedsearch.infrastructure.database.models.base import (
    Base,
    OrganizationMixin,
    OwnerMixin,
    SoftDeleteMixin,
    TenantMixin,
    TimestampMixin,
)
from scopedsearch.infrastructure.database.models.insurance_policy import (
    InsurancePolicy,
    PolicyStatus,
)
from scopedsearch.infrastructure.database.models.member import Member
from scopedsearch.infrastructure.database.models.reminder import Reminder, ReminderStatus
from scopedsearch.infrastructure.database.models.task import Task, TaskStatus

__all__ = [
    "Base",
    "TimestampMixin",
    "SoftDeleteMixin",
    "TenantMixin",
    "OrganizationMixin",
    "OwnerMixin",
    "Task",
    "TaskStatus",
    "InsurancePolicy",
    "PolicyStatus",
    "Reminder",
    "ReminderStatus",
    "Member",
]
