"""Insurance policy model."""

from datetime import date
from enum import Enum
from uuid import UUID

from sqlalchemy import Date, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from scopedsearch.infrastructure.database.models.base import (
    Base,
    OrganizationMixin,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class PolicyStatus(str, Enum):
    """Lifecycle state of a policy."""

    ACTIVE = "active"
    PENDING = "pending"
    SUSPENDED = "suspended"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class InsurancePolicy(
    Base, UUIDPrimaryKeyMixin, OrganizationMixin, TimestampMixin, SoftDeleteMixin
):
    """Patient insurance coverage held on file by an organization."""

    __tablename__ = "insurance_policies"
    __table_args__ = (
        UniqueConstraint("organization_id", "policy_number", name="uq_policy_org_number"),
    )

    patient_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    policy_number: Mapped[str] = mapped_column(String(64), nullable=False)
    payer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    group_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    plan_type: Mapped[str] = mapped_column(String(50), nullable=False)
    policy_status: Mapped[PolicyStatus] = mapped_column(
        String(32), default=PolicyStatus.PENDING, nullable=False
    )
    coverage_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    coverage_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
