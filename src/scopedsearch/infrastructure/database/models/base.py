"""Base model and mixins for SQLAlchemy models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UUIDPrimaryKeyMixin:
    """Mixin that adds a UUID primary key."""

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
    )


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SoftDeleteMixin:
    """Mixin that adds soft delete support."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class TenantMixin:
    """Mixin that adds tenant_id for tenant-partitioned resources.

    IMPORTANT: Searches over these models are always pinned to the caller's
    tenant by the scope resolver.
    """

    @declared_attr
    def tenant_id(cls) -> Mapped[UUID]:
        return mapped_column(Uuid, nullable=False, index=True)


class OrganizationMixin:
    """Mixin that adds organization_id for organization-partitioned resources."""

    @declared_attr
    def organization_id(cls) -> Mapped[UUID]:
        return mapped_column(Uuid, nullable=False, index=True)


class OwnerMixin:
    """Mixin that adds owner_id for rows private to a single user."""

    @declared_attr
    def owner_id(cls) -> Mapped[UUID]:
        return mapped_column(Uuid, nullable=False, index=True)
