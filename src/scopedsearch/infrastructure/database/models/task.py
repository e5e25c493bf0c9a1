"""Task model."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from scopedsearch.infrastructure.database.models.base import (
    Base,
    SoftDeleteMixin,
    TenantMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class TaskStatus(str, Enum):
    """Workflow state of a task."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    DONE = "done"


class Task(Base, UUIDPrimaryKeyMixin, TenantMixin, TimestampMixin, SoftDeleteMixin):
    """Unit of work within a tenant's project board."""

    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_tenant_status", "tenant_id", "status"),)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        String(32), default=TaskStatus.TODO, nullable=False
    )
    priority: Mapped[int] = mapped_column(Integer, default=3, nullable=False)  # 1 = highest
    assignee_id: Mapped[UUID | None] = mapped_column(nullable=True, index=True)
    due_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
