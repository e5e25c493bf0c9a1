"""Reminder model."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from scopedsearch.infrastructure.database.models.base import (
    Base,
    OwnerMixin,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class ReminderStatus(str, Enum):
    """Delivery state of a reminder."""

    PENDING = "pending"
    SENT = "sent"
    ACKNOWLEDGED = "acknowledged"
    FAILED = "failed"


class Reminder(Base, UUIDPrimaryKeyMixin, OwnerMixin, TimestampMixin, SoftDeleteMixin):
    """Scheduled notification addressed to exactly one user."""

    __tablename__ = "reminders"

    reminder_type: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ReminderStatus] = mapped_column(
        String(32), default=ReminderStatus.PENDING, nullable=False
    )
    scheduled_for: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    acknowledged_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    # Internal push endpoint, never returned by search
    delivery_uri: Mapped[str | None] = mapped_column(String(1024), nullable=True)
