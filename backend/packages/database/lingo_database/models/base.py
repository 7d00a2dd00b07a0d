"""
Base model definitions.

This module provides the declarative base and shared mixins
for all Lingo database models.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Return the current UTC time as an aware datetime."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base class for all models."""


class TimestampMixin:
    """
    Mixin adding creation and modification timestamps.

    Timestamps are assigned by the application so that audit records
    written in the same unit of work can share the exact same instant.

    Attributes:
        created_at: Row creation time (UTC).
        updated_at: Last modification time (UTC).
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
