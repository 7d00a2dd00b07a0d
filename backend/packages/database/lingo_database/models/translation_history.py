"""
Translation history model definition.

This module defines the append-only audit trail of translation mutations.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class HistoryOperation(str, Enum):
    """Audited operation enumeration."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class TranslationHistory(Base):
    """
    Immutable audit record of one translation mutation.

    ``translation_id`` is intentionally a plain column rather than a
    foreign key: translations are hard-deleted and their history must
    remain queryable afterwards.

    Attributes:
        id: Monotonic history identifier.
        translation_id: Affected translation.
        project_id: Owning project.
        key_name: Key of the affected translation.
        language_id: Language of the affected translation.
        old_value: Value before the mutation (None on create).
        new_value: Value after the mutation (None on delete).
        operation: create/update/delete.
        operated_by: Acting user id.
        operated_at: Time of the mutation (UTC).
        metadata_json: Optional JSON-encoded metadata.
    """

    __tablename__ = "translation_histories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    translation_id: Mapped[int | None] = mapped_column(Integer, index=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False)
    key_name: Mapped[str] = mapped_column(String(255), nullable=False)
    language_id: Mapped[int] = mapped_column(Integer, nullable=False)
    old_value: Mapped[str | None] = mapped_column(Text)
    new_value: Mapped[str | None] = mapped_column(Text)
    operation: Mapped[str] = mapped_column(String(10), nullable=False)
    operated_by: Mapped[int] = mapped_column(Integer, nullable=False)
    operated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    # "metadata" is reserved on declarative classes
    metadata_json: Mapped[str | None] = mapped_column("metadata", Text)

    __table_args__ = (
        Index("ix_translation_histories_project_operated", "project_id", "operated_at"),
        Index("ix_translation_histories_user_operated", "operated_by", "operated_at"),
    )
