"""
Translation model definition.

This module defines the Translation model, one translated string
per (project, language, key).
"""

from enum import Enum

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class TranslationStatus(str, Enum):
    """Translation status enumeration."""

    ACTIVE = "active"
    DEPRECATED = "deprecated"


class Translation(Base, TimestampMixin):
    """
    Translated string for a key in one language of a project.

    Rows sharing a ``key_name`` within a project form one logical row
    of the translation matrix.

    Attributes:
        id: Unique translation identifier.
        project_id: Owning project.
        language_id: Language reference.
        key_name: Language-independent key.
        value: Translated text.
        context: Optional note for translators.
        status: Translation status (active/deprecated).
    """

    __tablename__ = "translations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    language_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("languages.id", ondelete="RESTRICT"),
        nullable=False,
    )
    key_name: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    context: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(
        String(20), default=TranslationStatus.ACTIVE.value, nullable=False
    )

    # Relationships
    language = relationship("Language", lazy="raise")

    # Constraints
    __table_args__ = (
        UniqueConstraint(
            "project_id", "language_id", "key_name", name="uq_translation_project_lang_key"
        ),
        Index("ix_translations_project_key", "project_id", "key_name"),
    )
