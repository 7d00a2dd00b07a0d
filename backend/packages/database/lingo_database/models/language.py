"""
Language model definition.

This module defines the Language model for the set of locales
translations can be written in.
"""

from enum import Enum

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class LanguageStatus(str, Enum):
    """Language status enumeration."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Language(Base, TimestampMixin):
    """
    Language model.

    Languages are global to the deployment. At most one language carries
    the default flag; the default language is the fallback source for
    machine-translation auto-fill.

    Attributes:
        id: Unique language identifier.
        code: Locale code (unique, e.g. "en", "zh_CN").
        name: Human readable name.
        is_default: Whether this is the default language.
        status: Language status (active/inactive).
    """

    __tablename__ = "languages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=LanguageStatus.ACTIVE.value, nullable=False
    )
