"""
Database models package.

This module exports all SQLAlchemy models for the Lingo application.
"""

from .base import Base, TimestampMixin, utcnow
from .language import Language, LanguageStatus
from .translation import Translation, TranslationStatus
from .translation_history import HistoryOperation, TranslationHistory

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "Language",
    "LanguageStatus",
    "Translation",
    "TranslationStatus",
    "TranslationHistory",
    "HistoryOperation",
]
