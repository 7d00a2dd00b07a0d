"""
Service layer.

Business logic services for the application.
"""

from .auto_fill_service import AutoFillService
from .history_service import TranslationHistoryService
from .language_service import LanguageService
from .machine_translation_service import MachineTranslationService
from .matrix_service import MatrixService, pivot_translations
from .transfer_service import TransferService
from .translation_service import TranslationService

__all__ = [
    "TranslationService",
    "TranslationHistoryService",
    "LanguageService",
    "MatrixService",
    "pivot_translations",
    "MachineTranslationService",
    "AutoFillService",
    "TransferService",
]
