"""
Pydantic schemas for API requests and responses.
"""

from .common import BatchResult, PageMeta
from .history import (
    HistoryEvent,
    HistoryFilters,
    HistoryListResponse,
    TranslationHistoryResponse,
)
from .language import LanguageCreate, LanguageResponse, LanguageUpdate
from .machine_translation import (
    AutoFillLanguageRequest,
    AutoFillLanguageResponse,
    MachineTranslationHealth,
    MachineTranslationLanguage,
)
from .transfer import ImportFailure, ImportResult, ImportTranslationsData
from .translation import (
    BatchDeleteRequest,
    BatchTranslationRequest,
    TranslationCell,
    TranslationCreate,
    TranslationListResponse,
    TranslationMatrix,
    TranslationMatrixRow,
    TranslationResponse,
    TranslationUpdate,
)

__all__ = [
    # Common
    "PageMeta",
    "BatchResult",
    # Language
    "LanguageCreate",
    "LanguageUpdate",
    "LanguageResponse",
    # Translation
    "TranslationCreate",
    "TranslationUpdate",
    "TranslationResponse",
    "TranslationListResponse",
    "BatchTranslationRequest",
    "BatchDeleteRequest",
    # Matrix
    "TranslationCell",
    "TranslationMatrixRow",
    "TranslationMatrix",
    # History
    "HistoryEvent",
    "HistoryFilters",
    "TranslationHistoryResponse",
    "HistoryListResponse",
    # Machine translation
    "AutoFillLanguageRequest",
    "AutoFillLanguageResponse",
    "MachineTranslationLanguage",
    "MachineTranslationHealth",
    # Import/export
    "ImportTranslationsData",
    "ImportFailure",
    "ImportResult",
]
