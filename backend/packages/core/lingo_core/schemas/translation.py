"""
Translation schemas.

Request and response models for translation rows, bulk operations
and the pivoted translation matrix.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import PageMeta
from .language import LanguageResponse

TranslationStatusLiteral = Literal["active", "deprecated"]


class TranslationResponse(BaseModel):
    """Translation response model."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    language_id: int
    key_name: str
    value: str
    context: str | None = None
    status: TranslationStatusLiteral
    created_at: datetime
    updated_at: datetime


class TranslationCreate(BaseModel):
    """Translation creation request."""

    project_id: int
    language_id: int
    key_name: str = Field(min_length=1, max_length=255)
    value: str
    context: str | None = None
    status: TranslationStatusLiteral = "active"


class TranslationUpdate(BaseModel):
    """Translation update request. Omitted fields are left unchanged."""

    value: str | None = None
    context: str | None = None
    status: TranslationStatusLiteral | None = None


class TranslationListResponse(BaseModel):
    """Paginated translation list response."""

    data: list[TranslationResponse]
    meta: PageMeta


class BatchTranslationRequest(BaseModel):
    """
    Bulk creation request.

    Either one key across several languages (``translations`` maps a
    language code to a value) or an explicit list of ``records``.
    """

    project_id: int | None = None
    key_name: str | None = Field(default=None, min_length=1, max_length=255)
    context: str | None = None
    translations: dict[str, str] | None = None
    records: list[TranslationCreate] | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> "BatchTranslationRequest":
        if self.records is not None:
            return self
        if self.project_id is None or not self.key_name or self.translations is None:
            raise ValueError(
                "Provide either 'records' or 'project_id', 'key_name' and 'translations'"
            )
        return self


class TranslationCell(BaseModel):
    """One (key, language) cell of the translation matrix."""

    id: int
    language_id: int
    value: str
    status: TranslationStatusLiteral
    updated_at: datetime


class TranslationMatrixRow(BaseModel):
    """One logical key of the matrix; missing languages are absent from ``translations``."""

    key_name: str
    context: str | None = None
    translations: dict[int, TranslationCell]


class TranslationMatrix(BaseModel):
    """Paginated matrix of keys (rows) by languages (columns)."""

    languages: list[LanguageResponse]
    rows: list[TranslationMatrixRow]
    total_count: int
    page: int
    page_size: int
    total_pages: int


class BatchDeleteRequest(BaseModel):
    """Bulk deletion request."""

    ids: list[int]
