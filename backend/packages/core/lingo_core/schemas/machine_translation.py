"""
Machine translation schemas.

Request and response models for auto-fill and provider metadata.
"""

from pydantic import BaseModel, Field


class AutoFillLanguageRequest(BaseModel):
    """Auto-fill request. ``source_lang`` defaults to the default language."""

    target_lang: str = Field(min_length=1)
    source_lang: str | None = None


class AutoFillLanguageResponse(BaseModel):
    """Aggregate outcome of one auto-fill run."""

    total: int
    success_count: int
    failed_count: int
    message: str


class MachineTranslationLanguage(BaseModel):
    """Language supported by the machine-translation provider."""

    code: str
    name: str


class MachineTranslationHealth(BaseModel):
    """Provider reachability."""

    available: bool
