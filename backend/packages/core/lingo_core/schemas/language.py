"""
Language schemas.

Request and response models for language administration.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LanguageStatusLiteral = Literal["active", "inactive"]


class LanguageResponse(BaseModel):
    """Language response model."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    is_default: bool
    status: LanguageStatusLiteral
    created_at: datetime
    updated_at: datetime


class LanguageCreate(BaseModel):
    """Language creation request."""

    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    is_default: bool = False
    status: LanguageStatusLiteral = "active"


class LanguageUpdate(BaseModel):
    """Language update request."""

    code: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    is_default: bool | None = None
    status: LanguageStatusLiteral | None = None
