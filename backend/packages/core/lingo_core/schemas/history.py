"""
Translation history schemas.

Audit records, query filters and paginated history responses.
"""

import json
from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import PageMeta

OperationLiteral = Literal["create", "update", "delete"]


class HistoryEvent(BaseModel):
    """A mutation to be appended to the audit trail."""

    translation_id: int | None
    project_id: int
    key_name: str
    language_id: int
    old_value: str | None = None
    new_value: str | None = None
    operation: OperationLiteral
    operated_by: int
    operated_at: datetime
    metadata: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _check_values(self) -> "HistoryEvent":
        if self.operation == "create" and self.old_value is not None:
            raise ValueError("create events have no old_value")
        if self.operation == "delete" and self.new_value is not None:
            raise ValueError("delete events have no new_value")
        return self

    def metadata_json(self) -> str | None:
        """Serialize metadata for storage."""
        if self.metadata is None:
            return None
        return json.dumps(self.metadata, ensure_ascii=False, sort_keys=True)


class TranslationHistoryResponse(BaseModel):
    """Translation history response model."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    translation_id: int | None = None
    project_id: int
    key_name: str
    language_id: int
    old_value: str | None = None
    new_value: str | None = None
    operation: OperationLiteral
    operated_by: int
    operated_at: datetime
    metadata: str | None = Field(default=None, validation_alias="metadata_json")


class HistoryFilters(BaseModel):
    """Optional history query filters. ``end_date`` is inclusive."""

    operation: OperationLiteral | None = None
    keyword: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class HistoryListResponse(BaseModel):
    """Paginated history list response."""

    histories: list[TranslationHistoryResponse]
    meta: PageMeta
