"""
Import/export schemas.

The exchange format maps a language code to a mapping of key to value.
"""

from pydantic import BaseModel, RootModel

from .common import BatchResult


class ImportTranslationsData(RootModel[dict[str, dict[str, object]]]):
    """``{language_code: {key_name: value}}`` import payload."""


class ImportFailure(BaseModel):
    """A (language, key) pair rejected during import."""

    language_code: str
    key_name: str
    reason: str


class ImportResult(BatchResult):
    """Import summary with itemized failures."""

    failures: list[ImportFailure] = []
