"""
Shared schemas.

Pagination metadata and bulk operation summaries.
"""

import math

from pydantic import BaseModel


class PageMeta(BaseModel):
    """Pagination metadata."""

    page: int
    page_size: int
    total_count: int
    total_pages: int

    @classmethod
    def build(cls, page: int, page_size: int, total_count: int) -> "PageMeta":
        """Build metadata from the requested page and the matching row count."""
        total_pages = math.ceil(total_count / page_size) if page_size > 0 else 0
        return cls(
            page=page,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
        )


class BatchResult(BaseModel):
    """Outcome of a bulk operation."""

    total: int
    success_count: int
    failed_count: int = 0
    skipped_count: int = 0
    message: str = ""
