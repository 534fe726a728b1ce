import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

T = TypeVar("T")


class PageRequest(BaseModel):
    """Requested page, normalized: page >= 1 and 1 <= limit <= MAX_LIMIT."""

    page: int = 1
    limit: int = DEFAULT_LIMIT

    @classmethod
    def create(cls, page: int, limit: int) -> "PageRequest":
        page = max(page, 1)
        limit = DEFAULT_LIMIT if limit <= 0 else min(limit, MAX_LIMIT)
        return cls(page=page, limit=limit)

    def clamp(self, total_items: int) -> "PageRequest":
        """Move a page past the end back to the last page."""
        total_pages = math.ceil(total_items / self.limit)
        if total_pages and self.page > total_pages:
            return PageRequest(page=total_pages, limit=self.limit)
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Page(BaseModel, Generic[T]):
    """Page of results for list endpoints."""

    items: list[T] = Field(..., description="Items on this page")
    count: int = Field(..., description="Number of items on this page", ge=0)
    total_items: int = Field(..., description="Total number of items across all pages", ge=0)
    total_pages: int = Field(..., description="Total number of pages", ge=0)
    page: int = Field(..., description="Current page number, starting at 1", ge=1)
    limit: int = Field(..., description="Maximum items per page", ge=1)

    @classmethod
    def build(cls, items: list[T], total_items: int, request: PageRequest) -> "Page[T]":
        return cls(
            items=items,
            count=len(items),
            total_items=total_items,
            total_pages=math.ceil(total_items / request.limit),
            page=request.page,
            limit=request.limit,
        )
