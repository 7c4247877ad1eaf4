"""Pagination request/response DTOs shared by the list queries."""

import math
from typing import List, Optional

import attrs

from src.platform.config.core_setting import settings


@attrs.frozen
class PageRequest:
    page: int
    limit: int

    @classmethod
    def of(cls, *, page: Optional[int] = None, limit: Optional[int] = None) -> 'PageRequest':
        """Clamp to page >= 1 and 1 <= limit <= MAX_PAGE_SIZE"""
        page = page if page and page > 0 else 1
        limit = limit if limit and limit > 0 else settings.DEFAULT_PAGE_SIZE
        return cls(page=page, limit=min(limit, settings.MAX_PAGE_SIZE))


@attrs.frozen
class Page:
    items: List[dict]
    total_items: int
    current_page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.limit) if self.limit else 0
