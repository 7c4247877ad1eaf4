from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from src.service.ticketing.app.dto.page import Page


T = TypeVar('T')


class PaginationMeta(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    limit: int

    @classmethod
    def from_page(cls, page: Page) -> 'PaginationMeta':
        return cls(
            current_page=page.current_page,
            total_pages=page.total_pages,
            total_items=page.total_items,
            limit=page.limit,
        )


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope; `status` mirrors the HTTP status code"""

    success: bool = True
    status: int
    message: str
    data: Optional[T] = None
    pagination: Optional[PaginationMeta] = None
    code: Optional[str] = None
