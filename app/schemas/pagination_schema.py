from typing import Callable, Generic, List, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field

from app.core.config import settings

T = TypeVar('T')


class PaginationParams(BaseModel):
    """Pagination parameters"""
    page: int = Field(1, ge=1, description="Page number")
    limit: int = Field(10, ge=1, description="Items per page")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def pagination(default_limit: int = settings.DEFAULT_PAGE_SIZE) -> Callable[..., PaginationParams]:
    """Builds a page/limit query dependency with an endpoint specific default"""
    def dependency(
        page: int = Query(1, ge=1),
        limit: int = Query(default_limit, ge=1, le=settings.MAX_PAGE_SIZE),
    ) -> PaginationParams:
        return PaginationParams(page=page, limit=limit)
    return dependency


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response"""
    items: List[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def create(cls, items: List[T], total: int, page: int, limit: int):
        """Builds a paginated response"""
        total_pages = (total + limit - 1) // limit if total > 0 else 0
        return cls(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages
        )
