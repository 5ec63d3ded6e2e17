from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    total: int
    limit: int
    offset: int
    has_more: bool

    @classmethod
    def for_page(cls, *, total: int, limit: int, offset: int, returned: int) -> "PaginationMeta":
        return cls(total=total, limit=limit, offset=offset, has_more=offset + returned < total)


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response wrapper"""
    items: list[T]
    pagination: PaginationMeta
