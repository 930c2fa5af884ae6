"""Pagination schemas for API responses."""

from typing import Generic, TypeVar
from pydantic import BaseModel, Field

from companion_service.infrastructure.database.repositories.base import PaginatedResult


# Type variable for generic paginated items
T = TypeVar("T")


class PaginationMeta(BaseModel):
    """
    Pagination metadata included in paginated responses.

    Contains all information needed for pagination UI/logic:
    - Current page and size
    - Total items and pages
    - Navigation flags (has_next, has_prev)
    """

    page: int = Field(
        ...,
        ge=1,
        description="Current page number (1-indexed)",
        examples=[1, 2, 10]
    )
    page_size: int = Field(
        ...,
        ge=1,
        description="Items per page",
        examples=[10, 20]
    )
    total: int = Field(
        ...,
        ge=0,
        description="Total number of items across all pages",
        examples=[0, 12, 1000]
    )
    total_pages: int = Field(
        ...,
        ge=0,
        description="Total number of pages",
        examples=[0, 3, 50]
    )
    has_next: bool = Field(..., description="Whether there is a next page")
    has_prev: bool = Field(..., description="Whether there is a previous page")

    @classmethod
    def from_result(cls, result: PaginatedResult) -> "PaginationMeta":
        """Build metadata from a repository page."""
        return cls(
            page=result.page,
            page_size=result.page_size,
            total=result.total,
            total_pages=result.total_pages,
            has_next=result.has_next,
            has_prev=result.has_prev,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Standard paginated response wrapper.

    Example Response:
        ```json
        {
            "items": [{"id": "6f1c...", "name": "Neura"}],
            "pagination": {
                "page": 1,
                "page_size": 10,
                "total": 1,
                "total_pages": 1,
                "has_next": false,
                "has_prev": false
            }
        }
        ```
    """

    items: list[T] = Field(..., description="List of items for current page")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")
