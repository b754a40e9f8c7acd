"""Pagination envelope shared by admin listings."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Pagination(BaseModel):
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    pages: int = Field(..., ge=0)


class Page(BaseModel, Generic[T]):
    """One page of results with its pagination block."""

    data: list[T]
    pagination: Pagination


def paginate(items: list[T], page: int, limit: int) -> Page[T]:
    """Slice an already filtered and sorted list into a page.

    Args:
        items: Full result list
        page: 1-based page number
        limit: Page size

    Returns:
        Page with the requested slice and totals
    """
    total = len(items)
    start = (page - 1) * limit
    return Page[T](
        data=items[start : start + limit],
        pagination=Pagination(
            total=total,
            page=page,
            limit=limit,
            pages=math.ceil(total / limit),
        ),
    )
