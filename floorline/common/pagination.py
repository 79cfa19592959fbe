"""Paging, free-text search and whitelisted sorting for list endpoints."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from floorline.common.exceptions import BadRequestError

T = TypeVar("T")


class PaginationParams:
    """Query-string paging options; inject with ``Depends()``."""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        page_size: int = Query(50, ge=1, le=200),
        sort_by: str | None = Query(None, description="One of the endpoint's sortable fields"),
        sort_order: str = Query("asc", pattern="^(asc|desc)$"),
        search: str | None = Query(None, description="Case-insensitive substring match"),
    ):
        self.page = page
        self.page_size = page_size
        self.sort_by = sort_by
        self.sort_order = sort_order
        self.search = search.strip() if search else None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def total_pages(self, total: int) -> int:
        return -(-total // self.page_size)


class PaginatedResponse(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int


async def paginate(
    db: AsyncSession,
    query: Select,
    params: PaginationParams,
    sortable: Mapping[str, Any] | None = None,
    searchable: Sequence[Any] = (),
) -> tuple[list[Any], int]:
    """Return one page of ``query`` and the total row count before paging.

    ``sort_by`` must name a key of ``sortable``; the query's own ordering is
    replaced when it does.
    """
    if params.search and searchable:
        pattern = f"%{params.search}%"
        query = query.where(or_(*(column.ilike(pattern) for column in searchable)))

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0

    if params.sort_by:
        column = (sortable or {}).get(params.sort_by)
        if column is None:
            raise BadRequestError(f"Cannot sort by '{params.sort_by}'")
        query = query.order_by(None).order_by(
            column.desc() if params.sort_order == "desc" else column.asc()
        )

    rows = await db.execute(query.offset(params.offset).limit(params.page_size))
    return list(rows.scalars().all()), total
