"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Provides a generic paginate function and the pagination metadata model
embedded in every list response.
"""

import math
from typing import Any, Sequence
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.schemas.common import CamelModel


class Pagination(CamelModel):
    """페이지네이션 메타데이터.

    Pagination metadata returned next to list items.

    Attributes:
        page: 현재 페이지 번호 (Current page number, 1-based)
        limit: 페이지당 항목 수 (Items per page)
        total: 전체 항목 수 (Total count across all pages)
        pages: 전체 페이지 수 (Total number of pages)
    """

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        """전체 개수로부터 메타데이터를 계산합니다 — Compute pages = ceil(total / limit)."""
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 10,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning items and total count.
    Runs two queries: one for the total count (via subquery) and one for
    the actual page of results with OFFSET/LIMIT.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate)
        page: 요청 페이지 번호, 1부터 시작 (Page number, 1-indexed, default: 1)
        per_page: 페이지당 항목 수 (Items per page, default: 10)

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수) 튜플
            (Tuple of paginated items and total count)
    """
    # 전체 개수 조회 — 정렬/eager load 옵션을 제외하고 COUNT 실행 (Count total via subquery)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    offset: int = (page - 1) * per_page
    result = await db.execute(query.offset(offset).limit(per_page))
    items: Sequence[Any] = result.scalars().all()

    return items, total
