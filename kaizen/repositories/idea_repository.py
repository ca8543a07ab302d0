"""아이디어 레포지토리 — 아이디어 관련 DB 쿼리 담당.

Idea Repository — Handles idea lookups, filtered listing and the
grouped aggregates used by the statistics service.
Every query here only sees active ideas; withdrawn ideas resolve as missing.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from kaizen.models.idea import Idea
from kaizen.repositories.base import BaseRepository


class IdeaRepository(BaseRepository[Idea]):
    """아이디어 레포지토리.

    Idea repository with detail loading and filtered pagination.

    Extends:
        BaseRepository[Idea]
    """

    def __init__(self) -> None:
        super().__init__(Idea)

    def _detail_query(self) -> Select:
        """제출자/검토자 eager load 포함 기본 쿼리 — Base query with summaries loaded."""
        return (
            select(Idea)
            .options(selectinload(Idea.submitter), selectinload(Idea.reviewer))
            .where(Idea.is_active.is_(True))
        )

    async def get_detail(
        self,
        db: AsyncSession,
        idea_id: UUID,
    ) -> Idea | None:
        """활성 아이디어를 제출자/검토자와 함께 조회합니다.

        Retrieve an active idea with submitter and reviewer loaded.
        populate_existing refreshes an instance already in the session.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            idea_id: 아이디어 UUID (Idea UUID)

        Returns:
            Idea | None: 조회된 아이디어 또는 None (Found idea or None)
        """
        result = await db.execute(
            self._detail_query()
            .where(Idea.id == idea_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_list(
        self,
        db: AsyncSession,
        filters: dict[str, Any],
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Idea], int]:
        """필터가 적용된 아이디어 목록을 최신순으로 조회합니다.

        Retrieve active ideas newest first, filtered by any of:
        status, department, benefit, submitted_by (employee number),
        submitter_id (UUID), search (case-insensitive substring over
        title/problem/improvement).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            filters: 필터 딕셔너리, None 값은 무시 (Filter dict; None values are ignored)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[Idea], int]: (아이디어 목록, 전체 개수)
        """
        query: Select = self._detail_query()

        if filters.get("status") is not None:
            query = query.where(Idea.status == filters["status"])
        if filters.get("department") is not None:
            query = query.where(Idea.department == filters["department"])
        if filters.get("benefit") is not None:
            query = query.where(Idea.benefit == filters["benefit"])
        if filters.get("submitted_by") is not None:
            query = query.where(Idea.submitted_by_employee_number == filters["submitted_by"])
        if filters.get("submitter_id") is not None:
            query = query.where(Idea.submitted_by == filters["submitter_id"])
        if filters.get("search"):
            # % 와 _ 는 리터럴로 검색 (autoescape)
            search: str = filters["search"]
            query = query.where(
                or_(
                    Idea.title.icontains(search, autoescape=True),
                    Idea.problem.icontains(search, autoescape=True),
                    Idea.improvement.icontains(search, autoescape=True),
                )
            )

        query = query.order_by(Idea.created_at.desc(), Idea.id.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def stats_by_status(self, db: AsyncSession) -> list[Any]:
        """상태별 개수/예상 절감액 합계 — Count and estimated savings per status."""
        result = await db.execute(
            select(
                Idea.status,
                func.count(Idea.id).label("idea_count"),
                func.coalesce(func.sum(Idea.estimated_savings), 0).label("total_savings"),
            )
            .where(Idea.is_active.is_(True))
            .group_by(Idea.status)
            .order_by(Idea.status)
        )
        return list(result.all())

    async def stats_by_department(self, db: AsyncSession) -> list[Any]:
        """부서별 개수/예상 절감액 합계 — Count and estimated savings per department."""
        result = await db.execute(
            select(
                Idea.department,
                func.count(Idea.id).label("idea_count"),
                func.coalesce(func.sum(Idea.estimated_savings), 0).label("total_savings"),
            )
            .where(Idea.is_active.is_(True))
            .group_by(Idea.department)
            .order_by(Idea.department)
        )
        return list(result.all())

    async def stats_by_benefit(self, db: AsyncSession) -> list[Any]:
        """효과 분류별 개수 — Count per benefit category."""
        result = await db.execute(
            select(Idea.benefit, func.count(Idea.id).label("idea_count"))
            .where(Idea.is_active.is_(True))
            .group_by(Idea.benefit)
            .order_by(Idea.benefit)
        )
        return list(result.all())


# 싱글턴 인스턴스 — Singleton instance
idea_repository: IdeaRepository = IdeaRepository()
