"""사용자 레포지토리 — 사용자 관련 DB 쿼리 담당.

User Repository — Handles user lookups, admin listing, and the
reviewer/admin recipient query used by notification fan-out.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.models.user import User, UserRole
from kaizen.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 레포지토리.

    User repository with identity-key lookups and filtered listing.

    Extends:
        BaseRepository[User]
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_employee_number(
        self,
        db: AsyncSession,
        employee_number: str,
    ) -> User | None:
        """사번으로 사용자를 조회합니다.

        Retrieve a user by employee number (active or not).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            employee_number: 사번 (Employee number)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        result = await db.execute(select(User).where(User.employee_number == employee_number))
        return result.scalar_one_or_none()

    async def identity_taken(
        self,
        db: AsyncSession,
        employee_number: str,
        email: str,
    ) -> bool:
        """사번 또는 이메일 중복 여부 — True if either identity key is already used."""
        result = await db.execute(
            select(User.id).where(
                or_(User.employee_number == employee_number, User.email == email)
            ).limit(1)
        )
        return result.first() is not None

    async def get_list(
        self,
        db: AsyncSession,
        department: str | None = None,
        role: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[User], int]:
        """활성 사용자 목록을 이름순으로 조회합니다.

        Retrieve active users sorted by name with optional filters.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            department: 부서 필터 (Department filter, optional)
            role: 역할 필터 (Role filter, optional)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[User], int]: (사용자 목록, 전체 개수)
        """
        query: Select = select(User).where(User.is_active.is_(True))
        if department is not None:
            query = query.where(User.department == department)
        if role is not None:
            query = query.where(User.role == role)
        query = query.order_by(User.name.asc(), User.employee_number.asc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_reviewers(self, db: AsyncSession) -> Sequence[User]:
        """활성 검토자/관리자 목록 — Active reviewer and admin users."""
        result = await db.execute(
            select(User)
            .where(
                User.is_active.is_(True),
                User.role.in_([UserRole.REVIEWER.value, UserRole.ADMIN.value]),
            )
            .order_by(User.employee_number.asc())
        )
        return result.scalars().all()

    async def get_active(self, db: AsyncSession, user_id: UUID) -> User | None:
        """활성 사용자만 조회 — Retrieve a user only if active."""
        result = await db.execute(
            select(User).where(User.id == user_id, User.is_active.is_(True))
        )
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
