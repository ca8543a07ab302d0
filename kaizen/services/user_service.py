"""사용자 서비스 — 사용자 관리 비즈니스 로직.

User Service — Business logic for admin user management.
Users are created by admins and deactivated instead of deleted.
Employee number and email are identity keys and cannot be changed.
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.models.user import User
from kaizen.repositories.auth_repository import auth_repository
from kaizen.repositories.user_repository import user_repository
from kaizen.schemas.user import UserCreate, UserUpdate
from kaizen.utils.access import Capability, ensure_capability
from kaizen.utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class UserService:
    """사용자 서비스.

    User management service (admin only).
    """

    async def list_users(
        self,
        db: AsyncSession,
        current_user: User,
        department: str | None = None,
        role: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[User], int]:
        """활성 사용자 목록을 조회합니다 (이름순).

        List active users sorted by name, optionally filtered by department/role.

        Returns:
            tuple[Sequence[User], int]: (사용자 목록, 전체 개수)
        """
        ensure_capability(current_user, Capability.USER_MANAGE)
        return await user_repository.get_list(db, department, role, page, per_page)

    async def get_user(
        self,
        db: AsyncSession,
        current_user: User,
        user_id: UUID,
    ) -> User:
        """사용자 상세 조회 — Retrieve a user or raise NotFoundError."""
        ensure_capability(current_user, Capability.USER_MANAGE)
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def create_user(
        self,
        db: AsyncSession,
        current_user: User,
        data: UserCreate,
    ) -> User:
        """새 사용자를 생성합니다.

        Create a new user. Duplicate employee numbers or emails are rejected
        before anything is written.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 요청 관리자 (Acting admin)
            data: 생성 요청 데이터 (Creation payload)

        Returns:
            User: 생성된 사용자 (Created user)

        Raises:
            ForbiddenError: 관리자가 아님 (Caller is not an admin)
            ConflictError: 사번/이메일 중복 (Duplicate employee number or email)
        """
        ensure_capability(current_user, Capability.USER_MANAGE)

        if await user_repository.identity_taken(db, data.employee_number, data.email):
            raise ConflictError("User with this employee number or email already exists")

        try:
            user: User = await user_repository.create(db, {
                "employee_number": data.employee_number,
                "name": data.name,
                "email": data.email,
                "department": data.department.value,
                "designation": data.designation,
                "role": data.role.value,
            })
        except IntegrityError:
            # 동시 생성 경합 — Concurrent insert won the unique constraint
            await db.rollback()
            raise ConflictError("User with this employee number or email already exists")

        logger.info("User %s created by %s", data.employee_number, current_user.employee_number)
        return user

    async def update_user(
        self,
        db: AsyncSession,
        current_user: User,
        user_id: UUID,
        data: UserUpdate,
    ) -> User:
        """사용자 정보를 수정합니다 (부분 업데이트).

        Update name, department, designation, role or active flag.
        Clearing the active flag revokes refresh tokens like deactivate_user.

        Raises:
            NotFoundError: 사용자 없음 (User not found)
        """
        user: User = await self.get_user(db, current_user, user_id)
        was_active: bool = user.is_active
        update_data: dict = data.model_dump(exclude_unset=True)
        for key in ("department", "role"):
            if update_data.get(key) is not None:
                update_data[key] = update_data[key].value
        user = await user_repository.update(db, user, update_data)
        if was_active and not user.is_active:
            await auth_repository.delete_user_refresh_tokens(db, user.id)
            logger.info("User %s deactivated by %s", user.employee_number, current_user.employee_number)
        return user

    async def deactivate_user(
        self,
        db: AsyncSession,
        current_user: User,
        user_id: UUID,
    ) -> User:
        """사용자를 비활성화합니다 (소프트 삭제).

        Soft-delete a user by clearing is_active and revoking their refresh
        tokens. Ideas and notifications are kept.
        """
        user: User = await self.get_user(db, current_user, user_id)
        user.is_active = False
        await db.flush()
        await auth_repository.delete_user_refresh_tokens(db, user.id)
        logger.info("User %s deactivated by %s", user.employee_number, current_user.employee_number)
        return user


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
