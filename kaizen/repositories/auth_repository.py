"""인증 레포지토리 — 리프레시 토큰 및 로그인 코드 CRUD.

Auth Repository — Handles refresh token and one-time login code storage.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.models.token import LoginCode, RefreshToken


class AuthRepository:
    """인증 관련 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling authentication-related database queries.
    Manages refresh token and login code lifecycles.
    """

    async def create_refresh_token(
        self,
        db: AsyncSession,
        user_id: UUID,
        token: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """새 리프레시 토큰을 생성합니다.

        Create a new refresh token record in the database.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 토큰 소유자 사용자 ID (Token owner user UUID)
            token: JWT 리프레시 토큰 문자열 (JWT refresh token string)
            expires_at: 토큰 만료 일시 (Token expiration timestamp)

        Returns:
            RefreshToken: 생성된 리프레시 토큰 레코드 (Created refresh token record)
        """
        db_token: RefreshToken = RefreshToken(
            user_id=user_id,
            token=token,
            expires_at=expires_at,
        )
        db.add(db_token)
        await db.flush()
        return db_token

    async def get_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> RefreshToken | None:
        """리프레시 토큰 문자열로 토큰 레코드를 조회합니다.

        Retrieve a refresh token record by its token string.
        """
        query: Select = select(RefreshToken).where(RefreshToken.token == token)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def delete_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> bool:
        """리프레시 토큰을 삭제합니다.

        Delete a specific refresh token by its token string.

        Returns:
            bool: 삭제 성공 여부 (Whether the deletion was successful)
        """
        result = await db.execute(delete(RefreshToken).where(RefreshToken.token == token))
        await db.flush()
        return result.rowcount > 0

    async def delete_user_refresh_tokens(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> None:
        """특정 사용자의 모든 리프레시 토큰을 삭제합니다.

        Delete all refresh tokens for a specific user (logout from all devices).
        """
        await db.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
        await db.flush()

    async def create_login_code(
        self,
        db: AsyncSession,
        user_id: UUID,
        code_hash: str,
        expires_at: datetime,
    ) -> LoginCode:
        """로그인 코드 해시를 저장합니다 — Store a hashed one-time code."""
        login_code: LoginCode = LoginCode(
            user_id=user_id,
            code_hash=code_hash,
            expires_at=expires_at,
        )
        db.add(login_code)
        await db.flush()
        return login_code

    async def get_open_login_codes(
        self,
        db: AsyncSession,
        user_id: UUID,
        now: datetime,
    ) -> Sequence[LoginCode]:
        """미사용·미만료 로그인 코드를 최신순으로 조회합니다.

        Retrieve unconsumed, unexpired login codes for a user, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 대상 사용자 ID (Target user UUID)
            now: 기준 시각 UTC (Reference time)

        Returns:
            Sequence[LoginCode]: 사용 가능한 코드 목록 (Usable codes)
        """
        result = await db.execute(
            select(LoginCode)
            .where(
                LoginCode.user_id == user_id,
                LoginCode.consumed_at.is_(None),
                LoginCode.expires_at > now,
            )
            .order_by(LoginCode.created_at.desc())
        )
        return result.scalars().all()

    async def consume_open_codes(
        self,
        db: AsyncSession,
        user_id: UUID,
        now: datetime,
    ) -> None:
        """사용자의 모든 미사용 코드를 사용 처리 — Mark every open code as consumed."""
        await db.execute(
            update(LoginCode)
            .where(LoginCode.user_id == user_id, LoginCode.consumed_at.is_(None))
            .values(consumed_at=now)
        )
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
auth_repository: AuthRepository = AuthRepository()
