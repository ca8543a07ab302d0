"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.
Provides reusable dependencies for extracting the current user from JWT
and enforcing capability checks on API endpoints.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    4. 페이로드의 "sub" 필드로 DB에서 사용자를 조회 — 역할도 DB 값 사용
       (User and role are loaded from the DB; the role claim is ignored)
    5. 사용자 활성 상태를 확인 (User active status is verified)

Authorization Flow (require_capability):
    1. get_current_user로 사용자 인증 (User authenticated via get_current_user)
    2. ensure_capability로 역할의 권한 확인 (Role capability checked)
    3. 권한이 없으면 403 Forbidden (Returns 403 when missing)
"""

from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.database import get_db
from kaizen.models.user import User
from kaizen.repositories.user_repository import user_repository
from kaizen.utils.access import Capability, ensure_capability
from kaizen.utils.exceptions import UnauthorizedError
from kaizen.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — 헤더 누락 시 직접 401 처리 (auto_error=False)
# Extracts JWT from Authorization: Bearer <token>; missing header handled below as 401
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.
    Validates token signature, expiration, type, and user existence/active status.

    Args:
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials from header)
        db: 비동기 DB 세션 (Async database session)

    Returns:
        User: 인증된 사용자 ORM 인스턴스 (Authenticated user ORM instance)

    Raises:
        UnauthorizedError: 토큰 누락/무효/만료, 사용자 없음/비활성
                           (Missing, invalid or expired token; unknown or inactive user)
    """
    if credentials is None:
        raise UnauthorizedError("Access token required")

    try:
        payload: dict = decode_token(credentials.credentials)
        user_id = UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError, TypeError):
        raise UnauthorizedError("Invalid or expired token")

    # 토큰 타입 검증 — Reject refresh tokens used as access tokens
    if payload.get("type") != "access":
        raise UnauthorizedError("Invalid token type")

    user: User | None = await user_repository.get_active(db, user_id)
    if user is None:
        raise UnauthorizedError("User not found or inactive")

    return user


def require_capability(capability: Capability) -> Callable[..., Awaitable[User]]:
    """권한 기반 검사 의존성 팩토리.

    Dependency factory that creates a FastAPI dependency enforcing a
    capability through ensure_capability.

    Args:
        capability: 필요한 권한 (Required capability)

    Returns:
        FastAPI 의존성 함수 — 인증된 사용자 반환 또는 403 발생
        (FastAPI dependency function that returns User or raises 403)
    """
    async def _check(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        ensure_capability(current_user, capability)
        return current_user
    return _check
