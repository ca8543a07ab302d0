"""인증 라우터 — 로그인 코드 요청, 로그인, 토큰 갱신, 로그아웃, 프로필.

Auth Router — One-time code request, login, token refresh, logout and
profile endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.api.deps import get_current_user
from kaizen.database import get_db
from kaizen.models.user import User
from kaizen.schemas.auth import CodeRequest, LoginRequest, RefreshRequest, TokenResponse
from kaizen.schemas.common import ok
from kaizen.schemas.user import UserResponse
from kaizen.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/request-code")
async def request_code(
    data: CodeRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """로그인 코드 요청 — 사번 존재 여부와 무관하게 동일한 응답.

    Request a one-time login code. The response is identical whether or not
    the employee number exists.
    """
    await auth_service.request_code(db, data.employee_number)
    await db.commit()
    return ok(message="If the employee number is registered, a login code has been sent")


@router.post("/login")
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """사번 + 코드 로그인 — Login with employee number and one-time code."""
    result: TokenResponse = await auth_service.login(db, data)
    await db.commit()
    return ok(result, message="Login successful")


@router.post("/refresh")
async def refresh(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """토큰 갱신 — 새 액세스/리프레시 토큰 쌍 발급.

    Issue a new token pair and revoke the old refresh token.
    """
    result: TokenResponse = await auth_service.refresh_tokens(db, data.refresh_token)
    await db.commit()
    return ok(result)


@router.post("/logout")
async def logout(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """로그아웃 — 리프레시 토큰 폐기 (Revoke the refresh token)."""
    await auth_service.logout(db, data.refresh_token)
    await db.commit()
    return ok(message="Logged out successfully")


@router.get("/profile")
async def profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """내 프로필 조회 — Current user's profile."""
    return ok({"user": UserResponse.model_validate(current_user)})
