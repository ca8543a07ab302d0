"""인증 서비스 — 일회용 코드 로그인, 토큰 갱신 비즈니스 로직.

Auth Service — Business logic for one-time code login and token refresh.
Users sign in with their employee number and a short numeric code that
is emailed to them (or the configured demo code), then receive a JWT
access/refresh pair.
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import aiosmtplib
import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.config import settings
from kaizen.models.user import User
from kaizen.repositories.auth_repository import auth_repository
from kaizen.repositories.user_repository import user_repository
from kaizen.schemas.auth import LoginRequest, TokenResponse
from kaizen.schemas.user import UserResponse
from kaizen.utils.email import send_login_code
from kaizen.utils.exceptions import UnauthorizedError
from kaizen.utils.jwt import create_access_token, create_refresh_token, decode_token
from kaizen.utils.password import generate_code, hash_code, verify_code

logger = logging.getLogger(__name__)

# 로그인 실패 메시지 — 사번 존재 여부를 드러내지 않음 (never reveals which part failed)
_LOGIN_FAILED: str = "Invalid employee number or code"


def _as_utc(value: datetime) -> datetime:
    """naive datetime을 UTC로 간주 — Treat naive datetimes from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    Manages code issuance, login, token refresh, and logout.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        """JWT 토큰 페이로드를 생성합니다.

        Build the JWT token payload. The role claim is informational only;
        request authorization always reloads the role from the database.
        """
        return {
            "sub": str(user.id),
            "emp": user.employee_number,
            "role": user.role,
        }

    async def _generate_tokens(
        self,
        db: AsyncSession,
        user: User,
    ) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate an access/refresh token pair and persist the refresh token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 사용자 모델 (User model instance)

        Returns:
            TokenResponse: 토큰 + 사용자 프로필 (Tokens with the user profile)
        """
        payload: dict[str, str] = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            user=UserResponse.model_validate(user),
        )

    async def request_code(
        self,
        db: AsyncSession,
        employee_number: str,
    ) -> None:
        """로그인 코드를 발급하고 이메일로 발송합니다.

        Issue a one-time login code for an active user and email it.
        Unknown or inactive employee numbers are silently ignored so the
        caller cannot probe which accounts exist. SMTP failures are logged
        and do not change the response either.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            employee_number: 사번 (Employee number)
        """
        user: User | None = await user_repository.get_by_employee_number(db, employee_number)
        if user is None or not user.is_active:
            logger.info("Login code requested for unknown or inactive employee number")
            return

        code: str = generate_code(settings.OTP_LENGTH)
        expires_at: datetime = datetime.now(timezone.utc) + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)
        await auth_repository.create_login_code(
            db, user_id=user.id, code_hash=hash_code(code), expires_at=expires_at
        )

        if not settings.SMTP_USER:
            logger.warning("SMTP is not configured; login code for %s was not emailed", user.employee_number)
            return
        try:
            await send_login_code(user.email, user.name, code)
        except (aiosmtplib.SMTPException, OSError):
            logger.exception("Failed to email login code to %s", user.employee_number)

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """사번 + 일회용 코드로 로그인합니다.

        Verify the newest unconsumed, unexpired code (or the demo code when
        OTP_DEV_CODE is set), consume every open code, update last_login and
        issue tokens.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 로그인 요청 데이터 (Login request data)

        Returns:
            TokenResponse: 토큰 응답 (Token response)

        Raises:
            UnauthorizedError: 잘못된 사번/코드 또는 비활성 계정 (Invalid credentials)
        """
        user: User | None = await user_repository.get_by_employee_number(db, data.employee_number)
        if user is None or not user.is_active:
            raise UnauthorizedError(_LOGIN_FAILED)

        now: datetime = datetime.now(timezone.utc)
        verified: bool = bool(settings.OTP_DEV_CODE) and data.otp == settings.OTP_DEV_CODE
        if not verified:
            codes = await auth_repository.get_open_login_codes(db, user.id, now)
            verified = bool(codes) and verify_code(data.otp, codes[0].code_hash)
        if not verified:
            raise UnauthorizedError(_LOGIN_FAILED)

        await auth_repository.consume_open_codes(db, user.id, now)
        user.last_login = now
        await db.flush()
        logger.info("User %s logged in", user.employee_number)
        return await self._generate_tokens(db, user)

    async def refresh_tokens(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Issue a new token pair using a refresh token. The old token is
        revoked.

        Raises:
            UnauthorizedError: 유효하지 않거나 만료된 리프레시 토큰일 때
                               (Invalid or expired refresh token)
        """
        db_token = await auth_repository.get_refresh_token(db, refresh_token)
        if db_token is None:
            raise UnauthorizedError("Invalid refresh token")

        if _as_utc(db_token.expires_at) < datetime.now(timezone.utc):
            await auth_repository.delete_refresh_token(db, refresh_token)
            raise UnauthorizedError("Refresh token has expired")

        try:
            payload: dict = decode_token(refresh_token)
        except jwt.InvalidTokenError:
            await auth_repository.delete_refresh_token(db, refresh_token)
            raise UnauthorizedError("Invalid refresh token")

        if payload.get("type") != "refresh" or payload.get("sub") is None:
            raise UnauthorizedError("Invalid refresh token payload")

        user: User | None = await user_repository.get_active(db, UUID(payload["sub"]))
        if user is None:
            raise UnauthorizedError("User not found or inactive")

        await auth_repository.delete_refresh_token(db, refresh_token)
        return await self._generate_tokens(db, user)

    async def logout(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> None:
        """로그아웃 처리 — 리프레시 토큰을 삭제합니다.

        Process logout by revoking the refresh token. Unknown tokens are a no-op.
        """
        await auth_repository.delete_refresh_token(db, refresh_token)


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
