"""직원 세션 토큰 (JWT) 발급/검증.

Employee session tokens. A successful code login issues a short-lived
access token for the mobile client and a long-lived refresh token that is
also stored server-side so it can be rotated and revoked.

Claims:
    sub   사용자 UUID. 요청마다 DB에서 사용자를 다시 읽음 (User id; reloaded per request)
    emp   사번, 로그/디버깅용 (Employee number, informational)
    role  로그인 시점 역할, 권한 판단에 쓰지 않음 (Role at login; never used for access checks)
    type  "access" | "refresh"
    jti   리프레시 토큰 전용 난수 (Refresh only; keeps rotated tokens distinct)
    exp   만료 시각 (Expiry)
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from kaizen.config import settings


def _encode(claims: dict[str, Any], lifetime: timedelta, token_type: str, **extra: Any) -> str:
    to_encode: dict[str, Any] = {
        **claims,
        **extra,
        "type": token_type,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(claims: dict[str, Any]) -> str:
    """API 호출용 액세스 토큰 (JWT_ACCESS_TOKEN_EXPIRE_MINUTES 유효).

    Access token sent as ``Authorization: Bearer`` on every API call.
    """
    return _encode(
        claims,
        timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
        "access",
    )


def create_refresh_token(claims: dict[str, Any]) -> str:
    """리프레시 토큰 — /auth/refresh 에서 한 번 쓰이고 교체됨.

    Refresh token, valid for JWT_REFRESH_TOKEN_EXPIRE_DAYS. Each one is
    single-use: a refresh consumes it and issues a new pair. Two logins in
    the same second still get different tokens because of the ``jti``.
    """
    return _encode(
        claims,
        timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS),
        "refresh",
        jti=uuid.uuid4().hex,
    )


def decode_token(token: str) -> dict[str, Any]:
    """서명/만료 검증 후 클레임 반환. 토큰 유형 확인은 호출자 몫.

    Verify signature and expiry and return the claims. Callers check
    ``type`` themselves.

    Raises:
        jwt.InvalidTokenError: 서명 불일치 또는 만료 (ExpiredSignatureError included)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
