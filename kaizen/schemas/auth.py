"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers one-time code requests, login, token issuance/refresh and logout.
"""

from pydantic import Field

from kaizen.schemas.common import CamelModel
from kaizen.schemas.user import UserResponse


class CodeRequest(CamelModel):
    """로그인 코드 요청 스키마.

    One-time login code request. The response never reveals whether the
    employee number exists.

    Attributes:
        employee_number: 사번 (Employee number)
    """

    employee_number: str = Field(min_length=1, max_length=50)


class LoginRequest(CamelModel):
    """로그인 요청 스키마.

    Login request schema.

    Attributes:
        employee_number: 사번 (Employee number)
        otp: 일회용 코드 (One-time numeric code)
    """

    employee_number: str = Field(min_length=1, max_length=50)
    otp: str = Field(min_length=1, max_length=12, pattern=r"^\d+$")


class TokenResponse(CamelModel):
    """JWT 토큰 발급 응답 스키마.

    JWT token issuance response schema.
    Returned after successful login or token refresh.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
        user: 사용자 프로필 (Authenticated user's profile)
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


class RefreshRequest(CamelModel):
    """토큰 갱신/로그아웃 요청 스키마.

    Token refresh and logout request schema.

    Attributes:
        refresh_token: 기존 리프레시 토큰 (Existing refresh token)
    """

    refresh_token: str
