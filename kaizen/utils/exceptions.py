"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the API error kinds.
Services raise these; the handlers in kaizen.main render every one of them
into the {success: false, message} envelope.

Usage:
    from kaizen.utils.exceptions import NotFoundError, ConflictError
    raise NotFoundError("Idea not found")
    raise ConflictError("Employee number already exists")
"""

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """400 Bad Request 예외 — 비즈니스 규칙 위반 입력.

    400 Bad Request exception.
    Raised when the request data is invalid beyond what Pydantic validation
    catches (e.g. a status transition outside the workflow).

    Args:
        detail: 오류 메시지 (Error message, default: "Validation failed")
    """

    def __init__(self, detail: str = "Validation failed") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthError(HTTPException):
    """인증/인가 예외 공통 베이스 — Base class for 401 and 403 errors."""


class UnauthorizedError(AuthError):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when authentication is missing, invalid, or expired
    (e.g. missing JWT token, expired token, wrong login code).

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(AuthError):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    403 Forbidden exception.
    Raised when the authenticated user's role lacks the required capability.

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when an id does not resolve to an accessible entity.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """409 Conflict 예외 — 중복 생성 또는 오래된 버전 기반 수정.

    409 Conflict exception.
    Raised on a duplicate employee number/email or when a write is based
    on a stale idea version.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class StoreError(HTTPException):
    """500 예외 — 저장소 오류. 메시지는 항상 불투명하게 유지.

    500 Internal Server Error for persistence failures. The detail never
    leaks driver messages.
    """

    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
