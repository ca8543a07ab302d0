"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자, 역할/부서 열거형 (User, UserRole, Department)
    idea: 아이디어 및 워크플로 열거형 (Idea, IdeaStatus, BenefitCategory, IdeaPriority)
    notification: 알림 (Notification, NotificationType)
    token: 리프레시 토큰 및 로그인 코드 (RefreshToken, LoginCode)
"""

from kaizen.models.user import Department, User, UserRole
from kaizen.models.idea import BenefitCategory, Idea, IdeaPriority, IdeaStatus
from kaizen.models.notification import Notification, NotificationType
from kaizen.models.token import LoginCode, RefreshToken

__all__ = [
    "User", "UserRole", "Department",
    "Idea", "IdeaStatus", "BenefitCategory", "IdeaPriority",
    "Notification", "NotificationType",
    "RefreshToken", "LoginCode",
]
