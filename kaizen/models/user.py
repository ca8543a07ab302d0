"""사용자 관련 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definitions.
Roles form a small closed enum (employee, reviewer, admin); the capability
each role grants lives in kaizen.utils.access.

Tables:
    - users: 사용자 계정 (Employee accounts keyed by employee number)
"""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kaizen.database import Base


class UserRole(str, enum.Enum):
    """사용자 역할 — Closed set of user roles."""

    EMPLOYEE = "employee"
    REVIEWER = "reviewer"
    ADMIN = "admin"


class Department(str, enum.Enum):
    """부서 — Departments shared by users and ideas."""

    ENGINEERING = "Engineering"
    QUALITY = "Quality"
    MANUFACTURING = "Manufacturing"
    MANAGEMENT = "Management"
    ADMINISTRATION = "Administration"
    HR = "HR"
    FINANCE = "Finance"


class User(Base):
    """사용자 모델 — 직원 계정 정보.

    User model — Employee account information.
    Employee number and email are global identity keys: unique and never
    changed after creation. Users are deactivated, never deleted.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        employee_number: 사번 (Employee number, unique, immutable)
        name: 이름 (Display name)
        email: 이메일 (Email, unique, stored lower-cased, immutable)
        department: 부서 (Department enum value)
        designation: 직함 (Free-text job title)
        role: 역할 (employee | reviewer | admin)
        is_active: 활성 상태 (Active status, soft-delete pattern)
        last_login: 마지막 로그인 일시 (Last successful login)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        refresh_tokens: 리프레시 토큰 목록 (Active refresh tokens, cascade delete)
        login_codes: 로그인 코드 목록 (Issued one-time codes, cascade delete)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 사번 — Employee number (전역 고유, globally unique)
    employee_number: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    # 이름 — Display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 이메일 — Email address (소문자로 저장, stored lower-cased)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    # 부서 — Department (Engineering | Quality | ... | Finance)
    department: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    # 직함 — Designation (free text)
    designation: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — Role (employee | reviewer | admin)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.EMPLOYEE.value, nullable=False)
    # 활성 상태 — Whether the user account is active
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 마지막 로그인 — Last login timestamp (UTC)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")
    login_codes = relationship("LoginCode", back_populates="user", cascade="all, delete-orphan")
