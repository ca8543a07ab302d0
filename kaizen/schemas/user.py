"""사용자 관련 Pydantic 요청/응답 스키마 정의.

User-related Pydantic request/response schema definitions.
Covers admin user management, profile output, and leaderboard rows.
"""

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from kaizen.models.user import Department, UserRole
from kaizen.schemas.common import CamelModel

# 단순 이메일 형식 검사 — local@domain.tld
EMAIL_PATTERN: str = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(CamelModel):
    """사용자 생성 요청 스키마 (관리자 전용).

    User creation request schema (admin only).

    Attributes:
        employee_number: 사번 (Employee number, globally unique)
        name: 이름 (Display name)
        email: 이메일 (Email, stored lower-cased)
        department: 부서 (Department enum)
        designation: 직함 (Free-text job title)
        role: 역할 (employee | reviewer | admin, default employee)
    """

    employee_number: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    department: Department
    designation: str = Field(min_length=1, max_length=255)
    role: UserRole = UserRole.EMPLOYEE

    @field_validator("employee_number", "name", "designation")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()


class UserUpdate(CamelModel):
    """사용자 수정 요청 스키마 (부분 업데이트).

    User update request schema (partial update). Employee number and email
    are identity keys and are rejected here. Omitted fields are left as they
    are; an explicit null is rejected.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    department: Department | None = None
    designation: str | None = Field(default=None, min_length=1, max_length=255)
    role: UserRole | None = None
    is_active: bool | None = None

    @field_validator("name", "department", "designation", "role", "is_active")
    @classmethod
    def _not_null(cls, value):
        # 명시적 null 거부 — Omit a field to leave it unchanged
        if value is None:
            raise ValueError("must not be null")
        return value


class UserResponse(CamelModel):
    """사용자 응답 스키마 — Full user profile."""

    id: UUID
    employee_number: str
    name: str
    email: str
    department: str
    designation: str
    role: str
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserSummary(CamelModel):
    """사용자 요약 — Submitter/reviewer summary embedded in ideas."""

    id: UUID
    employee_number: str
    name: str
    department: str
    designation: str


class IndividualRanking(CamelModel):
    """개인 랭킹 행 — One row of the individual leaderboard.

    score = totalIdeas*5 + approvedIdeas*10 + implementedIdeas*20
    """

    id: UUID
    employee_number: str
    name: str
    department: str
    designation: str
    total_ideas: int
    approved_ideas: int
    implemented_ideas: int
    total_savings: float
    score: int


class DepartmentRanking(CamelModel):
    """부서 랭킹 행 — One row of the department leaderboard."""

    department: str
    total_ideas: int
    approved_ideas: int
    implemented_ideas: int
    total_savings: float
    employee_count: int
    avg_ideas_per_employee: float
