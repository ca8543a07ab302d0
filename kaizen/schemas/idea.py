"""아이디어 관련 Pydantic 요청/응답 스키마 정의.

Idea-related Pydantic request/response schema definitions.
Covers submission, owner edits, status transitions, list filters and
statistics output.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from kaizen.models.idea import BenefitCategory, IdeaPriority, IdeaStatus
from kaizen.models.user import Department
from kaizen.schemas.common import CamelModel
from kaizen.schemas.user import UserSummary


class ImageMeta(CamelModel):
    """이미지 메타데이터 — Image metadata stored with an idea (no binary)."""

    filename: str = Field(min_length=1, max_length=255)
    original_name: str = Field(min_length=1, max_length=255)
    mimetype: str = Field(min_length=1, max_length=100)
    size: int = Field(ge=0)
    upload_date: datetime | None = None


class IdeaCreate(CamelModel):
    """아이디어 제출 요청 스키마.

    Idea submission request schema. Any client-supplied status is ignored;
    new ideas always start under review.

    Attributes:
        title: 제목 (≤200)
        problem: 문제 설명 (≤2000)
        improvement: 개선 방안 (≤2000)
        benefit: 기대 효과 (Benefit category)
        estimated_savings: 예상 절감액 (Optional, ≥0)
        department: 부서 (Department enum)
        tags: 태그 (Free-form tags)
        priority: 우선순위 (Default medium)
        images: 이미지 메타데이터 (Image metadata list)
    """

    title: str = Field(min_length=1, max_length=200)
    problem: str = Field(min_length=1, max_length=2000)
    improvement: str = Field(min_length=1, max_length=2000)
    benefit: BenefitCategory
    estimated_savings: float | None = Field(default=None, ge=0)
    department: Department
    tags: list[str] = Field(default_factory=list)
    priority: IdeaPriority = IdeaPriority.MEDIUM
    images: list[ImageMeta] = Field(default_factory=list)

    @field_validator("title", "problem", "improvement")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class IdeaUpdate(CamelModel):
    """아이디어 내용 수정 요청 스키마 (부분 업데이트, 제출자 전용).

    Owner content edit (partial update). Status is not editable here.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    problem: str | None = Field(default=None, min_length=1, max_length=2000)
    improvement: str | None = Field(default=None, min_length=1, max_length=2000)
    benefit: BenefitCategory | None = None
    estimated_savings: float | None = Field(default=None, ge=0)
    department: Department | None = None
    tags: list[str] | None = None
    priority: IdeaPriority | None = None
    images: list[ImageMeta] | None = None


class IdeaStatusUpdate(CamelModel):
    """상태 변경 요청 스키마 (검토자/관리자 전용).

    Status transition request (reviewer/admin only).

    Attributes:
        status: 새 상태 (Target status)
        review_comments: 검토 의견 (Optional, ≤1000)
        actual_savings: 실제 절감액 (Optional, ≥0)
        version: 클라이언트가 마지막으로 본 버전 (Last version seen; mismatch → 409)
    """

    status: IdeaStatus
    review_comments: str | None = Field(default=None, max_length=1000)
    actual_savings: float | None = Field(default=None, ge=0)
    version: int | None = Field(default=None, ge=1)


class IdeaFilter(CamelModel):
    """아이디어 목록 필터 — List filters (all optional, combined with AND)."""

    status: IdeaStatus | None = None
    department: Department | None = None
    benefit: BenefitCategory | None = None
    submitted_by: str | None = None  # 제출자 사번 (Submitter employee number)
    search: str | None = None  # 제목/문제/개선안 부분 일치, 대소문자 무시


class IdeaResponse(CamelModel):
    """아이디어 응답 스키마 — Idea with submitter and reviewer summaries."""

    id: UUID
    title: str
    problem: str
    improvement: str
    benefit: str
    estimated_savings: float | None = None
    department: str
    submitted_by: UUID
    submitted_by_employee_number: str
    submitter: UserSummary | None = None
    status: str
    reviewed_by: UUID | None = None
    reviewer: UserSummary | None = None
    reviewed_at: datetime | None = None
    review_comments: str | None = None
    implementation_date: datetime | None = None
    actual_savings: float | None = None
    images: list[ImageMeta] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    priority: str
    version: int
    created_at: datetime
    updated_at: datetime


class StatusStat(CamelModel):
    """상태별 통계 — Count and summed estimated savings per status."""

    status: str
    count: int
    total_savings: float


class DepartmentStat(CamelModel):
    """부서별 통계 — Count and summed estimated savings per department."""

    department: str
    count: int
    total_savings: float


class BenefitStat(CamelModel):
    """효과 분류별 통계 — Count per benefit category."""

    benefit: str
    count: int


class IdeaStats(CamelModel):
    """아이디어 통계 응답 — Aggregated idea statistics."""

    status_stats: list[StatusStat]
    department_stats: list[DepartmentStat]
    benefit_stats: list[BenefitStat]
