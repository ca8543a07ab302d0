"""아이디어 관련 SQLAlchemy ORM 모델 정의.

Idea SQLAlchemy ORM model definitions.
An idea moves through a fixed review workflow:
under_review → approved → implementing → implemented, with rejected
reachable from under_review.

Tables:
    - ideas: 개선 아이디어 (Improvement ideas with review state)
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kaizen.database import Base


class IdeaStatus(str, enum.Enum):
    """아이디어 상태 — Idea review status."""

    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    IMPLEMENTING = "implementing"
    IMPLEMENTED = "implemented"


class BenefitCategory(str, enum.Enum):
    """기대 효과 분류 — Expected benefit of an idea."""

    COST_SAVING = "cost_saving"
    SAFETY = "safety"
    QUALITY = "quality"
    PRODUCTIVITY = "productivity"


class IdeaPriority(str, enum.Enum):
    """우선순위 — Idea priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# 허용 상태 전이 — Allowed transitions when the workflow is enforced
ALLOWED_TRANSITIONS: dict[IdeaStatus, frozenset[IdeaStatus]] = {
    IdeaStatus.UNDER_REVIEW: frozenset({IdeaStatus.APPROVED, IdeaStatus.REJECTED}),
    IdeaStatus.APPROVED: frozenset({IdeaStatus.IMPLEMENTING}),
    IdeaStatus.IMPLEMENTING: frozenset({IdeaStatus.IMPLEMENTED}),
    IdeaStatus.REJECTED: frozenset(),
    IdeaStatus.IMPLEMENTED: frozenset(),
}


class Idea(Base):
    """아이디어 모델 — 직원이 제출한 개선 제안.

    Idea model — Improvement proposal owned by the submitting employee.
    submitted_by_employee_number is written from the submitter at insert
    time and never changed; submitted_by is the source of truth.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        title: 제목 (Title, max 200 chars)
        problem: 문제 설명 (Problem description, max 2000 chars)
        improvement: 개선 방안 (Improvement description, max 2000 chars)
        benefit: 기대 효과 (cost_saving | safety | quality | productivity)
        estimated_savings: 예상 절감액 (Estimated savings, optional)
        department: 부서 (Department enum value)
        submitted_by: 제출자 FK (Submitter user, immutable)
        submitted_by_employee_number: 제출자 사번 (Submitter employee number projection)
        status: 상태 (Workflow status)
        reviewed_by: 검토자 FK (Reviewer who last changed the status)
        reviewed_at: 검토 일시 (Time of the last status change)
        review_comments: 검토 의견 (Review comments, max 1000 chars)
        implementation_date: 실행 완료 일시 (Set when status becomes implemented)
        actual_savings: 실제 절감액 (Actual savings, optional)
        images: 이미지 메타데이터 목록 (Image metadata dicts)
        tags: 태그 목록 (Free-form tags)
        priority: 우선순위 (low | medium | high | critical)
        is_active: 활성 상태 (False once withdrawn by the owner)
        version: 버전 카운터 (Optimistic concurrency counter)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "ideas"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    problem: Mapped[str] = mapped_column(Text, nullable=False)
    improvement: Mapped[str] = mapped_column(Text, nullable=False)
    benefit: Mapped[str] = mapped_column(String(30), index=True, nullable=False)
    estimated_savings: Mapped[float | None] = mapped_column(Float, nullable=True)
    department: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    # 제출자 FK — Submitter (사용자는 삭제되지 않음, users are never hard-deleted)
    submitted_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), index=True, nullable=False)
    submitted_by_employee_number: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    # 상태 — 생성 시 항상 under_review (always under_review on creation)
    status: Mapped[str] = mapped_column(String(20), default=IdeaStatus.UNDER_REVIEW.value, index=True, nullable=False)
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    review_comments: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    implementation_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_savings: Mapped[float | None] = mapped_column(Float, nullable=True)
    # 이미지 메타데이터 — [{filename, original_name, mimetype, size, upload_date}]
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    priority: Mapped[str] = mapped_column(String(20), default=IdeaPriority.MEDIUM.value, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 버전 카운터 — ORM이 UPDATE마다 증가시키고 불일치 시 StaleDataError 발생
    # Incremented by the ORM on every UPDATE; stale writes raise StaleDataError
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __mapper_args__ = {"version_id_col": version}

    # 관계 — Relationships
    submitter = relationship("User", foreign_keys=[submitted_by])
    reviewer = relationship("User", foreign_keys=[reviewed_by])
