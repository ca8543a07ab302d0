"""아이디어 서비스 — 아이디어 제출/검토 비즈니스 로직.

Idea Service — Business logic for the idea lifecycle.

Workflow:
    under_review → approved | rejected
    approved → implementing
    implementing → implemented
    rejected, implemented: 종료 상태 (terminal)

When ENFORCE_STATUS_TRANSITIONS is off, any status may be set from any
status. Owners may edit or withdraw an idea only while it is still under
review and has never been reviewed.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from kaizen.config import settings
from kaizen.models.idea import ALLOWED_TRANSITIONS, Idea, IdeaStatus
from kaizen.models.user import User
from kaizen.repositories.idea_repository import idea_repository
from kaizen.schemas.idea import IdeaCreate, IdeaFilter, IdeaStatusUpdate, IdeaUpdate, ImageMeta
from kaizen.services.notification_service import notification_service
from kaizen.utils.access import Capability, ensure_capability
from kaizen.utils.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _image_rows(images: list[ImageMeta]) -> list[dict[str, Any]]:
    """이미지 메타데이터를 JSON 컬럼용 dict로 변환 — upload_date 누락 시 현재 시각."""
    now: datetime = datetime.now(timezone.utc)
    rows: list[dict[str, Any]] = []
    for image in images:
        if image.upload_date is None:
            image = image.model_copy(update={"upload_date": now})
        rows.append(image.model_dump(mode="json"))
    return rows


def can_transition(current: IdeaStatus, new: IdeaStatus) -> bool:
    """상태 전이 허용 여부 — Whether current → new is allowed under the active policy."""
    if not settings.ENFORCE_STATUS_TRANSITIONS:
        return True
    return new in ALLOWED_TRANSITIONS[current]


class IdeaService:
    """아이디어 서비스.

    Idea lifecycle service: submission, browsing, owner edits and
    reviewer status transitions.
    """

    async def get_idea(
        self,
        db: AsyncSession,
        current_user: User,
        idea_id: UUID,
    ) -> Idea:
        """아이디어 상세 조회.

        Retrieve an active idea with submitter and reviewer summaries.

        Raises:
            NotFoundError: 아이디어 없음 또는 철회됨 (Missing or withdrawn)
        """
        ensure_capability(current_user, Capability.IDEA_BROWSE)
        idea: Idea | None = await idea_repository.get_detail(db, idea_id)
        if idea is None:
            raise NotFoundError("Idea not found")
        return idea

    async def load_idea(
        self,
        db: AsyncSession,
        idea_id: UUID,
    ) -> Idea:
        """커밋/롤백 후 아이디어 재조회 (권한 검사 없음).

        Reload an idea after a commit or rollback so the response reflects
        the stored row. Callers have already passed the capability gate.
        """
        idea: Idea | None = await idea_repository.get_detail(db, idea_id)
        if idea is None:
            raise NotFoundError("Idea not found")
        return idea

    async def list_ideas(
        self,
        db: AsyncSession,
        current_user: User,
        filters: IdeaFilter,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Idea], int]:
        """아이디어 목록 조회 (필터 + 페이지네이션, 최신순).

        List active ideas newest first with optional filters.
        """
        ensure_capability(current_user, Capability.IDEA_BROWSE)
        return await idea_repository.get_list(
            db, filters.model_dump(mode="json"), page, per_page
        )

    async def list_my_ideas(
        self,
        db: AsyncSession,
        current_user: User,
        filters: IdeaFilter,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Idea], int]:
        """내 아이디어 목록 — Same as list_ideas, scoped to the caller."""
        ensure_capability(current_user, Capability.IDEA_BROWSE)
        scoped: dict[str, Any] = filters.model_dump(mode="json")
        scoped["submitted_by"] = None
        scoped["submitter_id"] = current_user.id
        return await idea_repository.get_list(db, scoped, page, per_page)

    async def create_idea(
        self,
        db: AsyncSession,
        current_user: User,
        data: IdeaCreate,
    ) -> Idea:
        """새 아이디어를 제출합니다.

        Submit a new idea. Status always starts at under_review and the
        submitter's employee number is copied onto the row.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 제출자 (Submitter)
            data: 제출 데이터 (Submission payload)

        Returns:
            Idea: 생성된 아이디어 (Created idea, flushed but not committed)
        """
        ensure_capability(current_user, Capability.IDEA_SUBMIT)
        idea: Idea = await idea_repository.create(db, {
            "title": data.title,
            "problem": data.problem,
            "improvement": data.improvement,
            "benefit": data.benefit.value,
            "estimated_savings": data.estimated_savings,
            "department": data.department.value,
            "submitted_by": current_user.id,
            "submitted_by_employee_number": current_user.employee_number,
            "status": IdeaStatus.UNDER_REVIEW.value,
            "tags": list(data.tags),
            "priority": data.priority.value,
            "images": _image_rows(data.images),
            "is_active": True,
        })
        logger.info("Idea %s submitted by %s", idea.id, current_user.employee_number)
        return idea

    async def notify_submitted(
        self,
        db: AsyncSession,
        idea: Idea,
        submitter: User,
    ) -> bool:
        """커밋된 새 아이디어를 검토자/관리자에게 알립니다 — Fan out idea_submitted."""
        return await notification_service.notify_idea_submitted(
            db, idea.id, idea.title, submitter.name
        )

    async def _get_editable(
        self,
        db: AsyncSession,
        current_user: User,
        idea_id: UUID,
    ) -> Idea:
        """제출자 본인의 미검토 아이디어 조회.

        Load an idea the caller may still edit or withdraw.

        Raises:
            NotFoundError: 아이디어 없음 (Missing or withdrawn)
            ForbiddenError: 제출자가 아님 (Caller is not the submitter)
            ValidationError: 이미 검토됨 (Already reviewed)
        """
        ensure_capability(current_user, Capability.IDEA_EDIT_OWN)
        idea: Idea | None = await idea_repository.get_detail(db, idea_id)
        if idea is None:
            raise NotFoundError("Idea not found")
        if idea.submitted_by != current_user.id:
            raise ForbiddenError("Only the submitter can modify this idea")
        if idea.status != IdeaStatus.UNDER_REVIEW.value or idea.reviewed_by is not None:
            raise ValidationError("Idea can no longer be modified after review")
        return idea

    async def update_idea(
        self,
        db: AsyncSession,
        current_user: User,
        idea_id: UUID,
        data: IdeaUpdate,
    ) -> Idea:
        """제출자가 아이디어 내용을 수정합니다.

        Owner content edit while the idea is still unreviewed.
        """
        idea: Idea = await self._get_editable(db, current_user, idea_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, exclude={"images"})
        for key in ("benefit", "department", "priority"):
            if update_data.get(key) is not None:
                update_data[key] = update_data[key].value
        # NOT NULL 컬럼은 null로 덮어쓰지 않음 — Required columns ignore explicit nulls
        for key in ("title", "problem", "improvement", "benefit", "department", "priority", "tags"):
            if key in update_data and update_data[key] is None:
                del update_data[key]
        if data.images is not None:
            update_data["images"] = _image_rows(data.images)

        try:
            await idea_repository.update(db, idea, update_data)
        except StaleDataError:
            raise ConflictError("Idea was modified concurrently")
        return idea

    async def withdraw_idea(
        self,
        db: AsyncSession,
        current_user: User,
        idea_id: UUID,
    ) -> None:
        """제출자가 아이디어를 철회합니다 (소프트 삭제).

        Owner withdrawal: sets is_active to False. Withdrawn ideas vanish
        from every read, statistic and ranking.
        """
        idea: Idea = await self._get_editable(db, current_user, idea_id)
        try:
            await idea_repository.update(db, idea, {"is_active": False})
        except StaleDataError:
            raise ConflictError("Idea was modified concurrently")
        logger.info("Idea %s withdrawn by %s", idea_id, current_user.employee_number)

    async def update_status(
        self,
        db: AsyncSession,
        current_user: User,
        idea_id: UUID,
        data: IdeaStatusUpdate,
    ) -> Idea:
        """아이디어 상태를 변경합니다 (검토자/관리자 전용).

        Transition an idea's status and record the reviewer.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 검토자 (Acting reviewer/admin)
            idea_id: 아이디어 UUID (Idea UUID)
            data: 새 상태 + 선택 필드 (Target status and optional fields)

        Returns:
            Idea: 수정된 아이디어 (Updated idea, flushed but not committed)

        Raises:
            ForbiddenError: 검토 권한 없음, 본인 아이디어 포함 (No review capability, even on own idea)
            NotFoundError: 아이디어 없음 (Idea not found)
            ValidationError: 허용되지 않는 전이 (Transition not allowed)
            ConflictError: 버전 불일치 (Stale version)
        """
        ensure_capability(current_user, Capability.IDEA_REVIEW)
        idea: Idea | None = await idea_repository.get_detail(db, idea_id)
        if idea is None:
            raise NotFoundError("Idea not found")

        current: IdeaStatus = IdeaStatus(idea.status)
        if not can_transition(current, data.status):
            raise ValidationError(
                f"Cannot change status from {current.value} to {data.status.value}"
            )
        if data.version is not None and data.version != idea.version:
            raise ConflictError("Idea has been modified since it was loaded")

        now: datetime = datetime.now(timezone.utc)
        update_data: dict[str, Any] = {
            "status": data.status.value,
            "reviewed_by": current_user.id,
            "reviewed_at": now,
        }
        if data.status == IdeaStatus.IMPLEMENTED:
            update_data["implementation_date"] = now
        if data.review_comments is not None:
            update_data["review_comments"] = data.review_comments
        if data.actual_savings is not None:
            update_data["actual_savings"] = data.actual_savings

        try:
            await idea_repository.update(db, idea, update_data)
        except StaleDataError:
            raise ConflictError("Idea has been modified since it was loaded")

        logger.info(
            "Idea %s moved %s -> %s by %s",
            idea_id, current.value, data.status.value, current_user.employee_number,
        )
        return idea

    async def notify_status_changed(
        self,
        db: AsyncSession,
        idea: Idea,
    ) -> bool:
        """커밋된 상태 변경을 제출자에게 알립니다 — Notify the submitter."""
        return await notification_service.notify_status_changed(
            db, idea.id, idea.title, IdeaStatus(idea.status), idea.submitter
        )


# 싱글턴 인스턴스 — Singleton instance
idea_service: IdeaService = IdeaService()
