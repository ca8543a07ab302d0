"""아이디어 라우터 — 제출, 목록, 상세, 수정, 철회, 상태 변경, 통계.

Ideas Router — Submission, listing, detail, owner edit/withdrawal,
reviewer status transitions, statistics and Excel export.

Permission:
    idea:submit / idea:browse / idea:edit_own — 모든 역할 (all roles)
    idea:review / stats:read — reviewer + admin
"""

from io import BytesIO
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.api.deps import require_capability
from kaizen.database import get_db
from kaizen.models.idea import BenefitCategory, Idea, IdeaStatus
from kaizen.models.user import Department, User
from kaizen.schemas.common import ListData, ok
from kaizen.schemas.idea import IdeaCreate, IdeaFilter, IdeaResponse, IdeaStats, IdeaStatusUpdate, IdeaUpdate
from kaizen.services.idea_service import idea_service
from kaizen.services.statistics_service import statistics_service
from kaizen.utils.access import Capability
from kaizen.utils.pagination import Pagination

router: APIRouter = APIRouter()


def _idea_filter(
    status: Annotated[IdeaStatus | None, Query()] = None,
    department: Annotated[Department | None, Query()] = None,
    benefit: Annotated[BenefitCategory | None, Query()] = None,
    submitted_by: Annotated[str | None, Query(alias="submittedBy")] = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> IdeaFilter:
    """쿼리 파라미터 → IdeaFilter 변환 — Collect list filters from the query string."""
    return IdeaFilter(
        status=status,
        department=department,
        benefit=benefit,
        submitted_by=submitted_by,
        search=search or None,
    )


def _list_data(ideas: list[Idea], page: int, limit: int, total: int) -> ListData:
    return ListData(
        items=[IdeaResponse.model_validate(i) for i in ideas],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("", status_code=201)
async def create_idea(
    data: IdeaCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_capability(Capability.IDEA_SUBMIT))],
) -> dict:
    """아이디어 제출 — 항상 under_review로 생성, 검토자/관리자에게 알림.

    Submit an idea. The idea is committed first; notifications follow and
    their failure is reported as notificationsDelivered=false.
    """
    idea: Idea = await idea_service.create_idea(db, current_user, data)
    await db.commit()
    idea_id: UUID = idea.id
    delivered: bool = await idea_service.notify_submitted(db, idea, current_user)

    idea = await idea_service.load_idea(db, idea_id)
    return ok(
        {"idea": IdeaResponse.model_validate(idea), "notificationsDelivered": delivered},
        message="Idea submitted successfully",
    )


@router.get("")
async def list_ideas(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_capability(Capability.IDEA_BROWSE))],
    filters: Annotated[IdeaFilter, Depends(_idea_filter)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> dict:
    """아이디어 목록 — 필터 + 페이지네이션, 최신순."""
    ideas, total = await idea_service.list_ideas(db, current_user, filters, page, limit)
    return ok(_list_data(list(ideas), page, limit, total))


@router.get("/my")
async def list_my_ideas(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_capability(Capability.IDEA_BROWSE))],
    filters: Annotated[IdeaFilter, Depends(_idea_filter)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> dict:
    """내 아이디어 목록 — Caller's own ideas."""
    ideas, total = await idea_service.list_my_ideas(db, current_user, filters, page, limit)
    return ok(_list_data(list(ideas), page, limit, total))


@router.get("/stats")
async def get_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_capability(Capability.STATS_READ))],
) -> dict:
    """아이디어 통계 — 상태/부서/효과 분류별 집계 (검토자/관리자)."""
    stats: IdeaStats = await statistics_service.get_idea_stats(db, current_user)
    return ok(stats)


@router.get("/stats/export")
async def export_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_capability(Capability.STATS_READ))],
) -> StreamingResponse:
    """통계 Excel 내보내기 — Statistics and leaderboard workbook."""
    excel_bytes: bytes = await statistics_service.export_excel(db, current_user)
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=kaizen_statistics.xlsx"},
    )


@router.get("/{idea_id}")
async def get_idea(
    idea_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_capability(Capability.IDEA_BROWSE))],
) -> dict:
    """아이디어 상세 — Idea with submitter and reviewer summaries."""
    idea: Idea = await idea_service.get_idea(db, current_user, idea_id)
    return ok({"idea": IdeaResponse.model_validate(idea)})


@router.put("/{idea_id}")
async def update_idea(
    idea_id: UUID,
    data: IdeaUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_capability(Capability.IDEA_EDIT_OWN))],
) -> dict:
    """아이디어 수정 — 제출자 본인, 검토 전에만 가능."""
    await idea_service.update_idea(db, current_user, idea_id, data)
    await db.commit()
    idea: Idea = await idea_service.load_idea(db, idea_id)
    return ok({"idea": IdeaResponse.model_validate(idea)}, message="Idea updated successfully")


@router.delete("/{idea_id}")
async def withdraw_idea(
    idea_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_capability(Capability.IDEA_EDIT_OWN))],
) -> dict:
    """아이디어 철회 — 제출자 본인, 검토 전에만 가능 (소프트 삭제)."""
    await idea_service.withdraw_idea(db, current_user, idea_id)
    await db.commit()
    return ok(message="Idea withdrawn successfully")


@router.put("/{idea_id}/status")
async def update_idea_status(
    idea_id: UUID,
    data: IdeaStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_capability(Capability.IDEA_REVIEW))],
) -> dict:
    """아이디어 상태 변경 — 검토자/관리자 전용, 제출자에게 알림.

    Transition an idea's status. The change is committed before the
    submitter is notified.
    """
    idea: Idea = await idea_service.update_status(db, current_user, idea_id, data)
    await db.commit()
    delivered: bool = await idea_service.notify_status_changed(db, idea)

    idea = await idea_service.load_idea(db, idea_id)
    return ok(
        {"idea": IdeaResponse.model_validate(idea), "notificationsDelivered": delivered},
        message="Idea status updated successfully",
    )
