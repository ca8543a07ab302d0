"""사용자 라우터 — 사용자 관리(관리자) 및 리더보드.

Users Router — Admin user management and the leaderboards.

Permission:
    user:manage — admin (목록/생성/조회/수정/비활성화)
    leaderboard:read — 모든 역할 (all roles)
"""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.api.deps import require_capability
from kaizen.database import get_db
from kaizen.models.user import Department, User, UserRole
from kaizen.schemas.common import ListData, ok
from kaizen.schemas.user import UserCreate, UserResponse, UserUpdate
from kaizen.services.statistics_service import statistics_service
from kaizen.services.user_service import user_service
from kaizen.utils.access import Capability
from kaizen.utils.pagination import Pagination

router: APIRouter = APIRouter()

UserManager = Annotated[User, Depends(require_capability(Capability.USER_MANAGE))]


@router.get("")
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: UserManager,
    department: Annotated[Department | None, Query()] = None,
    role: Annotated[UserRole | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> dict:
    """활성 사용자 목록 — 이름순, 부서/역할 필터."""
    users, total = await user_service.list_users(
        db,
        current_user,
        department=department.value if department else None,
        role=role.value if role else None,
        page=page,
        per_page=limit,
    )
    return ok(ListData(
        items=[UserResponse.model_validate(u) for u in users],
        pagination=Pagination.build(page, limit, total),
    ))


@router.post("", status_code=201)
async def create_user(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: UserManager,
) -> dict:
    """사용자 생성 — 사번/이메일 중복 시 409."""
    user: User = await user_service.create_user(db, current_user, data)
    await db.commit()
    return ok({"user": UserResponse.model_validate(user)}, message="User created successfully")


@router.get("/leaderboard")
async def get_leaderboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_capability(Capability.LEADERBOARD_READ))],
    board_type: Annotated[Literal["individual", "department"], Query(alias="type")] = "individual",
) -> dict:
    """리더보드 — 개인(individual) 또는 부서(department) 랭킹."""
    if board_type == "department":
        leaderboard = await statistics_service.get_department_leaderboard(db, current_user)
    else:
        leaderboard = await statistics_service.get_individual_leaderboard(db, current_user)
    return ok({"type": board_type, "leaderboard": leaderboard})


@router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: UserManager,
) -> dict:
    """사용자 상세 — User detail."""
    user: User = await user_service.get_user(db, current_user, user_id)
    return ok({"user": UserResponse.model_validate(user)})


@router.put("/{user_id}")
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: UserManager,
) -> dict:
    """사용자 수정 — 사번/이메일은 변경 불가 (Identity keys are rejected)."""
    user: User = await user_service.update_user(db, current_user, user_id, data)
    await db.commit()
    return ok({"user": UserResponse.model_validate(user)}, message="User updated successfully")


@router.delete("/{user_id}")
async def deactivate_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: UserManager,
) -> dict:
    """사용자 비활성화 — 소프트 삭제 (Soft delete)."""
    user: User = await user_service.deactivate_user(db, current_user, user_id)
    await db.commit()
    return ok({"user": UserResponse.model_validate(user)}, message="User deactivated successfully")
