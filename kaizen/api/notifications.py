"""알림 라우터 — 내 알림 목록, 읽지 않은 수, 읽음 처리.

Notifications Router — Caller's notification list, unread count and
read operations.

Permission: notification:read (all roles)
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.api.deps import require_capability
from kaizen.database import get_db
from kaizen.models.notification import Notification
from kaizen.models.user import User
from kaizen.schemas.common import ok
from kaizen.schemas.notification import NotificationResponse
from kaizen.services.notification_service import notification_service
from kaizen.utils.access import Capability
from kaizen.utils.pagination import Pagination

router: APIRouter = APIRouter()

NotificationReader = Annotated[User, Depends(require_capability(Capability.NOTIFICATION_READ))]


@router.get("")
async def list_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: NotificationReader,
    is_read: Annotated[bool | None, Query(alias="isRead")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """내 알림 목록을 조회합니다.

    List the caller's notifications newest first, with the unread count.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)
        is_read: 읽음 여부 필터 (Read flag filter, optional)
        page: 페이지 번호 (Page number)
        limit: 페이지당 항목 수 (Items per page)

    Returns:
        dict: {items, unreadCount, pagination} 봉투 (Envelope with paginated notifications)
    """
    notifications, total, unread = await notification_service.list_notifications(
        db, current_user, is_read, page, limit
    )
    return ok({
        "items": [NotificationResponse.model_validate(n) for n in notifications],
        "unreadCount": unread,
        "pagination": Pagination.build(page, limit, total),
    })


@router.get("/unread-count")
async def get_unread_count(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: NotificationReader,
) -> dict:
    """읽지 않은 알림 수 — Unread notification count."""
    count: int = await notification_service.get_unread_count(db, current_user)
    return ok({"unreadCount": count})


@router.put("/read-all")
async def mark_all_read(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: NotificationReader,
) -> dict:
    """모든 알림 읽음 처리 — 처리된 수를 반환 (0이어도 성공)."""
    updated: int = await notification_service.mark_all_read(db, current_user)
    await db.commit()
    return ok({"updated": updated}, message="All notifications marked as read")


@router.put("/{notification_id}/read")
async def mark_read(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: NotificationReader,
) -> dict:
    """단일 알림 읽음 처리 — 멱등 (Idempotent)."""
    notification: Notification = await notification_service.mark_read(db, current_user, notification_id)
    await db.commit()
    return ok(
        {"notification": NotificationResponse.model_validate(notification)},
        message="Notification marked as read",
    )
