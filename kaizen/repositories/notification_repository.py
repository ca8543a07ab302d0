"""알림 레포지토리 — 알림 관련 DB 쿼리 담당.

Notification Repository — Handles all notification-related database queries.
Extends BaseRepository with recipient-scoped read/unread operations.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from kaizen.models.notification import Notification
from kaizen.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """알림 레포지토리.

    Notification repository with recipient-scoped read/unread operations.

    Extends:
        BaseRepository[Notification]
    """

    def __init__(self) -> None:
        super().__init__(Notification)

    async def get_user_notifications(
        self,
        db: AsyncSession,
        recipient_id: UUID,
        is_read: bool | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        """사용자의 알림 목록을 페이지네이션하여 조회합니다.

        Retrieve paginated notifications for a recipient, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            recipient_id: 수신자 UUID (Recipient UUID)
            is_read: 읽음 여부 필터, None이면 전체 (Read flag filter; None = all)
            page: 페이지 번호, 1부터 시작 (Page number, 1-based)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[Notification], int]: (알림 목록, 전체 개수)
                                                 (List of notifications, total count)
        """
        query: Select = (
            select(Notification)
            .options(selectinload(Notification.related_idea))
            .where(Notification.recipient_id == recipient_id)
        )
        if is_read is not None:
            query = query.where(Notification.is_read.is_(is_read))
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_owned(
        self,
        db: AsyncSession,
        notification_id: UUID,
        recipient_id: UUID,
    ) -> Notification | None:
        """수신자 소유 알림 조회 — Retrieve a notification only if owned by the recipient."""
        result = await db.execute(
            select(Notification)
            .options(selectinload(Notification.related_idea))
            .where(
                Notification.id == notification_id,
                Notification.recipient_id == recipient_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_unread_count(
        self,
        db: AsyncSession,
        recipient_id: UUID,
    ) -> int:
        """사용자의 읽지 않은 알림 수를 조회합니다.

        Get the count of unread notifications for a recipient.
        """
        query: Select = (
            select(func.count())
            .select_from(Notification)
            .where(
                Notification.recipient_id == recipient_id,
                Notification.is_read.is_(False),
            )
        )
        count: int = (await db.execute(query)).scalar() or 0
        return count

    async def mark_all_read(
        self,
        db: AsyncSession,
        recipient_id: UUID,
        read_at: datetime,
    ) -> int:
        """사용자의 모든 읽지 않은 알림을 읽음 처리합니다.

        Mark all unread notifications as read for a recipient.

        Returns:
            int: 업데이트된 알림 수 (Count of updated notifications)
        """
        result = await db.execute(
            update(Notification)
            .where(
                Notification.recipient_id == recipient_id,
                Notification.is_read.is_(False),
            )
            .values(is_read=True, read_at=read_at)
        )
        await db.flush()
        return result.rowcount

    async def bulk_create(
        self,
        db: AsyncSession,
        rows: list[dict],
    ) -> list[Notification]:
        """알림 일괄 생성 — Insert one notification per row dict."""
        notifications: list[Notification] = [Notification(**row) for row in rows]
        db.add_all(notifications)
        await db.flush()
        return notifications


# 싱글턴 인스턴스 — Singleton instance
notification_repository: NotificationRepository = NotificationRepository()
