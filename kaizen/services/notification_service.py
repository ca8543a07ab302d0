"""알림 서비스 — 알림 비즈니스 로직.

Notification Service — Business logic for notification management.
Handles recipient read/unread operations and the fan-out of idea events
into one notification record per recipient.

Fan-out runs after the idea write has been committed. A store failure
while writing notifications is rolled back on its own and reported as
False instead of failing the request.
"""

import logging
from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.models.idea import IdeaStatus
from kaizen.models.notification import Notification, NotificationType
from kaizen.models.user import User
from kaizen.repositories.notification_repository import notification_repository
from kaizen.repositories.user_repository import user_repository
from kaizen.utils.access import Capability, ensure_capability
from kaizen.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class NotificationService:
    """알림 서비스.

    Notification service providing recipient read operations and
    fan-out for idea events.
    """

    # --- 조회/읽음 처리 (Read/unread operations) ---

    async def list_notifications(
        self,
        db: AsyncSession,
        current_user: User,
        is_read: bool | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int, int]:
        """사용자의 알림 목록을 페이지네이션하여 조회합니다.

        List paginated notifications for the caller, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 수신자 (Recipient)
            is_read: 읽음 여부 필터 (Read flag filter, optional)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[Notification], int, int]: (알림 목록, 전체 개수, 읽지 않은 수)
                (Notifications, total matching, unread count)
        """
        ensure_capability(current_user, Capability.NOTIFICATION_READ)
        items, total = await notification_repository.get_user_notifications(
            db, current_user.id, is_read, page, per_page
        )
        unread: int = await notification_repository.get_unread_count(db, current_user.id)
        return items, total, unread

    async def get_unread_count(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> int:
        """사용자의 읽지 않은 알림 수를 조회합니다.

        Get the count of unread notifications for the caller.
        """
        ensure_capability(current_user, Capability.NOTIFICATION_READ)
        return await notification_repository.get_unread_count(db, current_user.id)

    async def mark_read(
        self,
        db: AsyncSession,
        current_user: User,
        notification_id: UUID,
    ) -> Notification:
        """단일 알림을 읽음 처리합니다 (멱등).

        Mark a single notification as read. Idempotent: an already read
        notification is returned unchanged, keeping its original read_at.

        Raises:
            NotFoundError: 알림이 없거나 다른 사용자 소유 (Missing or owned by someone else)
        """
        ensure_capability(current_user, Capability.NOTIFICATION_READ)
        notification: Notification | None = await notification_repository.get_owned(
            db, notification_id, current_user.id
        )
        if notification is None:
            raise NotFoundError("Notification not found")

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.now(timezone.utc)
            await db.flush()
        return notification

    async def mark_all_read(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> int:
        """사용자의 모든 읽지 않은 알림을 읽음 처리합니다.

        Mark all unread notifications as read for the caller.

        Returns:
            int: 읽음 처리된 알림 수 (Count of notifications marked as read)
        """
        ensure_capability(current_user, Capability.NOTIFICATION_READ)
        return await notification_repository.mark_all_read(
            db, current_user.id, datetime.now(timezone.utc)
        )

    # --- 팬아웃 (Fan-out) ---

    async def notify(
        self,
        db: AsyncSession,
        recipients: Sequence[User],
        notification_type: NotificationType,
        title: str,
        message: str,
        related_idea_id: UUID | None = None,
    ) -> list[Notification]:
        """수신자마다 알림 레코드를 1건씩 생성합니다.

        Create one unread notification per recipient. Flushes only.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            recipients: 수신자 목록 (Recipients)
            notification_type: 알림 유형 (Notification type)
            title: 제목 (Title)
            message: 메시지 (Message)
            related_idea_id: 관련 아이디어 ID (Related idea, optional)

        Returns:
            list[Notification]: 생성된 알림 (Created notifications)
        """
        rows: list[dict] = [
            {
                "recipient_id": recipient.id,
                "recipient_employee_number": recipient.employee_number,
                "type": notification_type.value,
                "title": title,
                "message": message,
                "related_idea_id": related_idea_id,
                "is_read": False,
            }
            for recipient in recipients
        ]
        if not rows:
            return []
        return await notification_repository.bulk_create(db, rows)

    async def notify_idea_submitted(
        self,
        db: AsyncSession,
        idea_id: UUID,
        idea_title: str,
        submitter_name: str,
    ) -> bool:
        """새 아이디어 제출을 모든 활성 검토자/관리자에게 알립니다.

        Fan out idea_submitted to every active reviewer and admin and
        commit. Returns False when the store fails; the idea is untouched.
        """
        try:
            reviewers: Sequence[User] = await user_repository.get_reviewers(db)
            await self.notify(
                db,
                reviewers,
                NotificationType.IDEA_SUBMITTED,
                "New Idea Submitted",
                f'{submitter_name} submitted a new idea: "{idea_title}"',
                idea_id,
            )
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Notification fan-out failed for submitted idea %s", idea_id)
            return False
        return True

    async def notify_status_changed(
        self,
        db: AsyncSession,
        idea_id: UUID,
        idea_title: str,
        new_status: IdeaStatus,
        submitter: User,
    ) -> bool:
        """상태 변경을 제출자에게 알립니다.

        Notify the submitter with type idea_<status> and commit. Returns
        False when the store fails; the status change is untouched.
        """
        label: str = new_status.value.replace("_", " ")
        try:
            await self.notify(
                db,
                [submitter],
                NotificationType(f"idea_{new_status.value}"),
                f"Idea {label.title()}",
                f'Your idea "{idea_title}" has been {label}',
                idea_id,
            )
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Notification fan-out failed for idea %s status %s", idea_id, new_status.value)
            return False
        return True


# 싱글턴 인스턴스 — Singleton instance
notification_service: NotificationService = NotificationService()
