"""알림 관련 SQLAlchemy ORM 모델 정의.

Notification SQLAlchemy ORM model definitions.
Notifications are side records written when an idea is submitted or
changes status. They are immutable apart from the read flag.

Tables:
    - notifications: 사용자 알림 (Per-recipient idea notifications)
"""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kaizen.database import Base


class NotificationType(str, enum.Enum):
    """알림 유형 — Notification types tied to idea events."""

    IDEA_SUBMITTED = "idea_submitted"
    IDEA_UNDER_REVIEW = "idea_under_review"
    IDEA_APPROVED = "idea_approved"
    IDEA_REJECTED = "idea_rejected"
    IDEA_IMPLEMENTING = "idea_implementing"
    IDEA_IMPLEMENTED = "idea_implemented"
    REVIEW_ASSIGNED = "review_assigned"


class Notification(Base):
    """알림 모델 — 사용자에게 전달되는 아이디어 알림.

    Notification model — Idea notifications delivered to one recipient.
    recipient_employee_number is copied from the recipient at insert time.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        recipient_id: 수신자 FK (Recipient user foreign key)
        recipient_employee_number: 수신자 사번 (Recipient employee number projection)
        type: 알림 유형 (Notification type, see NotificationType)
        title: 알림 제목 (Short title)
        message: 알림 메시지 (Human-readable message)
        related_idea_id: 관련 아이디어 FK (Related idea, SET NULL on delete)
        is_read: 읽음 여부 (Whether the recipient has read this notification)
        read_at: 읽은 일시 (First time the notification was read)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "notifications"

    # 알림 고유 식별자 — Notification unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 수신자 FK — Target user who receives this notification
    recipient_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    recipient_employee_number: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    # 알림 유형 — idea_submitted | idea_approved | idea_rejected | idea_implementing | idea_implemented | review_assigned
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    related_idea_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("ideas.id", ondelete="SET NULL"), nullable=True)
    # 읽음 여부 — False=미읽음, True=읽음 (Unread by default)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 생성 일시 — Notification creation timestamp (UTC, immutable)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)

    __table_args__ = (
        Index("ix_notifications_recipient_read", "recipient_id", "is_read"),
    )

    # 관계 — Relationships
    related_idea = relationship("Idea")
