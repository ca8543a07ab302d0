"""알림 관련 Pydantic 응답 스키마 정의.

Notification response schema definitions.
"""

from datetime import datetime
from uuid import UUID

from kaizen.schemas.common import CamelModel


class RelatedIdea(CamelModel):
    """관련 아이디어 요약 — Title and status of the related idea."""

    id: UUID
    title: str
    status: str


class NotificationResponse(CamelModel):
    """알림 응답 스키마.

    Notification response schema.

    Attributes:
        id: 알림 UUID (Notification identifier)
        recipient_employee_number: 수신자 사번 (Recipient employee number)
        type: 알림 유형 (Notification type)
        title: 제목 (Title)
        message: 메시지 (Message)
        related_idea_id: 관련 아이디어 ID (Related idea, nullable)
        related_idea: 관련 아이디어 요약 (Related idea summary, nullable)
        is_read: 읽음 여부 (Read flag)
        read_at: 읽은 일시 (First read time)
        created_at: 생성 일시 (Creation time)
    """

    id: UUID
    recipient_employee_number: str
    type: str
    title: str
    message: str
    related_idea_id: UUID | None = None
    related_idea: RelatedIdea | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime
