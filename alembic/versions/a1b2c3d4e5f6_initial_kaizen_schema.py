"""initial_kaizen_schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 09:00:00.000000

카이젠 초기 스키마 생성.
- users: 사번 기반 직원 계정
- ideas: 아이디어 + 검토 상태 + 버전 카운터
- notifications: 사용자별 알림
- refresh_tokens, login_codes: 인증 토큰/일회용 코드
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1. users
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("employee_number", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("department", sa.String(50), nullable=False),
        sa.Column("designation", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), server_default="employee", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_employee_number", "users", ["employee_number"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_department", "users", ["department"])

    # 2. ideas
    op.create_table(
        "ideas",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("problem", sa.Text(), nullable=False),
        sa.Column("improvement", sa.Text(), nullable=False),
        sa.Column("benefit", sa.String(30), nullable=False),
        sa.Column("estimated_savings", sa.Float(), nullable=True),
        sa.Column("department", sa.String(50), nullable=False),
        sa.Column("submitted_by", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("submitted_by_employee_number", sa.String(50), nullable=False),
        sa.Column("status", sa.String(20), server_default="under_review", nullable=False),
        sa.Column("reviewed_by", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_comments", sa.String(1000), nullable=True),
        sa.Column("implementation_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("actual_savings", sa.Float(), nullable=True),
        sa.Column("images", sa.JSON(), server_default=sa.text("'[]'"), nullable=False),
        sa.Column("tags", sa.JSON(), server_default=sa.text("'[]'"), nullable=False),
        sa.Column("priority", sa.String(20), server_default="medium", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_ideas_benefit", "ideas", ["benefit"])
    op.create_index("ix_ideas_department", "ideas", ["department"])
    op.create_index("ix_ideas_submitted_by", "ideas", ["submitted_by"])
    op.create_index("ix_ideas_submitted_by_employee_number", "ideas", ["submitted_by_employee_number"])
    op.create_index("ix_ideas_status", "ideas", ["status"])
    op.create_index("ix_ideas_created_at", "ideas", ["created_at"])

    # 3. notifications
    op.create_table(
        "notifications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("recipient_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("recipient_employee_number", sa.String(50), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.String(1000), nullable=False),
        sa.Column("related_idea_id", UUID(as_uuid=True), sa.ForeignKey("ideas.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_read", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_notifications_recipient_employee_number", "notifications", ["recipient_employee_number"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])
    op.create_index("ix_notifications_recipient_read", "notifications", ["recipient_id", "is_read"])

    # 4. refresh_tokens
    op.create_table(
        "refresh_tokens",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token", sa.String(512), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # 5. login_codes
    op.create_table(
        "login_codes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("code_hash", sa.String(255), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("consumed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_login_codes_user_id", "login_codes", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_login_codes_user_id")
    op.drop_table("login_codes")
    op.drop_table("refresh_tokens")
    op.drop_index("ix_notifications_recipient_read")
    op.drop_index("ix_notifications_created_at")
    op.drop_index("ix_notifications_recipient_employee_number")
    op.drop_table("notifications")
    op.drop_index("ix_ideas_created_at")
    op.drop_index("ix_ideas_status")
    op.drop_index("ix_ideas_submitted_by_employee_number")
    op.drop_index("ix_ideas_submitted_by")
    op.drop_index("ix_ideas_department")
    op.drop_index("ix_ideas_benefit")
    op.drop_table("ideas")
    op.drop_index("ix_users_department")
    op.drop_index("ix_users_email")
    op.drop_index("ix_users_employee_number")
    op.drop_table("users")
