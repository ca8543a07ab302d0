"""서비스 계층 테스트.

Service-level tests — Calls the singletons directly with a session, the
way the routers do, to pin business rules independent of HTTP.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.models.idea import IdeaStatus
from kaizen.models.user import Department, User
from kaizen.schemas.idea import IdeaCreate, IdeaStatusUpdate
from kaizen.schemas.user import UserCreate
from kaizen.services.idea_service import can_transition, idea_service
from kaizen.services.user_service import user_service
from kaizen.utils.exceptions import ConflictError, ForbiddenError, ValidationError
from tests.conftest import make_idea


class TestIdeaService:
    """아이디어 서비스 테스트."""

    async def test_create_ignores_status_and_copies_employee_number(self, db: AsyncSession, employee):
        data = IdeaCreate.model_validate({
            "title": "  Label bins  ",
            "problem": "Parts get mixed up",
            "improvement": "Colour-coded bins",
            "benefit": "quality",
            "department": "Engineering",
            "status": "implemented",
        })
        idea = await idea_service.create_idea(db, employee, data)
        assert idea.status == IdeaStatus.UNDER_REVIEW.value
        assert idea.title == "Label bins"
        assert idea.submitted_by_employee_number == "12345"
        assert idea.reviewed_by is None

    async def test_update_status_records_reviewer(self, db: AsyncSession, employee, reviewer):
        idea = await make_idea(db, employee)
        updated = await idea_service.update_status(
            db, reviewer, idea.id, IdeaStatusUpdate(status=IdeaStatus.APPROVED)
        )
        assert updated.reviewed_by == reviewer.id
        assert updated.reviewed_at is not None
        assert updated.implementation_date is None

    async def test_implementation_date_only_when_implemented(self, db: AsyncSession, employee, admin):
        idea = await make_idea(db, employee, status="implementing")
        updated = await idea_service.update_status(
            db, admin, idea.id, IdeaStatusUpdate(status=IdeaStatus.IMPLEMENTED)
        )
        assert updated.implementation_date is not None

    async def test_employee_cannot_update_status(self, db: AsyncSession, employee):
        idea = await make_idea(db, employee)
        with pytest.raises(ForbiddenError):
            await idea_service.update_status(
                db, employee, idea.id, IdeaStatusUpdate(status=IdeaStatus.APPROVED)
            )

    async def test_version_mismatch(self, db: AsyncSession, employee, reviewer):
        idea = await make_idea(db, employee)
        with pytest.raises(ConflictError):
            await idea_service.update_status(
                db, reviewer, idea.id, IdeaStatusUpdate(status=IdeaStatus.APPROVED, version=7)
            )

    async def test_illegal_transition(self, db: AsyncSession, employee, reviewer):
        idea = await make_idea(db, employee, status="approved")
        with pytest.raises(ValidationError):
            await idea_service.update_status(
                db, reviewer, idea.id, IdeaStatusUpdate(status=IdeaStatus.REJECTED)
            )

    @pytest.mark.parametrize("current,new,allowed", [
        (IdeaStatus.UNDER_REVIEW, IdeaStatus.APPROVED, True),
        (IdeaStatus.UNDER_REVIEW, IdeaStatus.REJECTED, True),
        (IdeaStatus.APPROVED, IdeaStatus.IMPLEMENTING, True),
        (IdeaStatus.IMPLEMENTING, IdeaStatus.IMPLEMENTED, True),
        (IdeaStatus.UNDER_REVIEW, IdeaStatus.IMPLEMENTING, False),
        (IdeaStatus.IMPLEMENTED, IdeaStatus.UNDER_REVIEW, False),
        (IdeaStatus.REJECTED, IdeaStatus.APPROVED, False),
    ])
    def test_transition_table(self, current, new, allowed):
        assert can_transition(current, new) is allowed


class TestUserService:
    """사용자 서비스 테스트."""

    async def test_duplicate_employee_number_leaves_store_unchanged(self, db: AsyncSession, admin, employee):
        before = (await db.execute(select(func.count()).select_from(User))).scalar()
        data = UserCreate(
            employee_number="12345",
            name="Copy Cat",
            email="copy.cat@company.com",
            department=Department.HR,
            designation="Clerk",
        )
        with pytest.raises(ConflictError):
            await user_service.create_user(db, admin, data)
        after = (await db.execute(select(func.count()).select_from(User))).scalar()
        assert after == before
