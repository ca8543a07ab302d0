"""아이디어 API 테스트 — 제출, 목록, 수정, 철회, 상태 변경.

Idea API tests — Submission, listing and filters, owner edits and
withdrawal, reviewer status transitions, optimistic concurrency and
notification fan-out.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.config import settings
from kaizen.models.idea import Idea
from kaizen.models.notification import Notification
from kaizen.repositories.notification_repository import notification_repository
from tests.conftest import auth_header, make_idea, make_token, make_user

URL = "/api/ideas"

IDEA_PAYLOAD = {
    "title": "Reduce scrap on press line",
    "problem": "Misaligned dies cause scrap",
    "improvement": "Add alignment pins to the die set",
    "benefit": "cost_saving",
    "estimatedSavings": 5000,
    "department": "Engineering",
    "tags": ["press", "scrap"],
}


async def _notification_count(db: AsyncSession, **filters) -> int:
    query = select(func.count()).select_from(Notification).filter_by(**filters)
    return (await db.execute(query)).scalar() or 0


# ===== Submission =====

class TestCreateIdea:
    """아이디어 제출 테스트."""

    async def test_create_idea(self, client: AsyncClient, employee_token, reviewer, admin):
        """제출 성공 — under_review, 검토자/관리자 알림."""
        res = await client.post(URL, json=IDEA_PAYLOAD, headers=auth_header(employee_token))
        assert res.status_code == 201
        data = res.json()["data"]
        assert data["notificationsDelivered"] is True
        idea = data["idea"]
        assert idea["status"] == "under_review"
        assert idea["submittedByEmployeeNumber"] == "12345"
        assert idea["submitter"]["name"] == "John Doe"
        assert idea["priority"] == "medium"
        assert idea["version"] == 1

    async def test_create_idea_notifies_reviewers_and_admins(
        self, client: AsyncClient, db: AsyncSession, employee_token, reviewer, admin
    ):
        """검토자와 관리자마다 알림 1건씩."""
        res = await client.post(URL, json=IDEA_PAYLOAD, headers=auth_header(employee_token))
        idea_id = res.json()["data"]["idea"]["id"]

        rows = (await db.execute(select(Notification))).scalars().all()
        assert sorted(n.recipient_employee_number for n in rows) == ["11111", "67890"]
        assert all(n.type == "idea_submitted" for n in rows)
        assert all(str(n.related_idea_id) == idea_id for n in rows)
        assert rows[0].message == 'John Doe submitted a new idea: "Reduce scrap on press line"'

    async def test_client_status_ignored(self, client: AsyncClient, employee_token):
        """클라이언트가 보낸 상태는 무시."""
        res = await client.post(URL, json={**IDEA_PAYLOAD, "status": "approved"}, headers=auth_header(employee_token))
        assert res.status_code == 201
        assert res.json()["data"]["idea"]["status"] == "under_review"

    async def test_create_idea_missing_fields(self, client: AsyncClient, employee_token):
        """필수 필드 누락 시 400."""
        res = await client.post(URL, json={"title": "Only a title"}, headers=auth_header(employee_token))
        assert res.status_code == 400
        fields = {d["field"] for d in res.json()["details"]}
        assert {"problem", "improvement", "benefit", "department"} <= fields

    async def test_create_idea_title_too_long(self, client: AsyncClient, employee_token):
        """제목 200자 초과 시 400."""
        res = await client.post(URL, json={**IDEA_PAYLOAD, "title": "x" * 201}, headers=auth_header(employee_token))
        assert res.status_code == 400

    async def test_create_idea_unknown_department(self, client: AsyncClient, employee_token):
        """정의되지 않은 부서 400."""
        res = await client.post(URL, json={**IDEA_PAYLOAD, "department": "Marketing"}, headers=auth_header(employee_token))
        assert res.status_code == 400

    async def test_create_idea_no_auth(self, client: AsyncClient):
        """인증 없이 401."""
        res = await client.post(URL, json=IDEA_PAYLOAD)
        assert res.status_code == 401

    async def test_fan_out_failure_keeps_idea(
        self, client: AsyncClient, db: AsyncSession, employee_token, reviewer, monkeypatch
    ):
        """알림 저장 실패 시에도 아이디어는 유지, notificationsDelivered=false."""
        async def _broken_bulk_create(session, rows):
            raise SQLAlchemyError("notification store unavailable")

        monkeypatch.setattr(notification_repository, "bulk_create", _broken_bulk_create)

        res = await client.post(URL, json=IDEA_PAYLOAD, headers=auth_header(employee_token))
        assert res.status_code == 201
        data = res.json()["data"]
        assert data["notificationsDelivered"] is False

        stored = (await db.execute(select(func.count()).select_from(Idea))).scalar()
        assert stored == 1
        assert await _notification_count(db) == 0


# ===== Listing =====

class TestListIdeas:
    """아이디어 목록 테스트."""

    async def test_list_newest_first_with_pagination(self, client: AsyncClient, db, employee, employee_token):
        """최신순 + 페이지네이션 메타데이터."""
        for i in range(3):
            await make_idea(db, employee, title=f"Idea {i}")

        res = await client.get(f"{URL}?page=1&limit=2", headers=auth_header(employee_token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert len(data["items"]) == 2
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

        res = await client.get(f"{URL}?page=2&limit=2", headers=auth_header(employee_token))
        assert len(res.json()["data"]["items"]) == 1

    async def test_filters(self, client: AsyncClient, db, employee, reviewer, employee_token):
        """상태/부서/효과/제출자 필터."""
        await make_idea(db, employee, status="approved", benefit="safety")
        await make_idea(db, employee, status="under_review", benefit="quality")
        await make_idea(db, reviewer, status="approved", benefit="safety", department="Quality")

        res = await client.get(f"{URL}?status=approved", headers=auth_header(employee_token))
        assert res.json()["data"]["pagination"]["total"] == 2

        res = await client.get(f"{URL}?status=approved&department=Engineering", headers=auth_header(employee_token))
        assert res.json()["data"]["pagination"]["total"] == 1

        res = await client.get(f"{URL}?benefit=quality", headers=auth_header(employee_token))
        assert res.json()["data"]["pagination"]["total"] == 1

        res = await client.get(f"{URL}?submittedBy=67890", headers=auth_header(employee_token))
        items = res.json()["data"]["items"]
        assert len(items) == 1
        assert items[0]["submittedByEmployeeNumber"] == "67890"

    async def test_search_is_case_insensitive(self, client: AsyncClient, db, employee, employee_token):
        """검색은 제목/문제/개선안 대소문자 무시."""
        await make_idea(db, employee, title="Conveyor Guard")
        await make_idea(db, employee, title="Other", improvement="Install a CONVEYOR sensor")
        await make_idea(db, employee, title="Unrelated")

        res = await client.get(f"{URL}?search=conveyor", headers=auth_header(employee_token))
        assert res.json()["data"]["pagination"]["total"] == 2

    async def test_search_wildcards_are_literal(self, client: AsyncClient, db, employee, employee_token):
        """검색어의 % 와 _ 는 와일드카드가 아님."""
        await make_idea(db, employee, title="Fix conveyor")
        await make_idea(db, employee, title="Cut scrap by 50%")

        res = await client.get(URL, params={"search": "_"}, headers=auth_header(employee_token))
        assert res.json()["data"]["pagination"]["total"] == 0

        res = await client.get(URL, params={"search": "%"}, headers=auth_header(employee_token))
        items = res.json()["data"]["items"]
        assert [i["title"] for i in items] == ["Cut scrap by 50%"]

    async def test_invalid_page(self, client: AsyncClient, employee_token):
        """page < 1 이면 400."""
        res = await client.get(f"{URL}?page=0", headers=auth_header(employee_token))
        assert res.status_code == 400

    async def test_my_ideas(self, client: AsyncClient, db, employee, reviewer, employee_token):
        """내 아이디어만 조회."""
        await make_idea(db, employee)
        await make_idea(db, reviewer, department="Quality")

        res = await client.get(f"{URL}/my", headers=auth_header(employee_token))
        items = res.json()["data"]["items"]
        assert len(items) == 1
        assert items[0]["submittedByEmployeeNumber"] == "12345"

    async def test_get_idea_not_found(self, client: AsyncClient, employee_token):
        """없는 아이디어 404."""
        res = await client.get(f"{URL}/00000000-0000-0000-0000-000000000000", headers=auth_header(employee_token))
        assert res.status_code == 404
        assert res.json()["message"] == "Idea not found"


# ===== Owner edit / withdrawal =====

class TestOwnerEdit:
    """제출자 수정/철회 테스트."""

    async def test_owner_updates_unreviewed_idea(self, client: AsyncClient, db, employee, employee_token):
        """검토 전 본인 아이디어 수정."""
        idea = await make_idea(db, employee)
        res = await client.put(
            f"{URL}/{idea.id}",
            json={"title": "Sharper title", "priority": "high"},
            headers=auth_header(employee_token),
        )
        assert res.status_code == 200
        data = res.json()["data"]["idea"]
        assert data["title"] == "Sharper title"
        assert data["priority"] == "high"
        assert data["problem"] == "Line changeover takes too long"

    async def test_non_owner_cannot_update(self, client: AsyncClient, db, employee):
        """다른 직원은 수정 불가 — 403."""
        idea = await make_idea(db, employee)
        other = await make_user(db, "22222")
        res = await client.put(
            f"{URL}/{idea.id}", json={"title": "Hijack"}, headers=auth_header(make_token(other))
        )
        assert res.status_code == 403

    async def test_reviewed_idea_is_locked(self, client: AsyncClient, db, employee, employee_token):
        """검토된 아이디어는 수정/철회 불가."""
        idea = await make_idea(db, employee, status="approved")
        res = await client.put(f"{URL}/{idea.id}", json={"title": "Late edit"}, headers=auth_header(employee_token))
        assert res.status_code == 400

        res = await client.delete(f"{URL}/{idea.id}", headers=auth_header(employee_token))
        assert res.status_code == 400

    async def test_withdraw_hides_idea(self, client: AsyncClient, db, employee, employee_token):
        """철회된 아이디어는 조회되지 않음."""
        idea = await make_idea(db, employee)
        idea_id = idea.id
        res = await client.delete(f"{URL}/{idea_id}", headers=auth_header(employee_token))
        assert res.status_code == 200

        res = await client.get(f"{URL}/{idea_id}", headers=auth_header(employee_token))
        assert res.status_code == 404
        res = await client.get(URL, headers=auth_header(employee_token))
        assert res.json()["data"]["pagination"]["total"] == 0


# ===== Status transitions =====

class TestStatusUpdate:
    """상태 변경 테스트."""

    async def test_reviewer_approves(self, client: AsyncClient, db, employee, reviewer_token):
        """검토자 승인 — 검토자 기록, 제출자 알림."""
        idea = await make_idea(db, employee)
        res = await client.put(
            f"{URL}/{idea.id}/status",
            json={"status": "approved", "reviewComments": "Good one", "version": 1},
            headers=auth_header(reviewer_token),
        )
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["notificationsDelivered"] is True
        assert data["idea"]["status"] == "approved"
        assert data["idea"]["reviewer"]["employeeNumber"] == "67890"
        assert data["idea"]["reviewComments"] == "Good one"
        assert data["idea"]["reviewedAt"] is not None
        assert data["idea"]["version"] == 2

        rows = (await db.execute(select(Notification))).scalars().all()
        assert len(rows) == 1
        assert rows[0].recipient_employee_number == "12345"
        assert rows[0].type == "idea_approved"
        assert rows[0].title == "Idea Approved"
        assert rows[0].message == 'Your idea "Reduce changeover time" has been approved'

    async def test_employee_cannot_review_own_idea(self, client: AsyncClient, db, employee, employee_token):
        """직원은 본인 아이디어도 상태 변경 불가."""
        idea = await make_idea(db, employee)
        res = await client.put(
            f"{URL}/{idea.id}/status", json={"status": "approved"}, headers=auth_header(employee_token)
        )
        assert res.status_code == 403

    async def test_full_workflow(self, client: AsyncClient, db, employee, admin_token):
        """under_review → approved → implementing → implemented."""
        idea = await make_idea(db, employee)
        for status in ("approved", "implementing"):
            res = await client.put(
                f"{URL}/{idea.id}/status", json={"status": status}, headers=auth_header(admin_token)
            )
            assert res.status_code == 200

        res = await client.put(
            f"{URL}/{idea.id}/status",
            json={"status": "implemented", "actualSavings": 1200},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        data = res.json()["data"]["idea"]
        assert data["status"] == "implemented"
        assert data["implementationDate"] is not None
        assert data["actualSavings"] == 1200
        assert await _notification_count(db, recipient_employee_number="12345") == 3

    async def test_illegal_transition_rejected(self, client: AsyncClient, db, employee, reviewer_token):
        """under_review → implemented 불가 (400)."""
        idea = await make_idea(db, employee)
        res = await client.put(
            f"{URL}/{idea.id}/status", json={"status": "implemented"}, headers=auth_header(reviewer_token)
        )
        assert res.status_code == 400
        assert res.json()["message"] == "Cannot change status from under_review to implemented"

    async def test_terminal_status_rejected(self, client: AsyncClient, db, employee, reviewer_token):
        """rejected는 종료 상태."""
        idea = await make_idea(db, employee, status="rejected")
        res = await client.put(
            f"{URL}/{idea.id}/status", json={"status": "approved"}, headers=auth_header(reviewer_token)
        )
        assert res.status_code == 400

    async def test_loose_transitions_when_not_enforced(
        self, client: AsyncClient, db, employee, reviewer_token, monkeypatch
    ):
        """ENFORCE_STATUS_TRANSITIONS=False이면 임의 전이 허용."""
        monkeypatch.setattr(settings, "ENFORCE_STATUS_TRANSITIONS", False)
        idea = await make_idea(db, employee, status="rejected")
        res = await client.put(
            f"{URL}/{idea.id}/status", json={"status": "implemented"}, headers=auth_header(reviewer_token)
        )
        assert res.status_code == 200
        assert res.json()["data"]["idea"]["status"] == "implemented"

    async def test_stale_version_conflict(self, client: AsyncClient, db, employee, reviewer_token, admin_token):
        """오래된 version으로 변경 시 409."""
        idea = await make_idea(db, employee)
        first = await client.put(
            f"{URL}/{idea.id}/status", json={"status": "approved", "version": 1}, headers=auth_header(admin_token)
        )
        assert first.status_code == 200

        second = await client.put(
            f"{URL}/{idea.id}/status", json={"status": "implementing", "version": 1}, headers=auth_header(reviewer_token)
        )
        assert second.status_code == 409
        assert second.json()["success"] is False

    async def test_status_update_not_found(self, client: AsyncClient, reviewer_token):
        """없는 아이디어 404."""
        res = await client.put(
            f"{URL}/00000000-0000-0000-0000-000000000000/status",
            json={"status": "approved"},
            headers=auth_header(reviewer_token),
        )
        assert res.status_code == 404

    async def test_invalid_status_value(self, client: AsyncClient, db, employee, reviewer_token):
        """정의되지 않은 상태 400."""
        idea = await make_idea(db, employee)
        res = await client.put(
            f"{URL}/{idea.id}/status", json={"status": "archived"}, headers=auth_header(reviewer_token)
        )
        assert res.status_code == 400


# ===== End-to-end =====

class TestIdeaFlow:
    """제출 → 검토 → 알림 읽음 전체 흐름."""

    async def test_submit_review_and_read(self, client: AsyncClient, employee_token, reviewer_token):
        res = await client.post(URL, json=IDEA_PAYLOAD, headers=auth_header(employee_token))
        idea = res.json()["data"]["idea"]

        inbox = await client.get("/api/notifications", headers=auth_header(reviewer_token))
        assert inbox.json()["data"]["unreadCount"] == 1

        res = await client.put(
            f"{URL}/{idea['id']}/status",
            json={"status": "approved", "version": idea["version"]},
            headers=auth_header(reviewer_token),
        )
        assert res.status_code == 200

        inbox = await client.get("/api/notifications", headers=auth_header(employee_token))
        data = inbox.json()["data"]
        assert data["unreadCount"] == 1
        notification = data["items"][0]
        assert notification["type"] == "idea_approved"
        assert notification["relatedIdea"]["status"] == "approved"

        res = await client.put(
            f"/api/notifications/{notification['id']}/read", headers=auth_header(employee_token)
        )
        assert res.status_code == 200
        count = await client.get("/api/notifications/unread-count", headers=auth_header(employee_token))
        assert count.json()["data"]["unreadCount"] == 0
