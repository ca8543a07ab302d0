"""사용자 관리 API 테스트.

User management API tests — Create, list, detail, update, deactivate.
Tests admin-only access, identity uniqueness and immutability.
"""

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.models.token import RefreshToken
from kaizen.config import settings
from tests.conftest import auth_header, make_user

URL = "/api/users"

NEW_USER = {
    "employeeNumber": "70001",
    "name": "Dana Lee",
    "email": "Dana.Lee@Company.com",
    "department": "Finance",
    "designation": "Analyst",
}


class TestUserCreate:
    """사용자 생성 테스트."""

    async def test_create_user(self, client: AsyncClient, admin_token):
        """사용자 생성 성공 — 이메일 소문자, 기본 역할 employee."""
        res = await client.post(URL, json=NEW_USER, headers=auth_header(admin_token))
        assert res.status_code == 201
        user = res.json()["data"]["user"]
        assert user["employeeNumber"] == "70001"
        assert user["email"] == "dana.lee@company.com"
        assert user["role"] == "employee"
        assert user["isActive"] is True

    async def test_create_user_duplicate_employee_number(self, client: AsyncClient, admin_token, employee):
        """중복 사번 409."""
        res = await client.post(
            URL, json={**NEW_USER, "employeeNumber": "12345"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 409

    async def test_create_user_duplicate_email(self, client: AsyncClient, admin_token, employee):
        """중복 이메일 409 (대소문자 무시)."""
        res = await client.post(
            URL, json={**NEW_USER, "email": "USER12345@company.com"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 409

    async def test_create_user_invalid_email(self, client: AsyncClient, admin_token):
        """잘못된 이메일 400."""
        res = await client.post(URL, json={**NEW_USER, "email": "not-an-email"}, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_create_user_reviewer_forbidden(self, client: AsyncClient, reviewer_token):
        """검토자는 사용자 생성 불가 — 403."""
        res = await client.post(URL, json=NEW_USER, headers=auth_header(reviewer_token))
        assert res.status_code == 403

    async def test_create_user_employee_forbidden(self, client: AsyncClient, employee_token):
        """직원은 사용자 생성 불가 — 403."""
        res = await client.post(URL, json=NEW_USER, headers=auth_header(employee_token))
        assert res.status_code == 403


class TestUserList:
    """사용자 목록/상세 테스트."""

    async def test_list_active_users_by_name(self, client: AsyncClient, db: AsyncSession, admin, admin_token):
        """활성 사용자만 이름순."""
        await make_user(db, "20001", name="Zed")
        await make_user(db, "20002", name="Amy")
        await make_user(db, "20003", name="Gone", is_active=False)

        res = await client.get(URL, headers=auth_header(admin_token))
        assert res.status_code == 200
        names = [u["name"] for u in res.json()["data"]["items"]]
        assert names == ["Admin User", "Amy", "Zed"]

    async def test_list_filter_by_role(self, client: AsyncClient, admin_token, reviewer, employee):
        """역할 필터."""
        res = await client.get(f"{URL}?role=reviewer", headers=auth_header(admin_token))
        items = res.json()["data"]["items"]
        assert [u["employeeNumber"] for u in items] == ["67890"]

    async def test_get_user(self, client: AsyncClient, admin_token, employee):
        """사용자 상세."""
        res = await client.get(f"{URL}/{employee.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["data"]["user"]["name"] == "John Doe"

    async def test_get_user_not_found(self, client: AsyncClient, admin_token):
        """없는 사용자 404."""
        res = await client.get(f"{URL}/00000000-0000-0000-0000-000000000000", headers=auth_header(admin_token))
        assert res.status_code == 404


class TestUserUpdate:
    """사용자 수정/비활성화 테스트."""

    async def test_update_role_and_department(self, client: AsyncClient, admin_token, employee):
        """역할/부서 변경."""
        res = await client.put(
            f"{URL}/{employee.id}",
            json={"role": "reviewer", "department": "Quality"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        user = res.json()["data"]["user"]
        assert user["role"] == "reviewer"
        assert user["department"] == "Quality"

    async def test_identity_keys_are_immutable(self, client: AsyncClient, admin_token, employee):
        """사번/이메일 변경 요청은 400."""
        res = await client.put(
            f"{URL}/{employee.id}", json={"employeeNumber": "99999"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 400
        res = await client.put(
            f"{URL}/{employee.id}", json={"email": "new@company.com"}, headers=auth_header(admin_token)
        )
        assert res.status_code == 400

    async def test_explicit_null_rejected(self, client: AsyncClient, admin_token, employee):
        """NOT NULL 필드에 null 전달 시 400, 기존 값 유지."""
        for field in ("name", "designation", "department", "role", "isActive"):
            res = await client.put(
                f"{URL}/{employee.id}", json={field: None}, headers=auth_header(admin_token)
            )
            assert res.status_code == 400, field
            assert res.json()["success"] is False

        res = await client.get(f"{URL}/{employee.id}", headers=auth_header(admin_token))
        user = res.json()["data"]["user"]
        assert user["name"] == "John Doe"
        assert user["role"] == "employee"
        assert user["isActive"] is True

    async def test_role_change_applies_immediately(
        self, client: AsyncClient, admin_token, employee, employee_token
    ):
        """역할 변경은 기존 토큰에도 즉시 반영 (역할은 DB에서 로드)."""
        res = await client.get("/api/ideas/stats", headers=auth_header(employee_token))
        assert res.status_code == 403

        await client.put(f"{URL}/{employee.id}", json={"role": "reviewer"}, headers=auth_header(admin_token))
        res = await client.get("/api/ideas/stats", headers=auth_header(employee_token))
        assert res.status_code == 200

    async def test_deactivate_user(
        self, client: AsyncClient, db: AsyncSession, admin_token, employee, employee_token, monkeypatch
    ):
        """비활성화 — 토큰 거부, 리프레시 토큰 폐기."""
        monkeypatch.setattr(settings, "OTP_DEV_CODE", "1234")
        login = await client.post("/api/auth/login", json={"employeeNumber": "12345", "otp": "1234"})
        assert login.status_code == 200
        employee_id = employee.id

        res = await client.delete(f"{URL}/{employee_id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["data"]["user"]["isActive"] is False

        res = await client.get("/api/auth/profile", headers=auth_header(employee_token))
        assert res.status_code == 401

        tokens = (await db.execute(select(RefreshToken).where(RefreshToken.user_id == employee_id))).scalars().all()
        assert tokens == []

    async def test_deactivate_through_update_revokes_tokens(
        self, client: AsyncClient, db: AsyncSession, admin_token, employee, monkeypatch
    ):
        """isActive=false 수정도 리프레시 토큰 폐기."""
        monkeypatch.setattr(settings, "OTP_DEV_CODE", "1234")
        login = await client.post("/api/auth/login", json={"employeeNumber": "12345", "otp": "1234"})
        assert login.status_code == 200
        employee_id = employee.id

        res = await client.put(
            f"{URL}/{employee_id}", json={"isActive": False}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        assert res.json()["data"]["user"]["isActive"] is False

        tokens = (await db.execute(select(RefreshToken).where(RefreshToken.user_id == employee_id))).scalars().all()
        assert tokens == []
