"""통계 API 테스트.

Statistics API tests — Aggregates by status, department and benefit,
reviewer-only access, and the Excel export.
"""

from io import BytesIO

from httpx import AsyncClient
from openpyxl import load_workbook
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.services.statistics_service import average_ideas, calculate_score
from tests.conftest import auth_header, make_idea

URL = "/api/ideas/stats"


class TestScoring:
    """점수 계산 헬퍼 테스트."""

    def test_calculate_score(self):
        assert calculate_score(3, 1, 1) == 45
        assert calculate_score(0, 0, 0) == 0

    def test_average_ideas(self):
        assert average_ideas(10, 4) == 2.5
        assert average_ideas(1, 3) == 0.33
        assert average_ideas(5, 0) == 5.0


class TestIdeaStats:
    """아이디어 통계 테스트."""

    async def test_stats(self, client: AsyncClient, db: AsyncSession, employee, reviewer, reviewer_token):
        """상태/부서/효과 분류별 집계, 철회 제외, 누락 절감액은 0."""
        await make_idea(db, employee, status="approved", benefit="safety", estimated_savings=1000)
        await make_idea(db, employee, status="approved", benefit="quality", estimated_savings=None)
        await make_idea(db, reviewer, status="under_review", benefit="safety", estimated_savings=500)
        await make_idea(db, employee, status="approved", estimated_savings=9999, is_active=False)

        res = await client.get(URL, headers=auth_header(reviewer_token))
        assert res.status_code == 200
        data = res.json()["data"]

        by_status = {s["status"]: s for s in data["statusStats"]}
        assert by_status["approved"]["count"] == 2
        assert by_status["approved"]["totalSavings"] == 1000
        assert by_status["under_review"]["count"] == 1

        by_department = {d["department"]: d for d in data["departmentStats"]}
        assert by_department["Engineering"]["count"] == 2
        assert by_department["Quality"]["totalSavings"] == 500

        by_benefit = {b["benefit"]: b["count"] for b in data["benefitStats"]}
        assert by_benefit == {"safety": 2, "quality": 1}

    async def test_stats_employee_forbidden(self, client: AsyncClient, employee_token):
        """직원은 통계 조회 불가 — 403."""
        res = await client.get(URL, headers=auth_header(employee_token))
        assert res.status_code == 403

    async def test_export_excel(self, client: AsyncClient, db: AsyncSession, employee, admin_token):
        """Excel 내보내기 — 4개 시트."""
        await make_idea(db, employee, status="implemented")

        res = await client.get(f"{URL}/export", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert "spreadsheetml" in res.headers["content-type"]

        wb = load_workbook(BytesIO(res.content))
        assert wb.sheetnames == ["By Status", "By Department", "By Benefit", "Leaderboard"]
        ws = wb["Leaderboard"]
        assert ws.cell(row=2, column=2).value == "12345"
        assert ws.cell(row=2, column=9).value == 25
