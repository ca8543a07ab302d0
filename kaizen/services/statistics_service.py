"""통계 서비스 — 아이디어 통계 및 랭킹 집계 비즈니스 로직.

Statistics Service — Aggregation logic for idea statistics, the
individual and department leaderboards, and the Excel export.
All results are recomputed per call from active ideas only.

Scoring:
    score = totalIdeas * 5 + approvedIdeas * 10 + implementedIdeas * 20
"""

from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy import and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kaizen.config import settings
from kaizen.models.idea import Idea, IdeaStatus
from kaizen.models.user import Department, User
from kaizen.repositories.idea_repository import idea_repository
from kaizen.schemas.idea import BenefitStat, DepartmentStat, IdeaStats, StatusStat
from kaizen.schemas.user import DepartmentRanking, IndividualRanking
from kaizen.utils.access import Capability, ensure_capability

# 점수 가중치 — Score weights
SCORE_PER_IDEA: int = 5
SCORE_PER_APPROVED: int = 10
SCORE_PER_IMPLEMENTED: int = 20


def calculate_score(total_ideas: int, approved_ideas: int, implemented_ideas: int) -> int:
    """랭킹 점수 계산 — Leaderboard score for one user."""
    return (
        total_ideas * SCORE_PER_IDEA
        + approved_ideas * SCORE_PER_APPROVED
        + implemented_ideas * SCORE_PER_IMPLEMENTED
    )


def average_ideas(total_ideas: int, employee_count: int) -> float:
    """직원당 평균 아이디어 수 (소수 둘째 자리) — Ideas per employee, 2 decimals."""
    return round(total_ideas / max(employee_count, 1), 2)


def _status_count(status: IdeaStatus) -> Any:
    return func.coalesce(func.sum(case((Idea.status == status.value, 1), else_=0)), 0)


class StatisticsService:
    """통계 서비스.

    Read-only aggregation service for statistics and leaderboards.
    """

    async def get_idea_stats(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> IdeaStats:
        """상태/부서/효과 분류별 통계 (검토자/관리자 전용)."""
        ensure_capability(current_user, Capability.STATS_READ)
        by_status = await idea_repository.stats_by_status(db)
        by_department = await idea_repository.stats_by_department(db)
        by_benefit = await idea_repository.stats_by_benefit(db)
        return IdeaStats(
            status_stats=[
                StatusStat(status=row.status, count=row.idea_count, total_savings=float(row.total_savings))
                for row in by_status
            ],
            department_stats=[
                DepartmentStat(department=row.department, count=row.idea_count, total_savings=float(row.total_savings))
                for row in by_department
            ],
            benefit_stats=[
                BenefitStat(benefit=row.benefit, count=row.idea_count)
                for row in by_benefit
            ],
        )

    async def get_individual_leaderboard(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> list[IndividualRanking]:
        """개인 랭킹 — 점수 내림차순, 동점은 사번 오름차순, 상위 LEADERBOARD_LIMIT명."""
        ensure_capability(current_user, Capability.LEADERBOARD_READ)

        total = func.count(Idea.id)
        approved = _status_count(IdeaStatus.APPROVED)
        implemented = _status_count(IdeaStatus.IMPLEMENTED)
        # 승인/실행완료 아이디어의 예상 절감액 합계, 누락은 0
        savings = func.coalesce(
            func.sum(
                case(
                    (
                        Idea.status.in_([IdeaStatus.APPROVED.value, IdeaStatus.IMPLEMENTED.value]),
                        func.coalesce(Idea.estimated_savings, 0),
                    ),
                    else_=0,
                )
            ),
            0,
        )
        score = (
            total * SCORE_PER_IDEA
            + approved * SCORE_PER_APPROVED
            + implemented * SCORE_PER_IMPLEMENTED
        )

        query = (
            select(
                User.id,
                User.employee_number,
                User.name,
                User.department,
                User.designation,
                total.label("total_ideas"),
                approved.label("approved_ideas"),
                implemented.label("implemented_ideas"),
                savings.label("total_savings"),
            )
            .select_from(User)
            .outerjoin(Idea, and_(Idea.submitted_by == User.id, Idea.is_active.is_(True)))
            .where(User.is_active.is_(True))
            .group_by(User.id, User.employee_number, User.name, User.department, User.designation)
            .order_by(score.desc(), User.employee_number.asc())
            .limit(settings.LEADERBOARD_LIMIT)
        )
        result = await db.execute(query)

        return [
            IndividualRanking(
                id=row.id,
                employee_number=row.employee_number,
                name=row.name,
                department=row.department,
                designation=row.designation,
                total_ideas=int(row.total_ideas),
                approved_ideas=int(row.approved_ideas),
                implemented_ideas=int(row.implemented_ideas),
                total_savings=float(row.total_savings),
                score=calculate_score(int(row.total_ideas), int(row.approved_ideas), int(row.implemented_ideas)),
            )
            for row in result.all()
        ]

    async def get_department_leaderboard(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> list[DepartmentRanking]:
        """부서 랭킹 — 모든 부서 포함, 아이디어 수 내림차순, 동점은 부서명 오름차순."""
        ensure_capability(current_user, Capability.LEADERBOARD_READ)

        idea_result = await db.execute(
            select(
                Idea.department,
                func.count(Idea.id).label("total_ideas"),
                _status_count(IdeaStatus.APPROVED).label("approved_ideas"),
                _status_count(IdeaStatus.IMPLEMENTED).label("implemented_ideas"),
                func.coalesce(func.sum(func.coalesce(Idea.estimated_savings, 0)), 0).label("total_savings"),
            )
            .where(Idea.is_active.is_(True))
            .group_by(Idea.department)
        )
        idea_rows: dict[str, Any] = {row.department: row for row in idea_result.all()}

        user_result = await db.execute(
            select(User.department, func.count(User.id).label("employee_count"))
            .where(User.is_active.is_(True))
            .group_by(User.department)
        )
        employee_counts: dict[str, int] = {row.department: int(row.employee_count) for row in user_result.all()}

        rankings: list[DepartmentRanking] = []
        for department in Department:
            row = idea_rows.get(department.value)
            total_ideas: int = int(row.total_ideas) if row is not None else 0
            employee_count: int = employee_counts.get(department.value, 0)
            rankings.append(DepartmentRanking(
                department=department.value,
                total_ideas=total_ideas,
                approved_ideas=int(row.approved_ideas) if row is not None else 0,
                implemented_ideas=int(row.implemented_ideas) if row is not None else 0,
                total_savings=float(row.total_savings) if row is not None else 0.0,
                employee_count=employee_count,
                avg_ideas_per_employee=average_ideas(total_ideas, employee_count),
            ))

        rankings.sort(key=lambda r: (-r.total_ideas, r.department))
        return rankings

    async def export_excel(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> bytes:
        """통계 및 개인 랭킹을 Excel 파일로 내보내기."""
        stats: IdeaStats = await self.get_idea_stats(db, current_user)
        leaderboard: list[IndividualRanking] = await self.get_individual_leaderboard(db, current_user)

        wb = Workbook()
        header_font = Font(bold=True, color="FFFFFF", size=11)
        header_fill = PatternFill(start_color="2D3436", end_color="2D3436", fill_type="solid")

        def style_headers(ws, headers: list[str]) -> None:
            for col_idx, h in enumerate(headers, 1):
                cell = ws.cell(row=1, column=col_idx, value=h)
                cell.font = header_font
                cell.fill = header_fill
                cell.alignment = Alignment(horizontal="center")

        def set_widths(ws, widths: list[int]) -> None:
            for i, w in enumerate(widths, 1):
                ws.column_dimensions[ws.cell(row=1, column=i).column_letter].width = w

        # --- Sheet 1: Status ---
        ws1 = wb.active
        ws1.title = "By Status"
        style_headers(ws1, ["Status", "Ideas", "Estimated Savings"])
        for s in stats.status_stats:
            ws1.append([s.status, s.count, s.total_savings])
        set_widths(ws1, [18, 10, 20])

        # --- Sheet 2: Department ---
        ws2 = wb.create_sheet("By Department")
        style_headers(ws2, ["Department", "Ideas", "Estimated Savings"])
        for d in stats.department_stats:
            ws2.append([d.department, d.count, d.total_savings])
        set_widths(ws2, [18, 10, 20])

        # --- Sheet 3: Benefit ---
        ws3 = wb.create_sheet("By Benefit")
        style_headers(ws3, ["Benefit", "Ideas"])
        for b in stats.benefit_stats:
            ws3.append([b.benefit, b.count])
        set_widths(ws3, [18, 10])

        # --- Sheet 4: Leaderboard ---
        ws4 = wb.create_sheet("Leaderboard")
        style_headers(ws4, [
            "Rank", "Employee Number", "Name", "Department", "Ideas",
            "Approved", "Implemented", "Savings", "Score",
        ])
        for rank, r in enumerate(leaderboard, 1):
            ws4.append([
                rank, r.employee_number, r.name, r.department, r.total_ideas,
                r.approved_ideas, r.implemented_ideas, r.total_savings, r.score,
            ])
        set_widths(ws4, [8, 18, 22, 16, 8, 10, 12, 14, 8])

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()


# 싱글턴 인스턴스
statistics_service: StatisticsService = StatisticsService()
