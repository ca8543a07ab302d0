"""데모 데이터 시드 스크립트 — 사용자, 아이디어, 알림 생성.

Seed script — Creates demo users, ideas and notifications so the mobile
client has something to show on a fresh database.

Usage:
    python -m kaizen.seed

Creates:
    - 6명 사용자: employee 12345, reviewer 67890, admin 11111 외 직원 3명 (6 users)
    - 5개 아이디어: 각 워크플로 단계별 예시 (5 ideas across the workflow)
    - 3개 알림 (3 notifications)

로그인 코드는 이메일로 발송됩니다. 데모 환경에서는 OTP_DEV_CODE(예: 1234)를
설정하면 메일 없이 로그인할 수 있습니다.
(Set OTP_DEV_CODE, e.g. 1234, to log in without email delivery.)
"""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from kaizen.config import settings
from kaizen.database import async_session, engine, Base
from kaizen.models import Idea, Notification, User


USERS: list[dict[str, str]] = [
    {"employee_number": "12345", "name": "John Doe", "email": "john.doe@company.com",
     "department": "Engineering", "designation": "Senior Engineer", "role": "employee"},
    {"employee_number": "67890", "name": "Jane Smith", "email": "jane.smith@company.com",
     "department": "Quality", "designation": "Quality Manager", "role": "reviewer"},
    {"employee_number": "11111", "name": "Admin User", "email": "admin@company.com",
     "department": "Management", "designation": "Kaizen Coordinator", "role": "admin"},
    {"employee_number": "22222", "name": "Alice Johnson", "email": "alice.johnson@company.com",
     "department": "Manufacturing", "designation": "Production Supervisor", "role": "employee"},
    {"employee_number": "33333", "name": "Bob Wilson", "email": "bob.wilson@company.com",
     "department": "Engineering", "designation": "Design Engineer", "role": "employee"},
    {"employee_number": "44444", "name": "Carol Brown", "email": "carol.brown@company.com",
     "department": "Quality", "designation": "Quality Inspector", "role": "employee"},
]


async def seed() -> None:
    """데이터베이스를 데모 데이터로 시드합니다.

    Seed the database with demo data. Creates tables if they don't exist,
    then inserts users, ideas and notifications.

    Idempotent: 사용자가 이미 있으면 건너뜁니다 (Skips if any user exists).
    """
    # 테이블 생성 — Create all tables from ORM metadata
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(User).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        users: dict[str, User] = {}
        for data in USERS:
            user: User = User(**data, is_active=True)
            db.add(user)
            users[data["employee_number"]] = user
        await db.flush()  # flush로 user.id 생성 (Flush to generate user ids)

        now: datetime = datetime.now(timezone.utc)

        def submitted(employee_number: str) -> dict:
            return {
                "submitted_by": users[employee_number].id,
                "submitted_by_employee_number": employee_number,
            }

        def reviewed(employee_number: str, days_ago: int, comments: str) -> dict:
            return {
                "reviewed_by": users[employee_number].id,
                "reviewed_at": now - timedelta(days=days_ago),
                "review_comments": comments,
            }

        ideas: dict[str, Idea] = {
            "assembly": Idea(
                title="Improve Assembly Line Efficiency",
                problem="Current assembly line has bottlenecks causing delays and reducing overall productivity",
                improvement="Reorganize workstations and implement lean principles to eliminate waste and improve flow",
                benefit="productivity",
                estimated_savings=50000,
                department="Manufacturing",
                status="approved",
                **submitted("22222"),
                **reviewed("67890", 5, "Excellent proposal with clear implementation plan"),
            ),
            "documents": Idea(
                title="Digital Document Management System",
                problem="Paper-based filing system is inefficient and prone to errors",
                improvement="Implement digital document management system with cloud storage and search capabilities",
                benefit="cost_saving",
                estimated_savings=25000,
                department="Administration",
                status="under_review",
                **submitted("12345"),
            ),
            "safety": Idea(
                title="Safety Equipment Upgrade",
                problem="Current safety equipment is outdated and not meeting new safety standards",
                improvement="Upgrade to modern safety equipment with better protection and comfort",
                benefit="safety",
                estimated_savings=15000,
                department="Manufacturing",
                status="implementing",
                **submitted("33333"),
                **reviewed("11111", 3, "Approved for implementation. Safety is our priority."),
            ),
            "quality": Idea(
                title="Quality Control Automation",
                problem="Manual quality checks are time-consuming and inconsistent",
                improvement="Implement automated quality control systems with real-time monitoring",
                benefit="quality",
                estimated_savings=75000,
                department="Quality",
                status="approved",
                **submitted("44444"),
                **reviewed("67890", 7, "Great idea! This will significantly improve our quality metrics."),
            ),
            "lighting": Idea(
                title="Energy Efficient Lighting",
                problem="Current lighting system consumes too much energy and increases operational costs",
                improvement="Replace with LED lighting system with motion sensors and smart controls",
                benefit="cost_saving",
                estimated_savings=30000,
                department="Engineering",
                status="implemented",
                implementation_date=now - timedelta(days=10),
                actual_savings=32000,
                **submitted("33333"),
                **reviewed("11111", 30, "Successfully implemented with even better results than expected!"),
            ),
        }
        db.add_all(ideas.values())
        await db.flush()  # flush로 idea.id 생성 (Flush to generate idea ids)

        db.add_all([
            Notification(
                recipient_id=users["22222"].id,
                recipient_employee_number="22222",
                type="idea_approved",
                title="Idea Approved",
                message='Your idea "Improve Assembly Line Efficiency" has been approved',
                related_idea_id=ideas["assembly"].id,
                is_read=False,
            ),
            Notification(
                recipient_id=users["33333"].id,
                recipient_employee_number="33333",
                type="idea_implementing",
                title="Idea Implementation Started",
                message='Your idea "Safety Equipment Upgrade" is now being implemented',
                related_idea_id=ideas["safety"].id,
                is_read=True,
                read_at=now - timedelta(days=1),
            ),
            Notification(
                recipient_id=users["33333"].id,
                recipient_employee_number="33333",
                type="idea_implemented",
                title="Idea Successfully Implemented",
                message='Your idea "Energy Efficient Lighting" has been successfully implemented',
                related_idea_id=ideas["lighting"].id,
                is_read=False,
            ),
        ])

        await db.commit()
        print(f"Seeded: {len(users)} users, {len(ideas)} ideas, 3 notifications")
        if settings.OTP_DEV_CODE:
            print(f"Demo login: 12345 / 67890 / 11111 with code {settings.OTP_DEV_CODE}")
        else:
            print("Set OTP_DEV_CODE to log in without email delivery")


if __name__ == "__main__":
    asyncio.run(seed())
