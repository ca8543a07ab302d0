"""테스트 인프라 — 테스트 DB 엔진, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Test DB engine, session, and httpx client fixtures.
Runs against in-memory SQLite (aiosqlite) by default; set
TEST_DATABASE_URL to run the same suite against PostgreSQL.
The schema is created before and dropped after each test.
"""

import os

# 앱 임포트 전에 환경 고정 — Pin settings before kaizen is imported
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")
os.environ["OTP_DEV_CODE"] = ""
os.environ["SMTP_USER"] = ""
os.environ["AXIOM_API_TOKEN"] = ""
os.environ["ENFORCE_STATUS_TRANSITIONS"] = "true"

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from kaizen.database import Base, get_db
from kaizen.main import app
from kaizen.models import *  # noqa: F401,F403 — register all models with metadata
from kaizen.models.idea import Idea
from kaizen.models.user import User
from kaizen.utils.jwt import create_access_token

TEST_DATABASE_URL: str = os.environ["DATABASE_URL"]


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 스키마를 생성/삭제합니다."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        eng = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        eng = create_async_engine(TEST_DATABASE_URL, echo=False, pool_pre_ping=True)

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_user(
    db: AsyncSession,
    employee_number: str,
    role: str = "employee",
    department: str = "Engineering",
    **overrides: Any,
) -> User:
    """테스트 사용자를 생성합니다."""
    values: dict[str, Any] = {
        "employee_number": employee_number,
        "name": f"User {employee_number}",
        "email": f"user{employee_number}@company.com",
        "department": department,
        "designation": "Engineer",
        "role": role,
        "is_active": True,
    }
    values.update(overrides)
    user = User(**values)
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def make_idea(db: AsyncSession, submitter: User, **overrides: Any) -> Idea:
    """테스트 아이디어를 생성합니다."""
    values: dict[str, Any] = {
        "title": "Reduce changeover time",
        "problem": "Line changeover takes too long",
        "improvement": "Pre-stage tooling next to the line",
        "benefit": "productivity",
        "estimated_savings": 1000.0,
        "department": submitter.department,
        "submitted_by": submitter.id,
        "submitted_by_employee_number": submitter.employee_number,
        "status": "under_review",
        "images": [],
        "tags": [],
        "priority": "medium",
        "is_active": True,
    }
    values.update(overrides)
    idea = Idea(**values)
    db.add(idea)
    await db.flush()
    await db.refresh(idea)
    return idea


@pytest_asyncio.fixture
async def employee(db: AsyncSession) -> User:
    """직원 사용자를 생성합니다."""
    return await make_user(db, "12345", name="John Doe", department="Engineering")


@pytest_asyncio.fixture
async def reviewer(db: AsyncSession) -> User:
    """검토자 사용자를 생성합니다."""
    return await make_user(db, "67890", role="reviewer", name="Jane Smith", department="Quality")


@pytest_asyncio.fixture
async def admin(db: AsyncSession) -> User:
    """관리자 사용자를 생성합니다."""
    return await make_user(db, "11111", role="admin", name="Admin User", department="Management")


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({
        "sub": str(user.id),
        "emp": user.employee_number,
        "role": user.role,
    })


@pytest.fixture
def employee_token(employee: User) -> str:
    return make_token(employee)


@pytest.fixture
def reviewer_token(reviewer: User) -> str:
    return make_token(reviewer)


@pytest.fixture
def admin_token(admin: User) -> str:
    return make_token(admin)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
