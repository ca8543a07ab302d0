"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates all endpoints into a single router that
kaizen.main mounts under /api.

Included routers:
    - auth: 인증 (One-time code login, tokens, profile)
    - ideas: 아이디어 (Idea lifecycle and statistics)
    - notifications: 알림 (Caller's notifications)
    - users: 사용자 관리 + 리더보드 (User admin and leaderboards)
"""

from fastapi import APIRouter

from kaizen.api.auth import router as auth_router
from kaizen.api.ideas import router as ideas_router
from kaizen.api.notifications import router as notifications_router
from kaizen.api.users import router as users_router

api_router: APIRouter = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(ideas_router, prefix="/ideas", tags=["Ideas"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(users_router, prefix="/users", tags=["Users"])
