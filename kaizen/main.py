"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 처리, 라우터 등록.

FastAPI application entry point — Middleware, exception handlers and
router registration. Every response, success or error, uses the
{success, message?, data?} envelope.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from kaizen.api import api_router
from kaizen.config import settings
from kaizen.middleware.axiom_logging import AxiomLoggingMiddleware
from kaizen.schemas.common import fail
from kaizen.utils.exceptions import StoreError

# 로깅 설정 — Root logging configuration from LOG_LEVEL
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# 요청 로깅 미들웨어 — Request logging (stdlib logger + Axiom)
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# 예외 처리기 — Exception handlers rendering the error envelope
# ---------------------------------------------------------------------------

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """HTTPException(및 커스텀 하위 클래스) → {success: false, message}."""
    return JSONResponse(
        status_code=exc.status_code,
        content=fail(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 스키마 검증 실패 → 400 + 필드별 상세 (Field-level details)."""
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content=fail("Validation failed", details))


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """저장소 오류 → 500, 메시지는 불투명하게 유지하고 traceback은 로깅."""
    logger.error(
        "Store error on %s %s", request.method, request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    error = StoreError()
    return JSONResponse(status_code=error.status_code, content=fail(error.detail))


@app.get("/health")
@app.get("/api/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
app.include_router(api_router, prefix="/api")
