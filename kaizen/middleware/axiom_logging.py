"""요청 로깅 미들웨어 — 표준 로거 + Axiom 전송.

Request logging middleware.
Logs every API request through the module logger and, when
AXIOM_API_TOKEN and AXIOM_DATASET are set, ships a structured event to
Axiom. Logged fields: method, path, params, masked body, status code,
duration and error message. Sensitive fields (otp, code, token, secret)
are masked.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from kaizen.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies and query params
_SENSITIVE_KEYS = re.compile(
    r"(otp|code|password|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(k) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return data


def _truncate(value: Any, max_len: int = 2000) -> Any:
    """로그 크기 제한 — Truncate large values to prevent oversized logs."""
    if isinstance(value, str) and len(value) > max_len:
        return value[:max_len] + "...(truncated)"
    return value


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청을 로깅하고 Axiom에 전송하는 미들웨어.

    Middleware that logs all API requests and, if configured, sends them
    to Axiom.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        """요청 본문을 읽어 마스킹 — Read and mask a JSON request body."""
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        body_bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return _truncate(_mask_dict(json.loads(body_bytes)))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.time()
        method = request.method
        path = request.url.path
        query_params = dict(request.query_params) if request.query_params else None
        request_body: Any = await self._read_body(request) if self._client else None

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 — Extract the envelope message from error responses
            if status_code >= 400 and self._client:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

                try:
                    error_data = json.loads(resp_body)
                    error_detail = str(error_data.get("message", error_data))[:500]
                except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
                    error_detail = resp_body.decode("utf-8", errors="replace")[:500]

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            duration_ms = round((time.time() - start_time) * 1000, 2)
            logger.info("%s %s -> %s (%.2f ms)", method, path, status_code, duration_ms)

            if self._client:
                log_event: dict[str, Any] = {
                    "app": settings.APP_NAME,
                    "method": method,
                    "path": path,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                }
                if query_params:
                    log_event["query_params"] = _mask_dict(query_params)
                if request_body is not None:
                    log_event["request_body"] = request_body
                if error_detail:
                    log_event["error"] = error_detail

                try:
                    self._client.ingest_events(self._dataset, [log_event])
                except Exception:
                    # 로깅 실패는 요청 처리에 영향 없음 — Log shipping never breaks a request
                    logger.warning("Failed to ship request log to Axiom", exc_info=True)

        return response
