"""LoggingMiddleware -- 请求级日志

每个请求生成 request_id（ULID）并绑定到 structlog contextvars，
请求携带有效会话令牌时一并绑定 user_id；响应头 X-Request-ID 回传 request_id。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID


def _session_user_id(request: Request) -> str | None:
    registry = getattr(request.app.state, "sessions", None)
    if registry is None:
        return None
    user = registry.current_user(request)
    return user.id if user is not None else None


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(ULID())
        started = time.monotonic()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        if user_id := _session_user_id(request):
            structlog.contextvars.bind_contextvars(user_id=user_id)

        log = structlog.get_logger()
        await log.ainfo("request_started")

        response = await call_next(request)

        await log.ainfo(
            "request_completed",
            status_code=response.status_code,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        response.headers["X-Request-ID"] = request_id
        return response
