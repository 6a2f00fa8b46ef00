"""TraceMiddleware -- 为任务 / 分类操作绑定实体 ID

从 /api/tasks/{task_id}、/api/categories/{category_id} 路径中提取 ID，
绑定到 structlog contextvars，贯穿该请求内的协调层日志。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# 路径段 -> contextvars 键
_ENTITY_SEGMENTS = {
    "tasks": "task_id",
    "categories": "category_id",
}


def extract_entity_ids(path: str) -> dict[str, str]:
    """从 /api/<collection>/<id>[/...] 路径提取实体 ID"""
    parts = [p for p in path.split("/") if p]
    found: dict[str, str] = {}
    for i, part in enumerate(parts[:-1]):
        key = _ENTITY_SEGMENTS.get(part)
        if key is not None and i > 0 and parts[i - 1] == "api":
            found[key] = parts[i + 1]
    return found


class TraceMiddleware(BaseHTTPMiddleware):
    """实体级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        entity_ids = extract_entity_ids(request.url.path)
        if entity_ids:
            structlog.contextvars.bind_contextvars(**entity_ids)
        return await call_next(request)
