"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性、协调器加载状态、磁盘空间；
         profile=llm/full 时追加 LiteLLM Proxy 健康检查。
"""

import shutil

import structlog
from fastapi import APIRouter, Query, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(
    request: Request,
    profile: str | None = Query(
        default=None,
        description="检查配置文件：core（默认）仅核心检查；llm/full 包含 LiteLLM Proxy 健康检查",
    ),
):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性
    2. hydrated: 协调器是否已完成启动加载
    3. disk_space_mb: 磁盘剩余空间
    4. litellm_proxy: 根据 profile 决定是否探测 Proxy
    """
    effective_profile = profile or "core"

    checks = {}
    all_ok = True

    # 1. SQLite 连通性检查
    try:
        store_group = request.app.state.store_group
        cursor = await store_group.conn.execute("SELECT 1")
        await cursor.fetchone()
        checks["sqlite"] = "ok"
    except Exception as e:
        # 不向调用方暴露底层错误细节
        log.warning("readiness_sqlite_failed", error=str(e), error_type=type(e).__name__)
        checks["sqlite"] = "unavailable"
        all_ok = False

    # 2. 协调器加载状态
    coordinator = getattr(request.app.state, "coordinator", None)
    if coordinator is not None and coordinator.ready:
        checks["hydrated"] = "ok"
    else:
        checks["hydrated"] = "pending"
        all_ok = False

    # 3. 磁盘空间检查
    try:
        disk_usage = shutil.disk_usage("/")
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    # 4. LiteLLM Proxy 健康检查
    if effective_profile in ("llm", "full"):
        litellm_client = getattr(request.app.state, "litellm_client", None)
        if litellm_client is not None:
            try:
                proxy_healthy = await litellm_client.health_check()
            except Exception as e:
                log.warning("health_check_error", error=str(e))
                proxy_healthy = False
            checks["litellm_proxy"] = "ok" if proxy_healthy else "unreachable"
            all_ok = all_ok and proxy_healthy
        else:
            # Echo 模式：无 litellm_client，跳过探测
            checks["litellm_proxy"] = "skipped"
    else:
        checks["litellm_proxy"] = "skipped"

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "profile": effective_profile,
            "checks": checks,
        },
    )
