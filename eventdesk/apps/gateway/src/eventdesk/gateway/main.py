"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭、协调器加载、会话表、AI 组件初始化、路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from eventdesk.core.config import (
    get_activity_limit,
    get_db_path,
    get_event_date,
    get_event_title,
    load_phase_weights,
)
from eventdesk.core.coordinator import EventCoordinator
from eventdesk.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    EventDeskError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from eventdesk.core.store import create_store_group
from eventdesk.provider import (
    EchoMessageAdapter,
    FallbackManager,
    LiteLLMClient,
    load_provider_config,
)
from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import agenda, categories, dashboard, health, insights, session, tasks, team
from .services.insight_service import InsightService
from .services.session_registry import SessionRegistry

log = structlog.get_logger()

# 按 MRO 顺序匹配，子类在前
_STATUS_BY_ERROR: tuple[tuple[type[EventDeskError], int], ...] = (
    (NotFoundError, 404),
    (ValidationError, 422),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (PersistenceError, 503),
)


def status_for_error(exc: EventDeskError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def eventdesk_error_handler(request: Request, exc: EventDeskError) -> JSONResponse:
    """领域异常 -> {"error": {"code", "message"}}"""
    status_code = status_for_error(exc)
    if status_code >= 500:
        log.warning("request_failed", code=exc.code, error=exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": exc.code, "message": exc.message}},
    )


def build_insight_service(app: FastAPI) -> InsightService:
    """根据 Provider 配置选择 LiteLLM 或离线 Echo 模式"""
    provider_config = load_provider_config()
    app.state.provider_config = provider_config

    if provider_config.llm_mode == "litellm":
        litellm_client = LiteLLMClient(
            proxy_base_url=provider_config.proxy_base_url,
            proxy_api_key=provider_config.proxy_api_key.get_secret_value(),
            timeout_s=provider_config.timeout_s,
        )
        # 不降级到 Echo：调用失败时由 InsightService 返回兜底文案
        fallback_manager = FallbackManager(primary=litellm_client, fallback=None)
        # 保存 litellm_client 引用供健康检查使用
        app.state.litellm_client = litellm_client
        log.info(
            "insight_service_initialized",
            mode="litellm",
            proxy_url=provider_config.proxy_base_url,
            timeout_s=provider_config.timeout_s,
        )
    else:
        fallback_manager = FallbackManager(primary=EchoMessageAdapter(), fallback=None)
        app.state.litellm_client = None
        log.info("insight_service_initialized", mode="echo")

    return InsightService(
        fallback_manager=fallback_manager,
        model_alias=provider_config.model_alias,
        event_title=get_event_title(),
        event_date=get_event_date(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时加载数据，关闭时等待持久化转发并关闭连接"""
    store_group = await create_store_group(get_db_path())
    app.state.store_group = store_group

    coordinator = EventCoordinator(
        store_group,
        load_phase_weights(),
        event_date=get_event_date(),
        activity_limit=get_activity_limit(),
    )
    await coordinator.hydrate()
    app.state.coordinator = coordinator

    app.state.sessions = SessionRegistry()

    app.state.insight_service = build_insight_service(app)

    yield

    await coordinator.drain()
    await store_group.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="EventDesk Gateway",
        version="0.1.0",
        description="EventDesk 活动看板 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(EventDeskError, eventdesk_error_handler)

    # 初始化日志
    setup_logging()
    setup_logfire(app)

    # 注册路由
    app.include_router(session.router, tags=["session"])
    app.include_router(dashboard.router, tags=["dashboard"])
    app.include_router(categories.router, tags=["categories"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(team.router, tags=["team"])
    app.include_router(agenda.router, tags=["agenda"])
    app.include_router(insights.router, tags=["insights"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
