"""依赖注入模块 -- 通过 FastAPI Depends 注入协调器、会话与服务实例

实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from eventdesk.core.coordinator import EventCoordinator
from eventdesk.core.session import SessionContext
from eventdesk.core.store import StoreGroup
from fastapi import Request

from .services.agenda_service import AgendaService
from .services.insight_service import InsightService
from .services.session_registry import SessionRegistry


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_coordinator(request: Request) -> EventCoordinator:
    """从 app.state 获取 EventCoordinator 实例"""
    return request.app.state.coordinator


def get_session_registry(request: Request) -> SessionRegistry:
    """从 app.state 获取 SessionRegistry 实例"""
    return request.app.state.sessions


def get_session(request: Request) -> SessionContext:
    """按请求携带的会话令牌解析当前客户端的会话"""
    return request.app.state.sessions.resolve(request)


def get_insight_service(request: Request) -> InsightService:
    """从 app.state 获取 InsightService 实例"""
    return request.app.state.insight_service


def get_agenda_service(request: Request) -> AgendaService:
    """基于当前 StoreGroup + 协调器构造 AgendaService"""
    return AgendaService(request.app.state.store_group, request.app.state.coordinator)
