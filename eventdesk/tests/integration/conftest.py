"""集成测试共享 fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from eventdesk.core.coordinator import EventCoordinator
from eventdesk.core.store import create_store_group
from eventdesk.gateway.services.insight_service import InsightService
from eventdesk.gateway.services.session_registry import SessionRegistry
from httpx import ASGITransport, AsyncClient

_ENV_KEYS = ("EVENTDESK_DB_PATH", "EVENTDESK_SESSION_PATH", "LOGFIRE_SEND_TO_LOGFIRE")


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "sqlite" / "eventdesk.db"


@pytest_asyncio.fixture
async def app_factory(tmp_path: Path, db_path: Path):
    """按需构造共享同一数据库的 app（模拟进程重启）

    返回的协程函数每次调用都新建 StoreGroup + 协调器并完成加载。
    """
    os.environ["EVENTDESK_DB_PATH"] = str(db_path)
    os.environ["EVENTDESK_SESSION_PATH"] = str(tmp_path / "session.json")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from eventdesk.gateway.main import create_app

    opened = []

    async def build():
        app = create_app()
        store_group = await create_store_group(db_path)
        coordinator = EventCoordinator(store_group)
        await coordinator.hydrate()
        app.state.store_group = store_group
        app.state.coordinator = coordinator
        app.state.sessions = SessionRegistry()
        app.state.insight_service = InsightService()
        app.state.litellm_client = None
        opened.append(app)
        return app

    yield build

    for app in opened:
        await app.state.coordinator.drain()
        await app.state.store_group.close()
    for key in _ENV_KEYS:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def integration_app(app_factory):
    """集成测试用 FastAPI app"""
    return await app_factory()


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
