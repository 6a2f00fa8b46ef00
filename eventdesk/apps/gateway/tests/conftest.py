"""apps/gateway 测试配置 -- FastAPI app + httpx AsyncClient

ASGITransport 不触发 lifespan，这里手动初始化 app.state。
"""

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


@pytest_asyncio.fixture
async def test_app(tmp_path: Path):
    """已加载种子数据的测试 app"""
    os.environ["EVENTDESK_DB_PATH"] = str(tmp_path / "sqlite" / "test.db")
    os.environ["EVENTDESK_SESSION_PATH"] = str(tmp_path / "session.json")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from eventdesk.gateway.main import create_app

    app = create_app()

    # 手动初始化（绕过 lifespan）
    store_group = await create_store_group(tmp_path / "sqlite" / "test.db")
    coordinator = EventCoordinator(store_group)
    await coordinator.hydrate()
    app.state.store_group = store_group
    app.state.coordinator = coordinator
    app.state.sessions = SessionRegistry()
    app.state.insight_service = InsightService()
    app.state.litellm_client = None

    yield app

    await coordinator.drain()
    await store_group.close()
    for key in _ENV_KEYS:
        os.environ.pop(key, None)


@pytest.fixture
def make_client(test_app):
    """构造一个独立的客户端（各自持有 Cookie）"""

    def _make() -> AsyncClient:
        return AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test")

    return _make


@pytest_asyncio.fixture
async def client(make_client) -> AsyncGenerator[AsyncClient, None]:
    """未登录的客户端"""
    async with make_client() as ac:
        yield ac


@pytest_asyncio.fixture
async def member_client(client: AsyncClient) -> AsyncClient:
    """以普通成员（Mr. Anmol）登录"""
    resp = await client.post("/api/session", json={"user_id": "3", "password": "password123"})
    assert resp.status_code == 200
    return client


@pytest_asyncio.fixture
async def admin_client(client: AsyncClient) -> AsyncClient:
    """以 super-admin 登录"""
    resp = await client.post("/api/session", json={"user_id": "9", "password": "admin123"})
    assert resp.status_code == 200
    return client
