"""packages/core 测试配置 -- 领域对象工厂 + 内存 / 故障持久化协作方"""

from datetime import UTC, date, datetime

import pytest
import pytest_asyncio
from eventdesk.core.coordinator import EventCoordinator
from eventdesk.core.exceptions import PersistenceError
from eventdesk.core.models import Category, Phase, Priority, Status, Task, User, UserRole
from eventdesk.core.session import SessionContext

FIXED_NOW = datetime(2026, 2, 20, 9, 30, tzinfo=UTC)


def make_task(
    task_id: str = "task-1",
    category_id: str = "cat-001",
    progress: int = 0,
    status: Status = Status.NOT_STARTED,
    **kwargs,
) -> Task:
    return Task(
        id=task_id,
        category_id=category_id,
        title=kwargs.pop("title", f"Task {task_id}"),
        progress=progress,
        status=status,
        due_date=kwargs.pop("due_date", date(2026, 3, 1)),
        **kwargs,
    )


def make_category(
    category_id: str = "cat-001",
    phase: Phase = Phase.PRE_EVENT,
    progress: int = 0,
    status: Status = Status.NOT_STARTED,
    name: str | None = None,
) -> Category:
    return Category(
        id=category_id,
        name=name or f"Category {category_id}",
        phase=phase,
        responsible_persons=["Ms. Shalini"],
        progress=progress,
        status=status,
        due_date=date(2026, 3, 5),
        priority=Priority.HIGH,
    )


def make_user(
    user_id: str = "3",
    name: str = "Mr. Anmol",
    role: UserRole = UserRole.TEAM_MEMBER,
    password: str = "password123",
) -> User:
    return User(
        id=user_id,
        name=name,
        email=f"user{user_id}@example.com",
        role=role,
        department="Logistics",
        password=password,
    )


class FakeCollectionStore:
    """内存版 CollectionStore，记录每次写调用"""

    def __init__(self, rows=None) -> None:
        self.rows = {row.id: row for row in rows or []}
        self.calls: list[tuple[str, str]] = []

    async def select_all(self):
        return list(self.rows.values())

    async def get(self, item_id):
        return self.rows.get(item_id)

    async def insert(self, item) -> None:
        self.calls.append(("insert", item.id))
        self.rows[item.id] = item

    async def upsert(self, item) -> None:
        self.calls.append(("upsert", item.id))
        self.rows[item.id] = item

    async def delete(self, item_id) -> bool:
        self.calls.append(("delete", item_id))
        return self.rows.pop(item_id, None) is not None


class FailingCollectionStore(FakeCollectionStore):
    """写入总是失败的持久化协作方；fail_reads=True 时读取也失败"""

    def __init__(self, collection: str = "tasks", rows=None, fail_reads: bool = True) -> None:
        super().__init__(rows)
        self.collection = collection
        self.fail_reads = fail_reads

    def _fail(self, operation: str):
        return PersistenceError(operation, self.collection, OSError("disk I/O error"))

    async def select_all(self):
        if self.fail_reads:
            raise self._fail("select_all")
        return await super().select_all()

    async def insert(self, item) -> None:
        self.calls.append(("insert", item.id))
        raise self._fail("insert")

    async def upsert(self, item) -> None:
        self.calls.append(("upsert", item.id))
        raise self._fail("upsert")

    async def delete(self, item_id) -> bool:
        self.calls.append(("delete", item_id))
        raise self._fail("delete")


class FakeStores:
    """协调器所需的持久化协作方组合"""

    def __init__(self, task_store=None, category_store=None, user_store=None) -> None:
        self.task_store = task_store or FakeCollectionStore()
        self.category_store = category_store or FakeCollectionStore()
        self.user_store = user_store or FakeCollectionStore()


@pytest.fixture
def task_factory():
    return make_task


@pytest.fixture
def category_factory():
    return make_category


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def member() -> User:
    return make_user()


@pytest.fixture
def super_admin() -> User:
    return make_user("9", "Super Admin", role=UserRole.SUPER_ADMIN, password="admin123")


@pytest.fixture
def stores(member, super_admin) -> FakeStores:
    return FakeStores(
        task_store=FakeCollectionStore(
            [
                make_task("task-1", "cat-001", 40, Status.IN_PROGRESS, assigned_to=["Mr. Anmol"]),
                make_task("task-2", "cat-001", 60, Status.IN_PROGRESS),
            ]
        ),
        category_store=FakeCollectionStore(
            [
                make_category("cat-001", Phase.PRE_EVENT),
                make_category("cat-002", Phase.DURING_EVENT),
            ]
        ),
        user_store=FakeCollectionStore([member, super_admin]),
    )


@pytest_asyncio.fixture
async def coordinator(stores) -> EventCoordinator:
    coord = EventCoordinator(stores, clock=lambda: FIXED_NOW)
    await coord.hydrate()
    return coord


@pytest.fixture
def member_session(member) -> SessionContext:
    session = SessionContext()
    session.login(member)
    return session


@pytest.fixture
def admin_session(super_admin) -> SessionContext:
    session = SessionContext()
    session.login(super_admin)
    return session


@pytest.fixture
def fake_store_types():
    """(FakeCollectionStore, FailingCollectionStore, FakeStores)"""
    return FakeCollectionStore, FailingCollectionStore, FakeStores
