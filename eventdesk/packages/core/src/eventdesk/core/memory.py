"""内存存储 -- 本次会话的权威数据

只由 EventCoordinator 写入；读取方拿到的是列表副本。
插入顺序即展示顺序，替换已有 id 时保持原位置。
"""

from collections.abc import Iterable
from typing import Generic, TypeVar

from .models.category import Category
from .models.task import Task
from .models.user import User

T = TypeVar("T", Task, Category, User)


class _InMemoryCollection(Generic[T]):
    """按 id 索引、保持插入顺序的集合"""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: dict[str, T] = {}
        self.replace_all(items)

    def replace_all(self, items: Iterable[T]) -> None:
        self._items = {item.id: item for item in items}

    def all(self) -> list[T]:
        return list(self._items.values())

    def get(self, item_id: str) -> T | None:
        return self._items.get(item_id)

    def put(self, item: T) -> None:
        self._items[item.id] = item

    def remove(self, item_id: str) -> T | None:
        return self._items.pop(item_id, None)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)


class InMemoryTaskStore(_InMemoryCollection[Task]):
    """任务存储"""

    def for_category(self, category_id: str) -> list[Task]:
        return [t for t in self._items.values() if t.category_id == category_id]


class InMemoryCategoryStore(_InMemoryCollection[Category]):
    """分类存储"""


class InMemoryUserDirectory(_InMemoryCollection[User]):
    """成员目录"""

    def has_super_admin(self) -> bool:
        return any(u.is_super_admin for u in self._items.values())
