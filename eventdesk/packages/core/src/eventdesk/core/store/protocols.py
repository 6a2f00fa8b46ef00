"""Store Protocol 接口定义

持久化协作方对每个集合暴露同一组操作：全量读取、插入、按 id 覆盖写、按 id 删除。
使用 Python Protocol 实现结构化子类型（duck typing），
测试中可用任意实现了这些方法的对象替换 SQLite 实现。
"""

from typing import Protocol, TypeVar

from pydantic import BaseModel

M = TypeVar("M", bound=BaseModel)


class CollectionStore(Protocol[M]):
    """集合存储接口"""

    async def select_all(self) -> list[M]:
        """读取集合内全部记录（按集合约定的顺序）"""
        ...

    async def get(self, item_id: str) -> M | None:
        """根据 id 查询单条记录"""
        ...

    async def insert(self, item: M) -> None:
        """插入新记录，id 冲突时失败"""
        ...

    async def upsert(self, item: M) -> None:
        """按 id 插入或覆盖"""
        ...

    async def delete(self, item_id: str) -> bool:
        """按 id 删除，返回是否删除了记录"""
        ...
