"""集合存储的 SQLite 通用实现

模型 <-> 行的映射是纯数据形状转换：
- 普通字段按列名一一对应（model_dump(mode="json") 的值直接落库）
- json_columns 中的字段以 JSON 文本存储（列表、审计条目）
双向转换对模型的每个字段都是完整且无损的。

每次写操作独立提交；aiosqlite 错误回滚后包装为 PersistenceError。
"""

import json
from typing import ClassVar, Generic, TypeVar

import aiosqlite
from pydantic import BaseModel

from ..exceptions import PersistenceError

M = TypeVar("M", bound=BaseModel)


class SqliteCollectionStore(Generic[M]):
    """CollectionStore 的 SQLite 实现基类

    子类声明 model / table / columns，按需声明 json_columns 与 order_by。
    """

    model: ClassVar[type[BaseModel]]
    table: ClassVar[str]
    columns: ClassVar[tuple[str, ...]]
    json_columns: ClassVar[frozenset[str]] = frozenset()
    order_by: ClassVar[str] = "rowid ASC"

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def select_all(self) -> list[M]:
        """读取全部记录"""
        try:
            cursor = await self._conn.execute(
                f"SELECT {', '.join(self.columns)} FROM {self.table} ORDER BY {self.order_by}"
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise PersistenceError("select_all", self.table, e) from e
        return [self._row_to_model(row) for row in rows]

    async def get(self, item_id: str) -> M | None:
        """根据 id 查询"""
        try:
            cursor = await self._conn.execute(
                f"SELECT {', '.join(self.columns)} FROM {self.table} WHERE id = ?",
                (item_id,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise PersistenceError("get", self.table, e) from e
        if row is None:
            return None
        return self._row_to_model(row)

    async def insert(self, item: M) -> None:
        """插入新记录"""
        placeholders = ", ".join("?" for _ in self.columns)
        await self._write(
            "insert",
            f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES ({placeholders})",
            self._model_to_row(item),
        )

    async def upsert(self, item: M) -> None:
        """按 id 插入或覆盖"""
        placeholders = ", ".join("?" for _ in self.columns)
        assignments = ", ".join(f"{c} = excluded.{c}" for c in self.columns if c != "id")
        await self._write(
            "upsert",
            f"""
            INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES ({placeholders})
            ON CONFLICT(id) DO UPDATE SET {assignments}
            """,
            self._model_to_row(item),
        )

    async def delete(self, item_id: str) -> bool:
        """按 id 删除"""
        cursor = await self._write(
            "delete",
            f"DELETE FROM {self.table} WHERE id = ?",
            (item_id,),
        )
        return cursor.rowcount > 0

    async def _write(
        self,
        operation: str,
        sql: str,
        params: tuple,
    ) -> aiosqlite.Cursor:
        """执行单条写语句并提交，失败时回滚"""
        try:
            cursor = await self._conn.execute(sql, params)
            await self._conn.commit()
            return cursor
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise PersistenceError(operation, self.table, e) from e

    def _model_to_row(self, item: M) -> tuple:
        data = item.model_dump(mode="json")
        return tuple(
            json.dumps(data[c], ensure_ascii=False) if c in self.json_columns else data[c]
            for c in self.columns
        )

    def _row_to_model(self, row: aiosqlite.Row) -> M:
        data = {}
        for index, column in enumerate(self.columns):
            value = row[index]
            if column in self.json_columns:
                value = json.loads(value) if value else []
            data[column] = value
        return self.model.model_validate(data)
