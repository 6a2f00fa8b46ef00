"""TaskStore / CategoryStore SQLite 实现

任务审计记录以 newest-first 的 JSON 数组整体存储。
分类只保存创建时给定的 progress / status，推导值不回写。
"""

from ..models.category import Category
from ..models.task import Task
from .collection import SqliteCollectionStore


class SqliteTaskStore(SqliteCollectionStore[Task]):
    """tasks 集合"""

    model = Task
    table = "tasks"
    columns = (
        "id",
        "category_id",
        "title",
        "description",
        "assigned_to",
        "status",
        "progress",
        "due_date",
        "updates",
        "schedule_item_id",
        "attachments",
    )
    json_columns = frozenset({"assigned_to", "updates", "attachments"})


class SqliteCategoryStore(SqliteCollectionStore[Category]):
    """categories 集合"""

    model = Category
    table = "categories"
    columns = (
        "id",
        "name",
        "phase",
        "responsible_persons",
        "progress",
        "status",
        "due_date",
        "priority",
    )
    json_columns = frozenset({"responsible_persons"})
