"""SQLite 数据库初始化

PRAGMA 配置 + 六张集合表 DDL + 索引创建。
列表字段以 JSON 文本存储，日期 / 时间以 ISO 字符串存储。
集合之间不建外键：分类删除不在支持范围内，任务引用由协调层校验。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id                TEXT PRIMARY KEY,
    category_id       TEXT NOT NULL,
    title             TEXT NOT NULL DEFAULT '',
    description       TEXT NOT NULL DEFAULT '',
    assigned_to       TEXT NOT NULL DEFAULT '[]',
    status            TEXT NOT NULL DEFAULT 'not-started',
    progress          INTEGER NOT NULL DEFAULT 0,
    due_date          TEXT NOT NULL,
    updates           TEXT NOT NULL DEFAULT '[]',
    schedule_item_id  TEXT,
    attachments       TEXT NOT NULL DEFAULT '[]'
);
"""

# categories 表 DDL -- progress / status 为创建时的存储值
_CATEGORIES_DDL = """
CREATE TABLE IF NOT EXISTS categories (
    id                   TEXT PRIMARY KEY,
    name                 TEXT NOT NULL DEFAULT '',
    phase                TEXT NOT NULL,
    responsible_persons  TEXT NOT NULL DEFAULT '[]',
    progress             INTEGER NOT NULL DEFAULT 0,
    status               TEXT NOT NULL DEFAULT 'not-started',
    due_date             TEXT NOT NULL,
    priority             TEXT NOT NULL DEFAULT 'medium'
);
"""

_USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    email       TEXT NOT NULL,
    role        TEXT NOT NULL DEFAULT 'team-member',
    department  TEXT NOT NULL DEFAULT '',
    password    TEXT NOT NULL DEFAULT ''
);
"""

_SCHEDULE_DDL = """
CREATE TABLE IF NOT EXISTS schedule (
    id             TEXT PRIMARY KEY,
    s_no           INTEGER NOT NULL,
    time           TEXT NOT NULL DEFAULT '',
    event_transit  TEXT NOT NULL DEFAULT '',
    duration       TEXT NOT NULL DEFAULT ''
);
"""

_ATTENDEES_DDL = """
CREATE TABLE IF NOT EXISTS attendees (
    id                TEXT PRIMARY KEY,
    name              TEXT NOT NULL,
    designation       TEXT NOT NULL DEFAULT 'N/A',
    organization      TEXT NOT NULL DEFAULT 'N/A',
    seating_category  TEXT NOT NULL DEFAULT 'General',
    def_touchpoint    TEXT NOT NULL DEFAULT 'N/A',
    invited_by        TEXT NOT NULL DEFAULT '',
    created_at        TEXT NOT NULL
);
"""

_GALLERY_DDL = """
CREATE TABLE IF NOT EXISTS gallery (
    id                TEXT PRIMARY KEY,
    task_id           TEXT NOT NULL,
    schedule_item_id  TEXT,
    uploaded_by       TEXT NOT NULL DEFAULT '',
    photo_data        TEXT NOT NULL,
    created_at        TEXT NOT NULL
);
"""

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_category_id ON tasks(category_id);",
    "CREATE INDEX IF NOT EXISTS idx_schedule_s_no ON schedule(s_no);",
    "CREATE INDEX IF NOT EXISTS idx_attendees_created_at ON attendees(created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_gallery_created_at ON gallery(created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_gallery_task_id ON gallery(task_id);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表
    for ddl in (
        _TASKS_DDL,
        _CATEGORIES_DDL,
        _USERS_DDL,
        _SCHEDULE_DDL,
        _ATTENDEES_DDL,
        _GALLERY_DDL,
    ):
        await conn.execute(ddl)

    # 创建索引
    for idx_sql in _INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
