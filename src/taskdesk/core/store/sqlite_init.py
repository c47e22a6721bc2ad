"""SQLite 数据库初始化

PRAGMA 配置 + tasks 表 DDL + 索引 + REGEXP 函数注册。
使用 aiosqlite 异步操作。
"""

import re
from functools import lru_cache

import aiosqlite

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id          TEXT PRIMARY KEY,
    title       TEXT NOT NULL CHECK (length(title) > 0),
    description TEXT,
    due_date    TEXT,
    status      TEXT NOT NULL DEFAULT 'Pending'
                CHECK (status IN ('Pending', 'Completed')),
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at DESC);",
]


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def regexp(pattern: str, value: str | None) -> bool:
    """SQLite REGEXP 实现：`X REGEXP Y` 调用 regexp(Y, X)，非锚定、忽略大小写"""
    if value is None:
        return False
    return _compile(pattern).search(value) is not None


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 注册函数 + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 关键字搜索依赖 REGEXP 运算符
    await conn.create_function("REGEXP", 2, regexp, deterministic=True)

    await conn.execute(_TASKS_DDL)
    for idx_sql in _TASKS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()
