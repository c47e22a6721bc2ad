"""Task Desk Core Store -- SQLite 持久化实现

提供工厂函数按连接串建立共享数据库连接，返回 Store 实例组。
"""

from pathlib import Path

import aiosqlite

from ..config import resolve_db_path
from ..exceptions import StoreError
from .protocols import TaskStore
from .sqlite_init import init_db
from .task_store import SqliteTaskStore


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.task_store = SqliteTaskStore(conn)

    async def close(self) -> None:
        await self.conn.close()


async def create_store_group(database_url: str) -> StoreGroup:
    """按连接串建立连接并初始化 schema

    Args:
        database_url: Store 连接串（sqlite:///path 或文件路径）

    Returns:
        StoreGroup 实例

    Raises:
        ConfigError: 连接串格式不支持
        StoreError: 连接或初始化失败
    """
    db_path = resolve_db_path(database_url)

    try:
        if db_path != ":memory:":
            # 确保数据库目录存在
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(db_path)
    except (OSError, aiosqlite.Error) as e:
        raise StoreError(str(e), e) from e

    try:
        await init_db(conn)
    except aiosqlite.Error as e:
        await conn.close()
        raise StoreError(str(e), e) from e

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "TaskStore",
    "SqliteTaskStore",
    "init_db",
]
