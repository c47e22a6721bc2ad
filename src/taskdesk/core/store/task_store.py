"""TaskStore SQLite 实现

以 tasks 表模拟文档集合：每个方法对应一次集合操作，写操作单语句提交。
aiosqlite / sqlite3 抛出的错误统一转换为 StoreError，保留原始错误文本。
"""

import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import aiosqlite
import structlog
from ulid import ULID

from ..exceptions import InvalidIdentifierError, StoreError
from ..models.enums import TaskStatus
from ..models.task import Task, TaskCreate

log = structlog.get_logger()

# Crockford base32，首字符不超过 7（128 位上限）
_ULID_RE = re.compile(r"[0-7][0-9A-HJKMNP-TV-Z]{25}", re.IGNORECASE)

_COLUMNS = "id, title, description, due_date, status, created_at, updated_at"

# 可通过 update 修改的列（id / created_at 不可变）
_UPDATABLE_COLUMNS = ("title", "description", "due_date", "status")


def _now() -> datetime:
    return datetime.now(UTC)


def _to_db(value: Any) -> Any:
    """将模型字段转换为 SQLite 列值"""
    if isinstance(value, datetime):
        return value.astimezone(UTC).isoformat(timespec="microseconds")
    if isinstance(value, TaskStatus):
        return value.value
    return value


def _check_id(task_id: str) -> str:
    """id 必须是合法 ULID，否则视为 Store 层 cast 错误；返回大写规范形式"""
    if not _ULID_RE.fullmatch(task_id):
        raise InvalidIdentifierError(task_id)
    return task_id.upper()


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def find_all(self) -> list[Task]:
        """查询全部任务，按 created_at 倒序"""
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at DESC, rowid DESC"
        )

    async def find_by_id(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        task_id = _check_id(task_id)
        async with self._errors():
            cursor = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = ?",
                (task_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_task(row)

    async def find(self, status: str) -> list[Task]:
        """按 status 精确匹配查询，保持插入顺序"""
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM tasks WHERE status = ? ORDER BY rowid",
            (status,),
        )

    async def search(self, pattern: str) -> list[Task]:
        """title 或 description 匹配正则片段（忽略大小写、非锚定）"""
        try:
            re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise StoreError(f"Invalid regular expression: /{pattern}/: {e}", e) from e
        return await self._fetch_all(
            f"""
            SELECT {_COLUMNS} FROM tasks
            WHERE title REGEXP ? OR description REGEXP ?
            ORDER BY rowid
            """,
            (pattern, pattern),
        )

    async def insert(self, data: TaskCreate) -> Task:
        """插入新任务，生成 id 与 created_at / updated_at"""
        now = _now()
        task = Task(
            id=str(ULID()),
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            status=data.status,
            created_at=now,
            updated_at=now,
        )
        async with self._transaction():
            await self._conn.execute(
                f"INSERT INTO tasks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    task.id,
                    task.title,
                    task.description,
                    _to_db(task.due_date),
                    _to_db(task.status),
                    _to_db(task.created_at),
                    _to_db(task.updated_at),
                ),
            )
        return task

    async def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        """替换提交的字段并刷新 updated_at

        updated_at 取当前时间与原值中较大者，保证单调不回退。
        """
        task_id = _check_id(task_id)
        columns = [col for col in _UPDATABLE_COLUMNS if col in changes]
        assignments = [f"{col} = ?" for col in columns]
        assignments.append("updated_at = MAX(?, updated_at)")
        params = [_to_db(changes[col]) for col in columns]
        params.extend([_to_db(_now()), task_id])

        async with self._transaction():
            cursor = await self._conn.execute(
                f"UPDATE tasks SET {', '.join(assignments)} WHERE id = ? RETURNING {_COLUMNS}",
                params,
            )
            row = await cursor.fetchone()
            await cursor.close()
        if row is None:
            return None
        return self._row_to_task(row)

    async def delete(self, task_id: str) -> bool:
        """删除任务，返回是否命中"""
        task_id = _check_id(task_id)
        async with self._transaction():
            cursor = await self._conn.execute(
                "DELETE FROM tasks WHERE id = ?",
                (task_id,),
            )
        return cursor.rowcount > 0

    async def delete_many(self, status: str) -> int:
        """删除所有指定状态的任务，返回删除数量"""
        async with self._transaction():
            cursor = await self._conn.execute(
                "DELETE FROM tasks WHERE status = ?",
                (status,),
            )
        return cursor.rowcount

    async def ping(self) -> None:
        """连通性检查"""
        async with self._errors():
            cursor = await self._conn.execute("SELECT 1")
            await cursor.fetchone()

    async def _fetch_all(self, sql: str, params: tuple = ()) -> list[Task]:
        async with self._errors():
            cursor = await self._conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_task(row) for row in rows]

    @asynccontextmanager
    async def _errors(self) -> AsyncIterator[None]:
        """将底层数据库错误转换为 StoreError"""
        try:
            yield
        except (aiosqlite.Error, ValueError) as e:
            log.warning("store_error", error=str(e))
            raise StoreError(str(e), e) from e

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[None]:
        """单语句写事务：成功提交，失败回滚后抛出 StoreError"""
        try:
            yield
            await self._conn.commit()
        except (aiosqlite.Error, ValueError) as e:
            log.warning("store_error", error=str(e))
            try:
                await self._conn.rollback()
            except (aiosqlite.Error, ValueError) as rollback_error:
                log.warning("store_rollback_failed", error=str(rollback_error))
            raise StoreError(str(e), e) from e

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            id=row[0],
            title=row[1],
            description=row[2],
            due_date=datetime.fromisoformat(row[3]) if row[3] else None,
            status=row[4],
            created_at=datetime.fromisoformat(row[5]),
            updated_at=datetime.fromisoformat(row[6]),
        )
