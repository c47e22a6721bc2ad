"""TaskService -- 任务增删改查业务逻辑

每个操作至多一次 Store 调用。客户端输入在调用 Store 之前显式校验，
校验失败抛出 TaskValidationError，不会以 500 形式暴露。
"""

from typing import Any

import structlog
from pydantic import ValidationError
from taskdesk.core.exceptions import TaskNotFoundError, TaskValidationError
from taskdesk.core.models import (
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    format_validation_error,
    is_valid_status,
)
from taskdesk.core.store import TaskStore

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(self, task_store: TaskStore) -> None:
        self._store = task_store

    async def list_tasks(self) -> list[Task]:
        """查询全部任务，最新创建的在前"""
        return await self._store.find_all()

    async def get_task(self, task_id: str) -> Task:
        """查询单个任务

        Raises:
            TaskNotFoundError: 任务不存在
            StoreError: id 非法或 Store 故障
        """
        task = await self._store.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def create_task(self, body: dict[str, Any]) -> Task:
        """校验请求体并创建任务（status 缺省 Pending）"""
        try:
            data = TaskCreate.model_validate(body)
        except ValidationError as e:
            raise TaskValidationError(format_validation_error(e)) from e

        task = await self._store.insert(data)
        log.info("task_created", task_id=task.id, status=task.status.value)
        return task

    async def update_task(self, task_id: str, body: dict[str, Any]) -> Task:
        """部分替换：只更新请求体中出现的字段"""
        try:
            changes = TaskUpdate.model_validate(body).changes()
        except ValidationError as e:
            raise TaskValidationError(format_validation_error(e)) from e

        task = await self._store.update(task_id, changes)
        if task is None:
            raise TaskNotFoundError(task_id)
        log.info("task_updated", task_id=task_id, fields=sorted(changes))
        return task

    async def update_status(self, task_id: str, status: Any) -> Task:
        """仅更新 status，取值必须属于枚举（先校验后访问 Store）"""
        if not is_valid_status(status):
            raise TaskValidationError("Invalid status value")

        task = await self._store.update(task_id, {"status": TaskStatus(status)})
        if task is None:
            raise TaskNotFoundError(task_id)
        log.info("task_status_changed", task_id=task_id, status=status)
        return task

    async def delete_task(self, task_id: str) -> None:
        """删除单个任务"""
        deleted = await self._store.delete(task_id)
        if not deleted:
            raise TaskNotFoundError(task_id)
        log.info("task_deleted", task_id=task_id)

    async def filter_by_status(self, status: str) -> list[Task]:
        """按 status 原样过滤 -- 不做枚举校验，未知取值返回空列表"""
        return await self._store.find(status)

    async def search(self, keyword: str) -> list[Task]:
        """title / description 关键字搜索，keyword 作为正则片段原样传递"""
        return await self._store.search(keyword)

    async def delete_completed(self) -> int:
        """批量删除所有 Completed 任务，返回删除数量"""
        count = await self._store.delete_many(TaskStatus.COMPLETED.value)
        log.info("completed_tasks_deleted", count=count)
        return count
