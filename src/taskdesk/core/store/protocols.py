"""Store Protocol 接口定义

TaskService 只依赖此接口，测试中可替换为内存实现。
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Any, Protocol

from ..models.task import Task, TaskCreate


class TaskStore(Protocol):
    """Task 文档集合接口

    find_by_id / update / delete 对非法 id 抛出 InvalidIdentifierError，
    其余底层失败统一抛出 StoreError。
    """

    async def find_all(self) -> list[Task]:
        """查询全部任务，按创建时间倒序"""
        ...

    async def find_by_id(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        ...

    async def find(self, status: str) -> list[Task]:
        """按 status 精确匹配查询（不校验取值）"""
        ...

    async def search(self, pattern: str) -> list[Task]:
        """title 或 description 匹配正则片段（忽略大小写）"""
        ...

    async def insert(self, data: TaskCreate) -> Task:
        """插入新任务，生成 id 与时间戳"""
        ...

    async def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        """替换指定字段并刷新 updated_at，任务不存在时返回 None"""
        ...

    async def delete(self, task_id: str) -> bool:
        """删除任务，返回是否命中"""
        ...

    async def delete_many(self, status: str) -> int:
        """删除所有指定状态的任务，返回删除数量"""
        ...

    async def ping(self) -> None:
        """连通性检查"""
        ...
