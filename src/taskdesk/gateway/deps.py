"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store / TaskService

StoreGroup 在 lifespan 中创建并挂在 app.state 上，测试可直接替换。
"""

from fastapi import Depends, Request
from taskdesk.core.store import StoreGroup

from .services.task_service import TaskService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_task_service(store_group: StoreGroup = Depends(get_store_group)) -> TaskService:
    """基于共享连接构造 TaskService（无状态，按请求创建）"""
    return TaskService(store_group.task_store)
