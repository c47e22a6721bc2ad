"""任务路由 -- /api/v1/tasks

GET    /tasks                   全部任务（创建时间倒序）
GET    /tasks/{task_id}         单个任务
POST   /tasks                   创建任务
PUT    /tasks/{task_id}         部分替换字段
PATCH  /tasks/{task_id}/status  仅更新 status
DELETE /tasks/{task_id}         删除单个任务
GET    /tasks/status/{status}   按 status 过滤
GET    /tasks/search/{keyword}  title / description 关键字搜索
DELETE /tasks                   删除全部 Completed 任务

成功时直接返回 Task（或数组），失败统一返回 {"message": ...}。
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from starlette.responses import JSONResponse
from taskdesk.core.exceptions import StoreError, TaskNotFoundError, TaskValidationError
from taskdesk.core.models import Task

from ..deps import get_task_service
from ..services.task_service import TaskService

router = APIRouter(prefix="/api/v1")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _task_response(task: Task, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=task.to_document())


def _list_response(tasks: list[Task]) -> JSONResponse:
    return JSONResponse(status_code=200, content=[t.to_document() for t in tasks])


@router.get("/tasks")
async def list_tasks(service: TaskService = Depends(get_task_service)):
    """查询全部任务，最新创建的在前"""
    try:
        tasks = await service.list_tasks()
    except StoreError as e:
        return _error(500, e.message)
    return _list_response(tasks)


@router.get("/tasks/status/{status}")
async def filter_tasks_by_status(
    status: str,
    service: TaskService = Depends(get_task_service),
):
    """按 status 过滤，未知取值返回空数组"""
    try:
        tasks = await service.filter_by_status(status)
    except StoreError as e:
        return _error(500, e.message)
    return _list_response(tasks)


@router.get("/tasks/search/{keyword}")
async def search_tasks(
    keyword: str,
    service: TaskService = Depends(get_task_service),
):
    """title 或 description 包含 keyword（忽略大小写）"""
    try:
        tasks = await service.search(keyword)
    except StoreError as e:
        return _error(500, e.message)
    return _list_response(tasks)


@router.get("/tasks/{task_id}")
async def get_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    """查询单个任务；id 非法属于 Store 错误，返回 500"""
    try:
        task = await service.get_task(task_id)
    except TaskNotFoundError as e:
        return _error(404, e.message)
    except StoreError as e:
        return _error(500, e.message)
    return _task_response(task)


@router.post("/tasks")
async def create_task(
    body: dict[str, Any] | None = Body(default=None),
    service: TaskService = Depends(get_task_service),
):
    """创建任务 -- 201 Created"""
    try:
        task = await service.create_task(body or {})
    except TaskValidationError as e:
        return _error(400, e.message)
    except StoreError as e:
        return _error(500, e.message)
    return _task_response(task, status_code=201)


@router.put("/tasks/{task_id}")
async def update_task(
    task_id: str,
    body: dict[str, Any] | None = Body(default=None),
    service: TaskService = Depends(get_task_service),
):
    """替换请求体中出现的字段

    更新类接口把 Store 错误（包括非法 id）视为请求错误，返回 400。
    """
    try:
        task = await service.update_task(task_id, body or {})
    except TaskNotFoundError as e:
        return _error(404, e.message)
    except (TaskValidationError, StoreError) as e:
        return _error(400, e.message)
    return _task_response(task)


@router.patch("/tasks/{task_id}/status")
async def update_task_status(
    task_id: str,
    body: dict[str, Any] | None = Body(default=None),
    service: TaskService = Depends(get_task_service),
):
    """仅更新 status，取值必须为 Pending / Completed"""
    status = (body or {}).get("status")
    try:
        task = await service.update_status(task_id, status)
    except TaskNotFoundError as e:
        return _error(404, e.message)
    except (TaskValidationError, StoreError) as e:
        return _error(400, e.message)
    return _task_response(task)


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    """删除单个任务"""
    try:
        await service.delete_task(task_id)
    except TaskNotFoundError as e:
        return _error(404, e.message)
    except StoreError as e:
        return _error(500, e.message)
    return JSONResponse(status_code=200, content={"message": "Task deleted successfully"})


@router.delete("/tasks")
async def delete_completed_tasks(service: TaskService = Depends(get_task_service)):
    """批量删除所有 Completed 任务"""
    try:
        count = await service.delete_completed()
    except StoreError as e:
        return _error(500, e.message)
    return JSONResponse(
        status_code=200,
        content={"message": f"Deleted {count} completed tasks."},
    )
