"""TaskContextMiddleware -- 为单任务操作绑定 task_id

从 /api/v1/tasks/{task_id}[/status] 路径中提取 ULID 形式的 task_id，
绑定到 structlog contextvars，使该请求内的日志都带上 task_id。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

_ULID_LENGTH = 26


class TaskContextMiddleware(BaseHTTPMiddleware):
    """任务级上下文中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        parts = request.url.path.strip("/").split("/")

        if "tasks" in parts:
            i = parts.index("tasks")
            # 排除 /tasks/status/{x}、/tasks/search/{x} 子路由
            if i + 1 < len(parts) and len(parts[i + 1]) == _ULID_LENGTH:
                structlog.contextvars.bind_contextvars(task_id=parts[i + 1])

        return await call_next(request)
