"""Task Desk 异常体系

路由层按异常类型映射 HTTP 状态码：
- TaskValidationError -> 400
- TaskNotFoundError -> 404
- StoreError -> 500（更新类接口为 400）
"""


class TaskDeskError(Exception):
    """Task Desk 基础异常"""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(TaskDeskError):
    """配置缺失或非法 -- 启动期致命错误"""


class TaskValidationError(TaskDeskError):
    """客户端输入未通过校验"""


class TaskNotFoundError(TaskDeskError):
    """指定 id 的任务不存在"""

    def __init__(self, task_id: str) -> None:
        super().__init__("Task not found")
        self.task_id = task_id


class StoreError(TaskDeskError):
    """Store 层错误（连接断开、SQL 执行失败等），message 为底层错误原文"""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class InvalidIdentifierError(StoreError):
    """id 不是合法的 ULID"""

    def __init__(self, task_id: str) -> None:
        super().__init__(f'Cast to ULID failed for value "{task_id}" at path "id"')
        self.task_id = task_id
