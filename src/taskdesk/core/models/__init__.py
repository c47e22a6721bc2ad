"""Task Desk Domain Models -- 公共类型导出"""

from .enums import VALID_STATUSES, TaskStatus, is_valid_status
from .task import Task, TaskCreate, TaskUpdate, format_validation_error

__all__ = [
    # 枚举
    "TaskStatus",
    "VALID_STATUSES",
    "is_valid_status",
    # Task
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "format_validation_error",
]
