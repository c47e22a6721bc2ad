"""枚举定义

TaskStatus 只有两个取值，任意方向均可流转（无状态机约束）。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 状态"""

    PENDING = "Pending"
    COMPLETED = "Completed"


# 状态更新接口接受的取值
VALID_STATUSES: frozenset[str] = frozenset(s.value for s in TaskStatus)


def is_valid_status(value: object) -> bool:
    """判断取值是否属于 TaskStatus 枚举（大小写敏感）"""
    return isinstance(value, str) and value in VALID_STATUSES
