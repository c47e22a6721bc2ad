"""Task Domain Model

对外 JSON 字段为 camelCase（dueDate / createdAt / updatedAt），
内部属性为 snake_case。id 与时间戳由 Store 生成，客户端提交时忽略。
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .enums import TaskStatus

_CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


def _as_utc(value: datetime | None) -> datetime | None:
    """无时区的时间按 UTC 处理

    换算到 UTC 后超出 datetime 范围时抛出 ValueError，由 pydantic 归入校验错误。
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    try:
        return value.astimezone(UTC)
    except OverflowError as e:
        raise ValueError("dueDate out of range") from e


class Task(BaseModel):
    """持久化的 Task 文档"""

    model_config = _CAMEL_CONFIG

    id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    due_date: datetime | None = Field(default=None, description="截止时间")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    def to_document(self) -> dict[str, Any]:
        """序列化为响应体，省略未设置的可选字段"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TaskCreate(BaseModel):
    """创建请求 -- title 必填，status 缺省为 Pending"""

    model_config = _CAMEL_CONFIG

    title: str = Field(min_length=1)
    description: str | None = None
    due_date: datetime | None = None
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class TaskUpdate(BaseModel):
    """更新请求 -- 所有字段可选，仅替换提交的字段

    description / dueDate 允许显式传 null 清空；title / status 不允许。
    """

    model_config = _CAMEL_CONFIG

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    due_date: datetime | None = None
    status: TaskStatus | None = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @field_validator("title", "status")
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    def changes(self) -> dict[str, Any]:
        """仅返回客户端实际提交的字段"""
        return self.model_dump(include=self.model_fields_set)


def format_validation_error(exc: ValidationError) -> str:
    """将 pydantic 校验错误压缩为一行可读描述"""
    details = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        details.append(f"{field}: {err['msg']}")
    return "Task validation failed: " + ", ".join(details)
