"""配置加载模块 -- 环境变量 + 本地 .env

环境变量:
    TASKDESK_DATABASE_URL: Store 连接串（必填）
    TASKDESK_PORT / PORT: 监听端口（默认 3000）
    TASKDESK_HOST: 监听地址（默认 0.0.0.0）
    TASKDESK_MAX_BODY_BYTES: 请求体大小上限（默认 100KB）
    TASKDESK_LOG_FORMAT / TASKDESK_LOG_LEVEL: 日志渲染模式与级别
"""

import os

import structlog
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError

log = structlog.get_logger()

# 本地开发时从 .env 补充环境变量，已存在的变量不覆盖
load_dotenv(override=False)

DEFAULT_PORT = 3000
DEFAULT_MAX_BODY_BYTES = 100 * 1024

_SQLITE_SCHEME = "sqlite://"


class ServiceConfig(BaseModel):
    """服务配置"""

    database_url: str = Field(min_length=1, description="Store 连接串")
    host: str = Field(default="0.0.0.0", description="监听地址")
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535, description="监听端口")
    max_body_bytes: int = Field(
        default=DEFAULT_MAX_BODY_BYTES,
        ge=1,
        description="JSON 请求体大小上限（字节）",
    )


def get_database_url() -> str:
    """获取 Store 连接串，缺失时抛出 ConfigError"""
    url = os.environ.get("TASKDESK_DATABASE_URL", "").strip()
    if not url:
        raise ConfigError("TASKDESK_DATABASE_URL is not set")
    return url


def get_max_body_bytes() -> int:
    """获取请求体大小上限"""
    return _env_int("TASKDESK_MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES)


def resolve_db_path(database_url: str) -> str:
    """将连接串解析为 aiosqlite 可用的数据库路径

    支持:
        sqlite:///relative/tasks.db
        sqlite:////absolute/tasks.db
        sqlite://:memory:
        /plain/path/tasks.db
    """
    if database_url.startswith(_SQLITE_SCHEME):
        path = database_url[len(_SQLITE_SCHEME):]
        if path == ":memory:":
            return path
        if path.startswith("/"):
            path = path[1:]
        if not path:
            raise ConfigError(f"Missing database path in connection string: {database_url}")
        return path
    if "://" in database_url:
        scheme = database_url.split("://", 1)[0]
        raise ConfigError(f"Unsupported store scheme: {scheme}")
    return database_url


def load_service_config() -> ServiceConfig:
    """从环境变量加载服务配置

    Raises:
        ConfigError: TASKDESK_DATABASE_URL 缺失或取值非法
    """
    kwargs: dict = {"database_url": get_database_url()}

    if val := os.environ.get("TASKDESK_HOST"):
        kwargs["host"] = val

    kwargs["port"] = _env_int(
        "TASKDESK_PORT",
        _env_int("PORT", DEFAULT_PORT),
    )
    kwargs["max_body_bytes"] = get_max_body_bytes()

    try:
        return ServiceConfig(**kwargs)
    except ValidationError as e:
        raise ConfigError(f"Invalid service configuration: {e}") from e


def _env_int(name: str, default: int) -> int:
    val = os.environ.get(name)
    if val is None or val.strip() == "":
        return default
    try:
        return int(val)
    except ValueError:
        log.warning(
            "invalid_int_config",
            env_var=name,
            value=val,
            fallback=default,
        )
        # 使用默认值，不阻塞启动
        return default
