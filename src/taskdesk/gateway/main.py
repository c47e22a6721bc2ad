"""FastAPI 应用主文件

app 创建 + lifespan 管理：Store 连接建立/关闭 + 中间件 + 路由注册。
Store 连接失败时 lifespan 抛出异常，服务不会开始监听。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from taskdesk.core.config import get_database_url, get_max_body_bytes
from taskdesk.core.exceptions import ConfigError, StoreError
from taskdesk.core.store import create_store_group

from .errors import register_exception_handlers
from .middleware.body_limit_mw import BodyLimitMiddleware
from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.task_context_mw import TaskContextMiddleware
from .routes import health, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时建立 Store 连接，关闭时释放"""
    try:
        store_group = await create_store_group(get_database_url())
    except (ConfigError, StoreError) as e:
        log.error("store_connect_failed", error=e.message)
        raise
    app.state.store_group = store_group
    log.info("store_connected")

    yield

    # 关闭：清理数据库连接
    if getattr(app.state, "store_group", None) is not None:
        await app.state.store_group.close()
        log.info("store_closed")


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Task Desk",
        version="0.1.0",
        description="Task Management API",
        lifespan=lifespan,
    )

    # 后添加的中间件在外层：CORS -> Logging -> TaskContext -> BodyLimit
    app.add_middleware(BodyLimitMiddleware, max_body_bytes=get_max_body_bytes())
    app.add_middleware(TaskContextMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_logging()
    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(tasks.router, tags=["tasks"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
