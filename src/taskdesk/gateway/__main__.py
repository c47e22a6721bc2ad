"""CLI 入口模块 -- python -m taskdesk.gateway

加载配置后启动 uvicorn。TASKDESK_DATABASE_URL 缺失时记录错误并以状态码 1 退出，
不会监听端口。
"""

import sys

import structlog
import uvicorn
from taskdesk.core.config import load_service_config
from taskdesk.core.exceptions import ConfigError

from .middleware.logging_config import setup_logging

log = structlog.get_logger()


def main() -> None:
    """CLI 主入口"""
    setup_logging()

    try:
        config = load_service_config()
    except ConfigError as e:
        log.error("startup_failed", error=e.message)
        sys.exit(1)

    from .main import app

    log.info("server_starting", host=config.host, port=config.port)
    # log_config=None：uvicorn 日志沿用 structlog 的 root handler
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
