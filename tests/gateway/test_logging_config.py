"""日志配置测试

测试内容：
1. root logger 级别取自 TASKDESK_LOG_LEVEL
2. uvicorn 日志汇入 root handler，access 日志被压制
"""

import logging

import pytest
from taskdesk.gateway.middleware.logging_config import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    logging.getLogger("uvicorn.access").setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_root_level_from_env(self, monkeypatch, restore_logging):
        monkeypatch.setenv("TASKDESK_LOG_LEVEL", "debug")
        setup_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_uvicorn_access_quieted(self, restore_logging):
        access = logging.getLogger("uvicorn.access")
        access.addHandler(logging.NullHandler())

        setup_logging()

        assert access.level == logging.WARNING
        assert access.handlers == []
        assert access.propagate is True
        assert not access.isEnabledFor(logging.INFO)
