"""全局 pytest 配置 -- 临时 SQLite Store fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from taskdesk.core.store import StoreGroup, create_store_group


@pytest_asyncio.fixture
async def tmp_db_url(tmp_path: Path) -> str:
    """提供临时 SQLite 连接串"""
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def store_group(tmp_db_url: str) -> AsyncGenerator[StoreGroup, None]:
    """提供已初始化的 StoreGroup"""
    group = await create_store_group(tmp_db_url)
    yield group
    await group.close()
