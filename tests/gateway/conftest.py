"""gateway 测试配置 -- FastAPI app + httpx AsyncClient"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskdesk.core.store import StoreGroup


@pytest_asyncio.fixture
async def app(store_group: StoreGroup):
    """创建测试用 FastAPI app 实例（绕过 lifespan，手动注入 StoreGroup）"""
    from taskdesk.gateway.main import create_app

    application = create_app()
    application.state.store_group = store_group
    yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
