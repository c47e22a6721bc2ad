"""中间件与错误响应体测试

测试内容：
1. X-Request-ID 响应头
2. CORS 放行任意来源
3. 请求体超限 413、非法 JSON 400
4. 框架级错误统一为 {"message": ...}
5. 未捕获异常 500 仍带 CORS 头
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskdesk.core.store import StoreGroup


class TestRequestId:
    async def test_request_id_in_response_header(self, client: AsyncClient):
        resp = await client.get("/api/v1/tasks")
        assert "x-request-id" in resp.headers
        # ULID 格式：26 字符
        assert len(resp.headers["x-request-id"]) == 26

    async def test_request_ids_are_unique(self, client: AsyncClient):
        ids = set()
        for _ in range(3):
            resp = await client.get("/")
            ids.add(resp.headers["x-request-id"])
        assert len(ids) == 3


class TestCors:
    async def test_simple_request_allows_any_origin(self, client: AsyncClient):
        resp = await client.get("/api/v1/tasks", headers={"Origin": "http://example.com"})
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"

    async def test_preflight(self, client: AsyncClient):
        resp = await client.options(
            "/api/v1/tasks",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "DELETE",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "DELETE" in resp.headers["access-control-allow-methods"]


class TestBodyParsing:
    async def test_invalid_json_returns_400(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/tasks",
            content=b'{"title": ',
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["message"].startswith("Invalid request body")

    async def test_non_object_json_returns_400(self, client: AsyncClient):
        resp = await client.post("/api/v1/tasks", json=["not", "an", "object"])
        assert resp.status_code == 400
        assert "message" in resp.json()

    async def test_oversized_body_returns_413(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/tasks",
            json={"title": "big", "description": "x" * 200_000},
        )
        assert resp.status_code == 413
        assert resp.json() == {"message": "request entity too large"}
        assert (await client.get("/api/v1/tasks")).json() == []


class TestBodyLimitConfig:
    @pytest_asyncio.fixture
    async def small_limit_client(self, monkeypatch, store_group: StoreGroup):
        monkeypatch.setenv("TASKDESK_MAX_BODY_BYTES", "64")
        from taskdesk.gateway.main import create_app

        app = create_app()
        app.state.store_group = store_group
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac

    async def test_limit_from_env(self, small_limit_client: AsyncClient):
        ok = await small_limit_client.post("/api/v1/tasks", json={"title": "short"})
        assert ok.status_code == 201
        too_big = await small_limit_client.post(
            "/api/v1/tasks", json={"title": "t", "description": "y" * 100}
        )
        assert too_big.status_code == 413

    async def test_chunked_body_over_limit_returns_413(self, small_limit_client: AsyncClient):
        async def chunks():
            yield b'{"title": "t", "description": "'
            for _ in range(4):
                yield b"y" * 32
            yield b'"}'

        resp = await small_limit_client.post(
            "/api/v1/tasks",
            content=chunks(),
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 413
        assert resp.json() == {"message": "request entity too large"}
        assert (await small_limit_client.get("/api/v1/tasks")).json() == []

    async def test_chunked_body_within_limit(self, small_limit_client: AsyncClient):
        async def chunks():
            yield b'{"title": '
            yield b'"short"}'

        resp = await small_limit_client.post(
            "/api/v1/tasks",
            content=chunks(),
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 201
        assert resp.json()["title"] == "short"


class TestErrorEnvelope:
    async def test_unknown_route(self, client: AsyncClient):
        resp = await client.get("/api/v1/unknown")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Not Found"}

    async def test_method_not_allowed(self, client: AsyncClient):
        resp = await client.post("/api/v1/tasks/status/Pending")
        assert resp.status_code == 405
        assert resp.json() == {"message": "Method Not Allowed"}


class TestUnhandledError:
    async def test_500_keeps_cors_header(self, monkeypatch, app):
        from taskdesk.gateway.services.task_service import TaskService

        async def boom(self):
            raise RuntimeError("boom")

        monkeypatch.setattr(TaskService, "list_tasks", boom)
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as ac:
            resp = await ac.get("/api/v1/tasks", headers={"Origin": "http://example.com"})

        assert resp.status_code == 500
        assert resp.json() == {"message": "boom"}
        assert resp.headers["access-control-allow-origin"] == "*"
