"""存活 / 就绪检查测试"""

from httpx import ASGITransport, AsyncClient
from taskdesk.gateway.routes.health import LIVENESS_MESSAGE


class TestHealthCheck:
    async def test_root_returns_plain_text(self, client: AsyncClient):
        resp = await client.get("/")
        assert resp.status_code == 200
        assert resp.text == LIVENESS_MESSAGE
        assert resp.headers["content-type"].startswith("text/plain")

    async def test_api_prefix_root(self, client: AsyncClient):
        resp = await client.get("/api/v1")
        assert resp.status_code == 200
        assert resp.text == LIVENESS_MESSAGE

    async def test_ready_returns_200(self, client: AsyncClient):
        resp = await client.get("/ready")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ready", "checks": {"store": "ok"}}

    async def test_ready_store_failure(self, app, store_group):
        await store_group.conn.close()

        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            resp = await ac.get("/ready")
            assert resp.status_code == 503
            data = resp.json()
            assert data["status"] == "not_ready"
            assert data["checks"]["store"] == "unavailable"
