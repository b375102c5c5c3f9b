import httpx
import pytest

from shop_admin.main import create_app

pytestmark = pytest.mark.anyio


async def test_health(api_client):
    resp = await api_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "OK"

    resp = await api_client.get("/api/ping")
    assert resp.json() == {"msg": "pong"}


async def test_root_lists_endpoints(api_client):
    resp = await api_client.get("/")
    assert resp.status_code == 200
    assert resp.json()["endpoints"]["products"] == "/api/products"


async def test_unknown_route(api_client):
    resp = await api_client.get("/api/perfumes")
    assert resp.status_code == 404
    assert resp.json() == {"error": {"message": "Route /api/perfumes not found", "status": 404}}


async def test_unexpected_errors_are_hidden(seeded_database, auth_service):
    app = create_app(auth_service)

    @app.get("/boom")
    def boom():
        raise RuntimeError("db password is hunter2")

    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://shop-admin.test") as client:
        resp = await client.get("/boom")

    assert resp.status_code == 500
    assert resp.json() == {"error": {"message": "Internal server error", "status": 500}}
