import importlib
import os
import sys
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

# log and database locations must be fixed before shop_admin is imported
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="shop-admin-tests-"))
os.environ.setdefault("SHOP_ADMIN_LOG_DIR", str(_TEST_ROOT / "logs"))
os.environ.setdefault("SHOP_ADMIN_DB_PATH", str(_TEST_ROOT / "bootstrap.db"))
os.environ.setdefault("SHOP_ADMIN_BCRYPT_ROUNDS", "4")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import httpx
import pytest

from shop_admin.main import create_app
from shop_admin.services.auth_service import AuthService
from shop_admin.services.credential_store import CredentialStore
from shop_admin.services.demo_data import seed_demo_data
from shop_admin.services.token_registry import SessionTokenRegistry


class FakeClock:
    """Manually advanced clock for token expiry tests."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return SessionTokenRegistry(ttl=timedelta(hours=24), clock=clock)


@pytest.fixture
def database(tmp_path, monkeypatch):
    monkeypatch.setenv("SHOP_ADMIN_DB_PATH", str(tmp_path / "test.db"))
    db = importlib.reload(importlib.import_module("shop_admin.models.db"))
    db.init_db()
    yield db
    db.engine.dispose()


@pytest.fixture
def seeded_database(database):
    seed_demo_data()
    return database


@pytest.fixture
def store(database):
    return CredentialStore(rounds=4)


@pytest.fixture
def auth_service(store, registry):
    return AuthService(store=store, registry=registry)


@pytest.fixture
async def api_client(seeded_database, auth_service):
    app = create_app(auth_service)
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://shop-admin.test",
    ) as client:
        yield client


@pytest.fixture
async def auth_headers(api_client):
    resp = await api_client.post(
        "/api/auth/register",
        json={"email": "staff@rareperfume.vn", "password": "s3cret-pass", "name": "Staff"},
    )
    assert resp.status_code == 201
    return {"Authorization": f"Bearer {resp.json()['token']}"}
