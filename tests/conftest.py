import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from shiptrack import create_app
from shiptrack.config import Settings
from shiptrack.database import build_engine, build_session_factory, create_tables
from shiptrack.services import CatalogService, create_service_registry
from shiptrack.storage import Storage


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'shiptrack-test.db'}"


@pytest.fixture
def settings(database_url):
    return Settings(
        _env_file=None,
        DATABASE_URL=database_url,
        SECRET_KEY="test-secret-key",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def engine(database_url):
    # NullPool: no connection outlives the event loop that opened it
    return build_engine(database_url, poolclass=NullPool)


@pytest.fixture
async def storage(engine):
    await create_tables(engine)
    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        yield Storage(session)


@pytest.fixture
def services(storage, settings):
    return create_service_registry(storage, settings)


@pytest.fixture
async def make_user(storage):
    """Insert a user straight through storage (no bcrypt)."""
    counter = {'n': 0}

    async def _make_user(is_admin=False, phone=None):
        counter['n'] += 1
        async with storage.transaction():
            return await storage.create_user(
                name=f"User {counter['n']}",
                email=f"user{counter['n']}@shiptrack.io",
                phone=phone,
                password_hash="not-a-real-hash",
                is_admin=is_admin,
            )

    return _make_user


@pytest.fixture
def client(settings, engine):
    app = create_app(settings, engine=engine)
    with TestClient(app) as test_client:
        yield test_client


def run_with_storage(database_url, work):
    """Run ``await work(storage)`` against the test database from sync code."""
    async def _run():
        engine = build_engine(database_url, poolclass=NullPool)
        try:
            async with build_session_factory(engine)() as session:
                storage = Storage(session)
                async with storage.transaction():
                    return await work(storage)
        finally:
            await engine.dispose()
    return asyncio.run(_run())


@pytest.fixture
def promote_to_admin(database_url):
    def _promote(user_id):
        return run_with_storage(database_url, lambda storage: storage.set_user_admin(user_id, True))
    return _promote


@pytest.fixture
def seed_catalog(database_url, settings):
    def _seed():
        return run_with_storage(database_url, lambda storage: CatalogService(storage, settings).seed_defaults())
    return _seed


@pytest.fixture
def register_user(client):
    """POST /api/auth/register and return (token, user json)."""
    def _register(name="Jane Doe", email="jane@shiptrack.io", password="secret123", phone=None):
        payload = {"name": name, "email": email, "password": password}
        if phone:
            payload["phone"] = phone
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["user"]
    return _register
