"""Shared pytest fixtures for all tests."""

import asyncio
import os

# La aplicación crea su motor al importarse: se apunta a SQLite antes
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-the-pytest-suite")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from ecommerce.api.deps import get_db
from ecommerce.core.security import create_access_token, hash_password
from ecommerce.crud import user_crud
from ecommerce.db.database import create_tables, make_sessionmaker
from ecommerce.main import app

API = "/api/v1"


@pytest.fixture
def engine(tmp_path):
    """Async engine over a temporary SQLite file with all tables created.

    NullPool opens a fresh connection per use, so the engine can be shared
    between the test thread and the TestClient event loop.
    """
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(create_tables(test_engine))
    yield test_engine
    asyncio.run(test_engine.dispose())


@pytest.fixture
def session_factory(engine):
    return make_sessionmaker(engine)


@pytest.fixture
def db_call(session_factory):
    """Run an async CRUD function with a fresh session and return its result.

    Usage: db_call(user_crud.get_user, user_id=1)
    """
    def _call(func, *args, **kwargs):
        async def _run():
            async with session_factory() as session:
                return await func(session, *args, **kwargs)
        return asyncio.run(_run())
    return _call


@pytest.fixture
def client(session_factory):
    """TestClient whose get_db dependency yields sessions on the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(client):
    """Register a regular user through the API and return its auth headers."""
    response = client.post(
        f"{API}/auth/register",
        json={"email": "user@example.com", "password": "secret123", "name": "Regular User"},
    )
    assert response.status_code == 201
    # Sin la cookie de sesión, cada petición se autentica solo con las cabeceras
    client.cookies.clear()
    return _bearer(response.json()["token"])


@pytest.fixture
def other_user_headers(client):
    response = client.post(
        f"{API}/auth/register",
        json={"email": "other@example.com", "password": "secret123", "name": "Other User"},
    )
    assert response.status_code == 201
    client.cookies.clear()
    return _bearer(response.json()["token"])


@pytest.fixture
def admin_user(db_call):
    return db_call(
        user_crud.create_user,
        email="admin@example.com",
        name="Admin",
        hashed_password=hash_password("admin123"),
        role="ADMIN",
    )


@pytest.fixture
def admin_headers(admin_user):
    return _bearer(create_access_token(admin_user.user_id, admin_user.email, admin_user.role))


@pytest.fixture
def create_category(client, admin_headers):
    """Factory that creates a category through the API and returns its JSON."""
    def _create(name, **fields):
        response = client.post(f"{API}/categories/", json={"name": name, **fields}, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def create_product(client, admin_headers):
    """Factory that creates a product through the API and returns its JSON."""
    def _create(name, price, **fields):
        response = client.post(
            f"{API}/products/", json={"name": name, "price": price, **fields}, headers=admin_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create
