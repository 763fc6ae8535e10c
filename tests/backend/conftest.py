import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from bookstore.config import Settings
from bookstore.core.db import build_config
from bookstore.main import create_app
from bookstore.models.user import User
from bookstore.schemas.user import UserCreateIn
from bookstore.store import users as user_store


TEST_DB_URL = "sqlite://:memory:"


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=build_config(TEST_DB_URL))
    await Tortoise.generate_schemas()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url=TEST_DB_URL,
        jwt_secret="test-secret",
        admin_password=None,
    )


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client, for store and validator tests.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest_asyncio.fixture
async def client(db, app):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    The lifespan is not run; the `db` fixture owns the connection.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_admin(db):
    """
    Factory fixture to create admin users directly through the store.
    """

    async def _create_admin(password: str = "AdminPass!23") -> tuple[User, str]:
        name = f"admin_{uuid.uuid4().hex[:6]}"
        user = await user_store.create_user(UserCreateIn(
            username=name,
            pseudonym=f"Admin {name}",
            password=password,
            is_admin=True,
        ))
        return user, password

    return _create_admin


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create regular users directly.
    """

    async def _create_user(password: str = "UserPass!23") -> tuple[User, str]:
        name = f"user_{uuid.uuid4().hex[:6]}"
        user = await user_store.create_user(UserCreateIn(
            username=name,
            pseudonym=f"Reader {name}",
            password=password,
        ))
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the authenticate endpoint.
    """

    async def _get_headers(username: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/authenticate",
            data={"username": username, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers
