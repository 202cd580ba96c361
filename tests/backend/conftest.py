import os
import tempfile
import uuid

# Settings are read at import time; pin the test environment first
os.environ["OPENAI_API_KEY"] = ""
os.environ["MEDIA_BACKEND"] = "local"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="coe_uploads_")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from coe_portal.core import db as db_module
from coe_portal.core.security import create_access_token, hash_password
from coe_portal.main import app
from coe_portal.models.user import User


TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client, for service-level tests.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client():
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    await _init_test_db()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def create_admin():
    """
    Factory fixture to create admin users directly via ORM for privileged endpoints.
    """

    async def _create_admin(password: str = "AdminPass!23", username: str | None = None) -> tuple[User, str]:
        user = await User.create(
            username=username or f"admin_{uuid.uuid4().hex[:6]}",
            password_hash=hash_password(password),
            role="admin",
            is_approved=True,
        )
        return user, password

    return _create_admin


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create regular users directly (approved unless asked otherwise).
    """

    async def _create_user(
        password: str = "UserPass!23",
        username: str | None = None,
        is_approved: bool = True,
    ) -> tuple[User, str]:
        user = await User.create(
            username=username or f"user_{uuid.uuid4().hex[:6]}",
            password_hash=hash_password(password),
            role="user",
            is_approved=is_approved,
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(username: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"username": username, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["data"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest.fixture
def token_headers():
    """
    Mint a token directly, for accounts that cannot log in (pending approval).
    """

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(str(user.id), user.role)}"}

    return _headers
