from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator, Iterable

import httpx
import pytest
import pytest_asyncio
from dotenv import load_dotenv

TEST_ROOT = Path(__file__).resolve().parent
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Load test/.env for local overrides, then pin the settings the suite relies on
# before anything imports the application settings.
load_dotenv(TEST_ROOT / ".env", override=False)
os.environ["DATABASE__URL"] = TEST_DATABASE_URL
os.environ["DATABASE__CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["BLOG__SCHEDULER_ENABLED"] = "false"
os.environ["BLOG__COMMENTS_NEED_APPROVAL"] = "true"
os.environ["SECURITY__BCRYPT_ROUNDS"] = "4"
os.environ["SECURITY__JWT_SECRET"] = "test-secret"
os.environ["CHEZFLORA_ENABLE_FILE_LOGGING"] = "false"
os.environ["LOGFIRE_ENABLED"] = "false"

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from chezflora.core.database.entities.catalog import Category, Product, Tag  # noqa: E402
from chezflora.core.database.entities.users import User  # noqa: E402
from chezflora.core.database.utils import create_all, create_sessionmaker  # noqa: E402
from chezflora.core.security import create_access_token, hash_password  # noqa: E402
from chezflora.core.utils import slugify  # noqa: E402

DEFAULT_PASSWORD = "password123"


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://0.0.0.0",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)


# =====================================================================
# Database
# =====================================================================


@pytest_asyncio.fixture
async def test_engine():
    """A fresh in-memory database with every table, per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client on the application with every request using the test database."""
    from chezflora.core.database import get_session
    from chezflora.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    # ASGITransport does not run the lifespan, so neither init_db nor the scheduler start
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client
    app.dependency_overrides.clear()


# =====================================================================
# Accounts
# =====================================================================


@pytest.fixture
def make_user(session_maker):
    async def _make(
        email: str = "client@example.com",
        role: str = "client",
        status: str = "active",
        password: str = DEFAULT_PASSWORD,
        first_name: str = "Claire",
        last_name: str = "Martin",
    ) -> User:
        async with session_maker() as session:
            user = User(
                email=email,
                password_hash=hash_password(password, rounds=4),
                first_name=first_name,
                last_name=last_name,
                role=role,
                status=status,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make


@pytest_asyncio.fixture
async def client_user(make_user) -> User:
    return await make_user()


@pytest_asyncio.fixture
async def admin_user(make_user) -> User:
    return await make_user("admin@example.com", role="admin", first_name="Julien", last_name="Bernard")


@pytest_asyncio.fixture
async def superadmin_user(make_user) -> User:
    return await make_user("sadmin@example.com", role="superadmin", first_name="Sophie", last_name="Laurent")


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}

    return _headers


# =====================================================================
# Catalog
# =====================================================================


@pytest.fixture
def make_category(session_maker):
    async def _make(name: str, parent_id: int | None = None, position: int = 1) -> Category:
        async with session_maker() as session:
            category = Category(slug=slugify(name), name=name, parent_id=parent_id, position=position)
            session.add(category)
            await session.commit()
            await session.refresh(category)
            return category

    return _make


@pytest.fixture
def make_product(session_maker):
    async def _make(
        name: str,
        price: str = "10.00",
        stock: int = 10,
        category_id: int | None = None,
        **fields,
    ) -> Product:
        async with session_maker() as session:
            product = Product(
                slug=slugify(name),
                name=name,
                price=Decimal(price),
                stock=stock,
                category_id=category_id,
                **fields,
            )
            product.set_images([f"/images/{slugify(name)}.jpg"])
            session.add(product)
            await session.commit()
            await session.refresh(product)
            return product

    return _make


@pytest.fixture
def make_tag(session_maker):
    async def _make(name: str) -> Tag:
        async with session_maker() as session:
            tag = Tag(slug=slugify(name), name=name)
            session.add(tag)
            await session.commit()
            await session.refresh(tag)
            return tag

    return _make
