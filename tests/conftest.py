"""Shared fixtures: in-memory SQLite sessions, a fake catalog and a wired app."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from tests import _ensure_repo_on_path

_ensure_repo_on_path()

from catalog_favorites.cache import local_counters_clear_all  # noqa: E402
from catalog_favorites.db.connection import create_tables, enable_sqlite_foreign_keys  # noqa: E402
from catalog_favorites.db.models import Base  # noqa: E402
from catalog_favorites.main import create_app  # noqa: E402
from catalog_favorites.settings import AppSettings  # noqa: E402
from tests.support.fake_catalog import FakeCatalog, make_product  # noqa: E402
from tests.support.http import register_and_login  # noqa: E402

TEST_JWT_SECRET = "test-secret"


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine whose single connection is shared by every session."""

    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a session bound to the in-memory database."""

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as db_session:
        yield db_session
        if db_session.in_transaction():
            await db_session.rollback()


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog([make_product(1), make_product(2), make_product(3, rating=None)])


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        jwt_secret=TEST_JWT_SECRET,
        use_sqlite=True,
        rate_limit_enabled=False,
        redis_url=None,
    )


@pytest_asyncio.fixture
async def app(settings: AppSettings, engine: AsyncEngine, catalog: FakeCatalog):
    """Application wired to the in-memory database and the fake catalog."""

    application = create_app(settings)
    await application.state.catalog_client.aclose()
    await application.state.engine.dispose()
    application.state.engine = engine
    application.state.session_factory = async_sessionmaker(engine, expire_on_commit=False)
    application.state.catalog_client = catalog
    await local_counters_clear_all()
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    return await register_and_login(client)


@pytest_asyncio.fixture
async def file_app(
    tmp_path: Path, settings: AppSettings, catalog: FakeCatalog
) -> AsyncIterator:
    """Application on a file-backed SQLite database with the production engine.

    Unlike ``app``, each request gets its own pooled connection, so concurrent
    requests really run in separate transactions.
    """

    file_settings = settings.model_copy(
        update={
            "use_sqlite": False,
            "database_url": f"sqlite+aiosqlite:///{tmp_path / 'app.db'}",
        }
    )
    application = create_app(file_settings)
    await application.state.catalog_client.aclose()
    application.state.catalog_client = catalog
    await create_tables(application.state.engine)
    await local_counters_clear_all()
    yield application
    await application.state.engine.dispose()
