# tests/conftest.py
import os

# keep test runs from writing log files or starting the scheduler
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("TREE_AUDIT_ENABLED", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  (registers tables)
from app.core.deps import get_db
from app.db.base import Base
from app.main import app as fastapi_app
from app.services.hierarchy import HierarchyService
from app.services.kinds import CATEGORY, PRODUCT_CATEGORY
from app.services.menu_service import MenuService


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def categories(db):
    return HierarchyService(db, CATEGORY)


@pytest.fixture
def product_categories(db):
    return HierarchyService(db, PRODUCT_CATEGORY)


@pytest.fixture
def menus(db):
    return MenuService(db)


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client bound to the app, with get_db pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as c:
        yield c
    fastapi_app.dependency_overrides.clear()
