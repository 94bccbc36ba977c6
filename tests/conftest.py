"""
Shared fixtures: a throwaway SQLite database per test and an HTTP client
bound to the app with its session dependency pointed at that database.
"""

import os

# Must be set before prasempre modules build their module-level engine/services
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
for name in ("ABACATEPAY_API_KEY", "ABACATEPAY_WEBHOOK_SECRET", "ALLOWED_ORIGINS", "APP_BASE_URL"):
    os.environ.pop(name, None)

from datetime import date
from typing import Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import prasempre.models  # noqa: F401  registers tables on Base.metadata
from prasempre.services.page_lifecycle import PageDraft, PageLifecycleManager
from prasempre.utils.database import Base, get_db
from prasempre.utils.rate_limit import billing_rate_limiter

START_DATE = date(2023, 2, 14)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'prasempre_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def lifecycle():
    return PageLifecycleManager()


@pytest.fixture
def make_draft():
    """Factory for a valid couple draft; override any field by keyword"""
    def _make(**overrides) -> PageDraft:
        fields = {
            "type": "couple",
            "name1": "Ana",
            "name2": "João",
            "message": "Para sempre com você",
            "start_date": START_DATE,
            "plan": "9_90",
        }
        fields.update(overrides)
        return PageDraft(**fields)
    return _make


@pytest.fixture
def make_page(db, lifecycle, make_draft):
    """Create a page, active unless told otherwise"""
    async def _make(plan: str = "9_90", active: bool = True, billing_id: Optional[str] = None, **overrides):
        page = await lifecycle.create(db, make_draft(plan=plan, **overrides))
        if billing_id:
            await lifecycle.attach_billing(db, page.slug, billing_id)
        if active:
            await lifecycle.activate(db, slug=page.slug)
        await db.refresh(page)
        return page
    return _make


@pytest_asyncio.fixture
async def client(session_factory):
    from prasempre.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    billing_rate_limiter.reset()

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://prasempre.test") as client:
        yield client

    app.dependency_overrides.clear()
    billing_rate_limiter.reset()
