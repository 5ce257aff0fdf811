"""Pytest configuration and shared fixtures.

Usage Guide:
- For ORM model tests: import factories from tests.factories
- For GitHub payload tests: use the dict builders (pr_node, commit_node, ...)
- For sync tests: use FakeUpstream from tests.fakes
"""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from lottery_factor.config import get_settings
from lottery_factor.db.models import Base

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Every sync test runs with TODAY injected as the clock, so a 30-day window
# starts on WINDOW_START_30.
# -----------------------------------------------------------------------------

TODAY = date(2024, 3, 1)
WINDOW_START_30 = date(2024, 1, 31)

# ISO 8601 strings (for GitHub API mocks)
FEB_28_ISO = "2024-02-28T12:00:00Z"  # 2 days ago
FEB_20_ISO = "2024-02-20T09:30:00Z"  # 10 days ago
FEB_10_ISO = "2024-02-10T16:00:00Z"  # 20 days ago
JAN_31_ISO = "2024-01-31T08:00:00Z"  # exactly 30 days ago
JAN_30_ISO = "2024-01-30T23:00:00Z"  # 31 days ago
JAN_16_ISO = "2024-01-16T10:00:00Z"  # 45 days ago
DEC_01_ISO = "2023-12-01T10:00:00Z"  # 91 days ago


def fixed_today() -> date:
    """Clock for SyncOrchestrator / FreshnessOracle."""
    return TODAY


# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
async def test_engine():
    """Create an in-memory SQLite engine for tests.

    Each test gets a fresh database with all tables created.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Create an async session on the test engine.

    Sync code commits page by page, so isolation comes from the fresh
    engine rather than from a final rollback.
    """
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


# -----------------------------------------------------------------------------
# Settings Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def clean_settings(monkeypatch):
    """Clear cached settings before and after a test that sets env vars."""
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
