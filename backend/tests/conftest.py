"""
conftest.py: shared fixtures for the kintai test suite.

Strategy:
- API tests run against a throwaway SQLite file through aiosqlite; the
  environment is configured before any kintai module reads its settings.
- The schema is created fresh for every test function and dropped afterwards.
- Admin-only endpoints are reached through a real unlock with a known PIN.
- Engine-level tests (labor, tax, payroll, aggregation) need no database and
  build ClockEvent values with the ``punch`` helper.
"""

from __future__ import annotations

import os
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path

_DB_PATH = Path(tempfile.gettempdir()) / f"kintai_test_{uuid.uuid4().hex[:8]}.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["TIMEZONE"] = "Asia/Tokyo"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from kintai.core.config import settings  # noqa: E402
from kintai.core.security import hash_pin  # noqa: E402
from kintai.db.models import Base, Company, Staff, TimecardLog  # noqa: E402
from kintai.db.session import AsyncSessionLocal, engine  # noqa: E402
from kintai.main import app  # noqa: E402
from kintai.schemas.timecard import ClockEvent  # noqa: E402

ADMIN_PIN = "2468"
settings.ADMIN_PIN_HASH = hash_pin(ADMIN_PIN)

STAFF_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


# ---------------------------------------------------------------------------
# Engine-level helpers
# ---------------------------------------------------------------------------


def punch(event_type: str, when: str, staff_id: uuid.UUID = STAFF_ID) -> ClockEvent:
    """ClockEvent from an ISO timestamp with offset, e.g. '2026-10-01T09:00:00+09:00'."""
    return ClockEvent(
        staff_id=staff_id,
        event_type=event_type,
        timestamp=datetime.fromisoformat(when),
    )


def shift(day: str, start: str, end: str, staff_id: uuid.UUID = STAFF_ID) -> list[ClockEvent]:
    """clock_in / clock_out pair in JST on ``day`` (YYYY-MM-DD), no breaks."""
    return [
        punch("clock_in", f"{day}T{start}:00+09:00", staff_id),
        punch("clock_out", f"{day}T{end}:00+09:00", staff_id),
    ]


# ---------------------------------------------------------------------------
# Database lifecycle
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_schema():
    """Create all tables for one test and drop them afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(db_schema) -> AsyncSession:
    """Provides a raw DB session for direct setup and assertions in tests."""
    async with AsyncSessionLocal() as session:
        yield session


# ---------------------------------------------------------------------------
# HTTP client fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(db_schema) -> AsyncClient:
    """Fresh HTTPX async client per test function."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_headers(client: AsyncClient) -> dict:
    """Authorization header of a freshly unlocked admin session."""
    resp = await client.post("/api/admin/unlock", json={"pin": ADMIN_PIN})
    assert resp.status_code == 200, f"Unlock failed: {resp.text}"
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def no_punch_window(monkeypatch):
    """Disable the double-punch window so tests can punch in quick succession."""
    monkeypatch.setattr(settings, "DUPLICATE_PUNCH_WINDOW_SECONDS", 0.0)


# ---------------------------------------------------------------------------
# Data fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def company(db: AsyncSession) -> Company:
    company = Company(name="テスト商店")
    db.add(company)
    await db.commit()
    await db.refresh(company)
    return company


async def add_staff(db: AsyncSession, **fields) -> Staff:
    data = {"name": "テスト 太郎", "pin": "1001", "role": "staff", "hourly_wage": 1000}
    data.update(fields)
    staff = Staff(**data)
    db.add(staff)
    await db.commit()
    await db.refresh(staff)
    return staff


async def add_log(
    db: AsyncSession, staff: Staff, event_type: str, when: str, **fields
) -> TimecardLog:
    """Insert a punch; ``when`` is ISO with offset and is stored as UTC."""
    log = TimecardLog(
        staff_id=staff.id,
        company_id=staff.company_id,
        event_type=event_type,
        timestamp=datetime.fromisoformat(when).astimezone(timezone.utc),
        **fields,
    )
    db.add(log)
    await db.commit()
    await db.refresh(log)
    return log


@pytest_asyncio.fixture
async def staff_member(db: AsyncSession, company: Company) -> Staff:
    return await add_staff(db, company_id=company.id)


def pytest_sessionfinish(session, exitstatus):
    _DB_PATH.unlink(missing_ok=True)
