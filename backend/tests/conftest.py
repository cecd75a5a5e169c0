"""
PerkHub — Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Inventory (all function-scoped):
    ├── db_engine / session_factory: in-memory SQLite (aiosqlite) with the schema created
    ├── db_session: AsyncSession for service-level tests
    ├── mock_db_session: AsyncMock session for error-path unit tests
    ├── app / test_client: FastAPI app with get_db_session overridden + HTTPX client
    ├── user / other_user / auth_headers: perk creators and their bearer header
    ├── make_perk: inserts a perk row
    ├── clock: manual millisecond clock for the debounce timer
    └── fake_api: scripted stand-in for PerkApiClient
"""

import asyncio
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Override settings for testing BEFORE any perkhub imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SEARCH_DEBOUNCE_MS"] = "500"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from perkhub.database import Base, get_db_session
from perkhub.exceptions import PerkFetchError
from perkhub.models import Perk, User
from perkhub.schemas.perk import PerkRead


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
        await perk_service.list_public(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def user(db_session):
    user = User(name="Riley Curator", email="riley@example.com")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def other_user(db_session):
    user = User(name="", email="sam@example.com")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {user.api_token}"}


@pytest.fixture
def make_perk(db_session):
    """
    Insert a perk. Each call is one second older than the previous one, so
    "newest first" ordering is deterministic: the first perk made is listed first.
    """
    base_time = datetime(2026, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    async def _make(title: str, merchant: Optional[str] = None, creator: Optional[User] = None, **fields):
        counter["n"] += 1
        perk = Perk(
            title=title,
            merchant=merchant,
            category=fields.pop("category", "other"),
            discount_percent=fields.pop("discount_percent", 0),
            created_at=base_time - timedelta(seconds=counter["n"]),
            **fields,
        )
        if creator is not None:
            perk.created_by = creator
        db_session.add(perk)
        await db_session.commit()
        return perk

    return _make


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    """A fresh app whose get_db_session uses the in-memory test database."""
    from perkhub.main import create_app

    application = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Search View Fixtures
# ══════════════════════════════════════════════════════════════════════════

class _ManualHandle:
    def __init__(self, when_ms: int, callback: Callable[[], None]):
        self.when_ms = when_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """
    Scheduler with a hand-driven millisecond clock.

    advance(ms) fires every armed callback whose due time is reached, in due
    order, with `now_ms` set to each callback's due time while it runs.
    """

    def __init__(self):
        self.now_ms = 0
        self._handles: List[_ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self.now_ms + round(delay * 1000), callback)
        self._handles.append(handle)
        return handle

    @property
    def armed(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled)

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while True:
            due = [h for h in self._handles if not h.cancelled and h.when_ms <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when_ms)
            self._handles.remove(handle)
            self.now_ms = handle.when_ms
            handle.callback()
        self.now_ms = target


class FakePerkApi:
    """
    Scripted PerkApiClient stand-in.

    - `responses` is consumed one entry per call; an entry is a list of
      PerkRead (success) or a PerkFetchError (failure). When empty, `default`
      is returned.
    - `calls` records (clock time in ms, params) for every call.
    - `gates[i]`, if set, must be released before call #i returns. Calls are
      numbered from 0 over the fake's lifetime, so a view's mount is call #0
      even after `calls` is cleared.
    """

    def __init__(self, clock: ManualClock):
        self.clock = clock
        self.calls: List[Dict[str, Any]] = []
        self.call_count = 0
        self.responses: List[Any] = []
        self.default: List[PerkRead] = []
        self.gates: Dict[int, asyncio.Event] = {}

    async def list_all_perks(self, params=None) -> List[PerkRead]:
        index = self.call_count
        self.call_count += 1
        self.calls.append({"at": self.clock.now_ms, "params": dict(params or {})})
        outcome = self.responses.pop(0) if self.responses else self.default
        gate = self.gates.get(index)
        if gate is not None:
            await gate.wait()
        if isinstance(outcome, PerkFetchError):
            raise outcome
        return list(outcome)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def fake_api(clock):
    return FakePerkApi(clock)


def perk_read(title: str, merchant: Optional[str] = None, **fields) -> PerkRead:
    """Build a PerkRead without a database."""
    return PerkRead(id=uuid4(), title=title, merchant=merchant, **fields)


async def drain() -> None:
    """Let freshly spawned tasks run until they block."""
    for _ in range(10):
        await asyncio.sleep(0)
