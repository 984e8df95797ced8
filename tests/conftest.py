"""
Shared pytest fixtures for the challenge registration bot tests.

Sets required environment variables BEFORE any challenge_bot module is
imported so that pydantic-settings and SQLAlchemy engine initialisation use
safe test values.
"""
from __future__ import annotations

import os
from datetime import datetime
from typing import AsyncGenerator

# ── Set env vars before any challenge_bot import ─────────────────────────────
os.environ.setdefault("BOT_TOKEN", "test-token-for-pytest")
os.environ.setdefault("ADMIN_EMAILS", "admin@club.in, Organiser@Club.in")
os.environ.setdefault("ADMIN_IDS", "123456789")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# ── Third-party ───────────────────────────────────────────────────────────────
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# ── Project imports (safe after env vars are set) ─────────────────────────────
from challenge_bot.models.base import Base
from challenge_bot.models.entities import Registration, RegistrationStatus
from challenge_bot.validators import AttachedFile, RegistrationDraft

ADMIN_EMAIL = "admin@club.in"


# ── DB fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a fresh AsyncSession backed by an isolated in-memory SQLite database.
    Schema is created fresh for every test function; engine is always disposed
    on teardown, even if the test raises an exception.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with factory() as session:
            yield session
    finally:
        await engine.dispose()


# ── Value factories ───────────────────────────────────────────────────────────

_counter = iter(range(1, 1_000_000))


def _registration(**overrides) -> Registration:
    n = next(_counter)
    values = dict(
        id=f"00000000-0000-0000-0000-{n:012d}",
        user_id=10_000 + n,
        full_name="Asha Patil",
        mobile_number="98765 43210",
        email_address="asha@example.com",
        full_address="12 MG Road, Baramati",
        gender="Female",
        strava_profile_link="https://www.strava.com/athletes/1",
        payment_screenshot_url="http://localhost:8000/storage/registrations/payment-screenshots/1.png",
        payment_screenshot_name="1.png",
        where_heard="Instagram",
        payment_tier="basic",
        status=RegistrationStatus.PENDING,
        created_at=datetime(2025, 8, 1, 10, 0, 0),
        updated_at=datetime(2025, 8, 1, 10, 0, 0),
    )
    values.update(overrides)
    return Registration(**values)


@pytest.fixture
def make_registration():
    """Factory fixture — returns a callable that builds a Registration value."""
    return _registration


def _draft(**overrides) -> RegistrationDraft:
    values = dict(
        full_name="Asha Patil",
        mobile_number="9876543210",
        email_address="asha@example.com",
        full_address="12 MG Road, Baramati",
        gender="Female",
        strava_profile_link="https://www.strava.com/athletes/1",
        where_heard="Instagram",
        tier_id="basic",
        file=AttachedFile(name="pay.png", size_bytes=2_000_000, mime_type="image/png"),
    )
    values.update(overrides)
    return RegistrationDraft(**values)


@pytest.fixture
def make_draft():
    """Factory fixture — returns a callable that builds a complete basic draft."""
    return _draft
