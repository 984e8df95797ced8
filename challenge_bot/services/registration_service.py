"""
Registration data store — all database operations for users and
registrations.

All functions receive an AsyncSession parameter and are plain async
functions (no class coupling) for easy unit testing. Registrations cross
this boundary as immutable `Registration` values, never as ORM rows.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from challenge_bot.errors import (
    DuplicateRegistrationError,
    InvalidTransitionError,
    RegistrationNotFoundError,
)
from challenge_bot.models.entities import Registration, RegistrationStatus
from challenge_bot.models.models import RegistrationRecord, User

logger = logging.getLogger(__name__)

_FIELDS = (
    "id", "user_id", "full_name", "mobile_number", "email_address",
    "full_address", "gender", "strava_profile_link", "tshirt_size",
    "delivery_address", "payment_screenshot_url", "payment_screenshot_name",
    "where_heard", "payment_tier", "status", "created_at", "updated_at",
)


def to_entity(record: RegistrationRecord) -> Registration:
    return Registration(**{name: getattr(record, name) for name in _FIELDS})


# ── User ──────────────────────────────────────────────────────────────────────

async def upsert_user(
    session: AsyncSession,
    telegram_id: int,
    first_name: str,
    last_name: Optional[str],
    username: Optional[str],
) -> User:
    """Create or update a Telegram user record."""
    result = await session.execute(
        select(User).where(User.telegram_id == telegram_id)
    )
    user = result.scalar_one_or_none()
    if user is None:
        user = User(
            telegram_id=telegram_id,
            first_name=first_name,
            last_name=last_name,
            username=username,
        )
        session.add(user)
        await session.flush()
    else:
        user.first_name = first_name
        user.last_name  = last_name
        user.username   = username
    return user


async def get_user(session: AsyncSession, telegram_id: int) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.telegram_id == telegram_id)
    )
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.email == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def link_email(
    session: AsyncSession,
    telegram_id: int,
    email: str,
) -> tuple[Optional[User], str]:
    """
    Attach an e-mail to a user account.
    Returns (user, error_message). error_message is empty on success.
    """
    email = email.strip().lower()
    user = await get_user(session, telegram_id)
    if user is None:
        return None, "Profile not found. Send /start first."

    owner = await get_user_by_email(session, email)
    if owner is not None and owner.telegram_id != telegram_id:
        return None, "This e-mail is already linked to another account."

    user.email = email
    await session.flush()
    return user, ""


# ── Registrations ─────────────────────────────────────────────────────────────

async def fetch_registrations_for_admin(session: AsyncSession) -> List[Registration]:
    """Every registration, newest first."""
    result = await session.execute(
        select(RegistrationRecord).order_by(
            RegistrationRecord.created_at.desc(), RegistrationRecord.id
        )
    )
    return [to_entity(r) for r in result.scalars().all()]


async def fetch_registration_for_user(
    session: AsyncSession,
    user_id: int,
) -> Optional[Registration]:
    result = await session.execute(
        select(RegistrationRecord).where(RegistrationRecord.user_id == user_id)
    )
    record = result.scalar_one_or_none()
    return to_entity(record) if record else None


async def get_registration(
    session: AsyncSession,
    registration_id: str,
) -> Optional[Registration]:
    record = await session.get(RegistrationRecord, registration_id)
    return to_entity(record) if record else None


async def insert_registration(
    session: AsyncSession,
    registration: Registration,
) -> Registration:
    """
    Persist a new registration.
    Raises DuplicateRegistrationError when the user already has one
    (UNIQUE user_id constraint).
    """
    record = RegistrationRecord(**{name: getattr(registration, name) for name in _FIELDS})
    session.add(record)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        logger.warning(
            "Duplicate registration blocked by database for user_id=%d: %s",
            registration.user_id, exc.orig,
        )
        raise DuplicateRegistrationError(registration.user_id) from exc
    logger.info(
        "Registration %s stored for user_id=%d (tier=%s)",
        registration.id, registration.user_id, registration.payment_tier,
    )
    return to_entity(record)


async def update_registration_status(
    session: AsyncSession,
    registration_id: str,
    status: str,
    updated_at: Optional[datetime] = None,
) -> None:
    """
    Move a pending registration to `status`.
    The write only matches a row that is still pending, so a review made
    from a stale card cannot overwrite a decision already stored.
    """
    values = {"status": status}
    if updated_at is not None:
        values["updated_at"] = updated_at
    result = await session.execute(
        update(RegistrationRecord)
        .where(
            RegistrationRecord.id == registration_id,
            RegistrationRecord.status == RegistrationStatus.PENDING,
        )
        .values(**values)
    )
    if result.rowcount == 0:
        current = await session.scalar(
            select(RegistrationRecord.status).where(RegistrationRecord.id == registration_id)
        )
        if current is None:
            raise RegistrationNotFoundError(registration_id)
        logger.warning(
            "Registration %s is already %s, refusing %s", registration_id, current, status,
        )
        raise InvalidTransitionError(current, status)
    logger.info("Registration %s status set to %s", registration_id, status)
