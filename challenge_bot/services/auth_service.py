"""
Authentication provider for the bot.

A Telegram account is the identity; the e-mail linked via /signup is what the
administrator capability is granted on.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from challenge_bot.config import settings
from challenge_bot.models.entities import Actor
from challenge_bot.models.models import User
from challenge_bot.services.registration_service import link_email

logger = logging.getLogger(__name__)


def actor_for(user: Optional[User]) -> Optional[Actor]:
    if user is None:
        return None
    return Actor(user_id=user.telegram_id, email=user.email)


def may_claim_email(
    telegram_id: int,
    email: str,
    is_administrator: Callable[[Optional[str]], bool],
    admin_ids: list[int],
) -> bool:
    """An admin e-mail can only be linked from an allow-listed Telegram account."""
    if is_administrator(email):
        return telegram_id in admin_ids
    return True


async def sign_up(
    session: AsyncSession,
    telegram_id: int,
    email: str,
) -> tuple[Optional[Actor], str]:
    """
    Link `email` to the Telegram account.
    Returns (actor, error_message). error_message is empty on success.
    """
    if not may_claim_email(telegram_id, email, settings.is_administrator, settings.admin_ids_list):
        logger.warning("telegram_id=%d tried to claim an admin e-mail", telegram_id)
        return None, "This e-mail cannot be linked to your account."

    user, error = await link_email(session, telegram_id, email)
    if error:
        return None, error
    return actor_for(user), ""
