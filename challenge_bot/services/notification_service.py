"""
Rider notification service.

When an admin reviews a registration, the rider receives the outcome directly
in their Telegram chat. Admins are pinged about every new submission.
"""
from __future__ import annotations

import logging
from typing import Iterable

from aiogram import Bot
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError

from challenge_bot.config import settings
from challenge_bot.models.entities import Registration, RegistrationStatus
from challenge_bot.models.tiers import get_tier
from challenge_bot.services.formatting import md

logger = logging.getLogger(__name__)


def status_text(registration: Registration) -> str:
    tier = get_tier(registration.payment_tier)
    headline = {
        RegistrationStatus.APPROVED: "🎉 *Your registration is approved!*",
        RegistrationStatus.REJECTED: "⚠️ *Your registration was not approved*",
    }.get(registration.status, "⏳ *Your registration is under review*")
    return (
        f"{headline}\n\n"
        f"🚴 {settings.CHALLENGE_NAME}\n"
        f"📦 Package: {tier.emoji} {tier.label} ({tier.price_display})\n\n"
        f"{RegistrationStatus.MESSAGES.get(registration.status, '')}"
    )


async def notify_status_changed(bot: Bot, registration: Registration) -> None:
    """
    Tell the rider their registration was approved or rejected.
    Silently swallows delivery errors (user may have blocked the bot).
    """
    try:
        await bot.send_message(
            chat_id=registration.user_id,
            text=status_text(registration),
            parse_mode=ParseMode.MARKDOWN,
        )
    except (TelegramForbiddenError, TelegramBadRequest) as e:
        logger.warning("Could not notify rider telegram_id=%d: %s", registration.user_id, e)


async def notify_new_submission(
    bot: Bot,
    registration: Registration,
    admin_ids: Iterable[int],
) -> int:
    """
    Ping admins about a new pending registration.
    Returns the number of successfully delivered messages.
    """
    tier = get_tier(registration.payment_tier)
    text = (
        f"🆕 *New registration*\n\n"
        f"👤 {md(registration.full_name)}\n"
        f"📦 {tier.emoji} {tier.label} — {tier.price_display}\n"
        f"📱 {md(registration.mobile_number)}\n\n"
        f"Open the admin panel to review."
    )
    count = 0
    for chat_id in admin_ids:
        try:
            await bot.send_message(chat_id=chat_id, text=text, parse_mode=ParseMode.MARKDOWN)
            count += 1
        except (TelegramForbiddenError, TelegramBadRequest) as e:
            logger.warning("Could not notify admin telegram_id=%d: %s", chat_id, e)
    return count
