"""
Unit tests — Rider / admin notifications and message rendering
(services/notification_service.py, services/formatting.py).

The Telegram Bot is replaced by an AsyncMock; no network access.
"""
from __future__ import annotations

from unittest.mock import AsyncMock

from aiogram.exceptions import TelegramForbiddenError
from aiogram.methods import SendMessage

from challenge_bot.errors import FileMissingError, RequiredFieldError
from challenge_bot.models.entities import RegistrationStatus
from challenge_bot.services.formatting import (
    format_stats_text,
    md,
    registration_card,
    validation_errors_text,
)
from challenge_bot.services.lifecycle_service import compute_stats
from challenge_bot.services.notification_service import (
    notify_new_submission,
    notify_status_changed,
    status_text,
)


def _blocked() -> TelegramForbiddenError:
    return TelegramForbiddenError(
        method=SendMessage(chat_id=1, text="x"),
        message="Forbidden: bot was blocked by the user",
    )


class TestNotifyStatusChanged:

    async def test_sends_to_rider(self, make_registration) -> None:
        bot = AsyncMock()
        r = make_registration(user_id=77, status=RegistrationStatus.APPROVED)
        await notify_status_changed(bot, r)

        bot.send_message.assert_awaited_once()
        kwargs = bot.send_message.await_args.kwargs
        assert kwargs["chat_id"] == 77
        assert "approved" in kwargs["text"]

    async def test_blocked_rider_is_ignored(self, make_registration) -> None:
        bot = AsyncMock()
        bot.send_message.side_effect = _blocked()
        await notify_status_changed(bot, make_registration(status=RegistrationStatus.REJECTED))


class TestNotifyNewSubmission:

    async def test_counts_delivered_messages(self, make_registration) -> None:
        bot = AsyncMock()
        bot.send_message.side_effect = [None, _blocked(), None]
        delivered = await notify_new_submission(bot, make_registration(), [1, 2, 3])
        assert delivered == 2
        assert bot.send_message.await_count == 3

    async def test_no_admins(self, make_registration) -> None:
        bot = AsyncMock()
        assert await notify_new_submission(bot, make_registration(), []) == 0
        bot.send_message.assert_not_awaited()


class TestFormatting:

    def test_md_escapes_markup(self) -> None:
        assert md("a_b*c`d[e") == "a\\_b\\*c\\`d\\[e"

    def test_status_text_uses_status_message(self, make_registration) -> None:
        text = status_text(make_registration(status=RegistrationStatus.REJECTED))
        assert RegistrationStatus.MESSAGES[RegistrationStatus.REJECTED] in text

    def test_rider_card_hides_payment_link(self, make_registration) -> None:
        r = make_registration(full_name="Asha_P")
        card = registration_card(r)
        assert "Asha\\_P" in card
        assert r.payment_screenshot_url not in card
        assert RegistrationStatus.MESSAGES[RegistrationStatus.PENDING] in card

    def test_admin_card_shows_payment_link(self, make_registration) -> None:
        r = make_registration()
        assert r.payment_screenshot_url in registration_card(r, admin_view=True)

    def test_validation_errors_listed(self) -> None:
        text = validation_errors_text([RequiredFieldError("full_name"), FileMissingError()])
        assert "Full name is required" in text
        assert "Please upload payment confirmation screenshot" in text

    def test_stats_text(self, make_registration) -> None:
        stats = compute_stats([
            make_registration(payment_tier="basic", status=RegistrationStatus.APPROVED),
            make_registration(payment_tier="plus", status=RegistrationStatus.APPROVED),
        ])
        text = format_stats_text(stats)
        assert "₹598" in text
        assert "50%" in text

    def test_stats_text_without_approvals(self) -> None:
        assert "No approved registrations yet" in format_stats_text(compute_stats([]))
