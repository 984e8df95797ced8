"""
Admin dashboard: registration counts, approved revenue and package split.
"""
import logging

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import CallbackQuery
from sqlalchemy.ext.asyncio import AsyncSession

from challenge_bot.keyboards import AdminPanelCb, stats_kb
from challenge_bot.middlewares import AdminOnly
from challenge_bot.services import compute_stats, fetch_registrations_for_admin, format_stats_text

logger = logging.getLogger(__name__)
router = Router(name="admin_stats")
router.callback_query.filter(AdminOnly())


@router.callback_query(AdminPanelCb.filter(F.action == "stats"))
async def cq_dashboard(callback: CallbackQuery, session: AsyncSession) -> None:
    registrations = await fetch_registrations_for_admin(session)
    stats = compute_stats(registrations)
    try:
        await callback.message.edit_text(
            format_stats_text(stats),
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=stats_kb(),
        )
    except TelegramBadRequest:
        # "message is not modified" on refresh without changes
        pass
    await callback.answer()
