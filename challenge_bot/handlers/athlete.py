"""
Rider cabinet: "My registration" card with the current review status.
"""
import logging
from typing import Optional

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.types import CallbackQuery
from sqlalchemy.ext.asyncio import AsyncSession

from challenge_bot.keyboards import MainMenuCb, back_to_main, rider_main_menu
from challenge_bot.models.entities import Actor
from challenge_bot.services import fetch_registration_for_user, registration_card

logger = logging.getLogger(__name__)
router = Router(name="athlete")


@router.callback_query(MainMenuCb.filter(F.action == "my_registration"))
async def cq_my_registration(
    callback: CallbackQuery,
    session: AsyncSession,
    actor: Optional[Actor],
) -> None:
    if actor is None:
        await callback.answer("Profile not found. Send /start", show_alert=True)
        return

    registration = await fetch_registration_for_user(session, actor.user_id)
    if registration is None:
        await callback.message.edit_text(
            "📋 *My registration*\n\n_You have not registered yet._",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=rider_main_menu(signed_up=bool(actor.email)),
        )
    else:
        await callback.message.edit_text(
            registration_card(registration),
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=back_to_main(),
        )
    await callback.answer()
