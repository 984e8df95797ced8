"""
Global fallback handler — included LAST in the dispatcher.

Catches any callback query that no other router handled.
Prevents infinite Telegram spinners from:
  - Stale keyboards after bot restart (MemoryStorage is wiped on redeploy)
  - Callbacks pressed outside the FSM step they belong to
"""
from aiogram import Router
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery

from challenge_bot.keyboards import admin_main_menu, back_to_main

router = Router(name="fallback")


@router.callback_query()
async def cq_fallback(
    callback: CallbackQuery,
    state: FSMContext,
    is_admin: bool = False,
) -> None:
    await callback.answer("⚠️ This button has expired. Please start again.", show_alert=True)
    await state.clear()
    try:
        await callback.message.edit_text(
            "🔄 *Session reset.* Go back to the main menu:",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=admin_main_menu() if is_admin else back_to_main(),
        )
    except TelegramBadRequest:
        pass   # message too old to edit, or unchanged
