"""
E-mail sign-up: links an address to the Telegram account.

Flow:
  /signup (or "Sign up" button) → enter e-mail → linked ✅
"""
import logging

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from challenge_bot.config import settings
from challenge_bot.handlers.common import rider_menu_for
from challenge_bot.keyboards import MainMenuCb, admin_main_menu, back_to_main
from challenge_bot.services import get_user, sign_up
from challenge_bot.services.formatting import md
from challenge_bot.states import SignupStates
from challenge_bot.validators import SignupData

logger = logging.getLogger(__name__)
router = Router(name="signup")

_PROMPT = "✉️ Enter the *e-mail address* you want to use for the challenge:"


@router.message(Command("signup"))
async def cmd_signup(message: Message, session: AsyncSession, state: FSMContext) -> None:
    if await get_user(session, message.from_user.id) is None:
        await message.answer("Send /start first.")
        return
    await state.set_state(SignupStates.enter_email)
    await message.answer(_PROMPT, parse_mode=ParseMode.MARKDOWN, reply_markup=back_to_main())


@router.callback_query(MainMenuCb.filter(F.action == "signup"))
async def cq_signup(callback: CallbackQuery, state: FSMContext) -> None:
    await state.set_state(SignupStates.enter_email)
    await callback.message.edit_text(_PROMPT, parse_mode=ParseMode.MARKDOWN, reply_markup=back_to_main())
    await callback.answer()


@router.message(SignupStates.enter_email)
async def msg_email(
    message: Message,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    try:
        data = SignupData(email=message.text or "")
    except PydanticValidationError:
        await message.answer(
            "⚠️ That doesn't look like an e-mail address. Try again:",
            reply_markup=back_to_main(),
        )
        return

    new_actor, error = await sign_up(session, message.from_user.id, data.email)
    if error:
        await message.answer(f"⚠️ {error}", reply_markup=back_to_main())
        return

    await state.clear()
    logger.info("telegram_id=%d linked e-mail", message.from_user.id)

    if settings.is_administrator(new_actor.email):
        await message.answer(
            f"✅ Signed in as *{md(new_actor.email)}* (administrator).",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=admin_main_menu(),
        )
        return

    await message.answer(
        f"✅ E-mail *{md(new_actor.email)}* linked. You can register now.",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=await rider_menu_for(session, new_actor),
    )
