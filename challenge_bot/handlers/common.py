"""
Common handlers: /start, main menu routing, package overview.
"""
import logging
from typing import Optional

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.filters import CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, InlineKeyboardMarkup, Message
from sqlalchemy.ext.asyncio import AsyncSession

from challenge_bot.config import settings
from challenge_bot.keyboards import MainMenuCb, admin_main_menu, back_to_main, rider_main_menu
from challenge_bot.models.entities import Actor
from challenge_bot.services import fetch_registration_for_user, tier_overview_text, upsert_user
from challenge_bot.services.formatting import md

logger = logging.getLogger(__name__)
router = Router(name="common")


async def rider_menu_for(session: AsyncSession, actor: Optional[Actor]) -> InlineKeyboardMarkup:
    """Main menu matching the rider's progress: sign up → register → view."""
    if actor is None or not actor.email:
        return rider_main_menu(signed_up=False)
    existing = await fetch_registration_for_user(session, actor.user_id)
    return rider_main_menu(has_registration=existing is not None)


def challenge_info_text() -> str:
    return (
        f"📅 Registration closes: *{settings.REGISTRATION_DEADLINE}*\n"
        f"🏁 Challenge runs: *{settings.CHALLENGE_START_DATE}* → *{settings.CHALLENGE_END_DATE}*"
    )


# ── /start ────────────────────────────────────────────────────────────────────

@router.message(CommandStart())
async def cmd_start(
    message: Message,
    session: AsyncSession,
    state: FSMContext,
    actor: Optional[Actor],
    is_admin: bool,
) -> None:
    await state.clear()
    tg = message.from_user
    await upsert_user(
        session,
        telegram_id=tg.id,
        first_name=tg.first_name,
        last_name=tg.last_name,
        username=tg.username,
    )

    if is_admin:
        await _send_admin_welcome(message)
    else:
        await _send_rider_welcome(message, session, actor)


async def _send_rider_welcome(message: Message, session: AsyncSession, actor: Optional[Actor]) -> None:
    name = md(message.from_user.first_name)
    text = (
        f"🚴 Welcome to the *{md(settings.CHALLENGE_NAME)}*, {name}!\n"
        f"_by {md(settings.APP_NAME)}_\n\n"
        f"{challenge_info_text()}\n\n"
        f"{tier_overview_text()}\n\n"
    )
    if actor is None or not actor.email:
        text += "To get started, link your e-mail address with /signup."
    else:
        text += "Choose an action:"
    await message.answer(
        text,
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=await rider_menu_for(session, actor),
    )


async def _send_admin_welcome(message: Message) -> None:
    name = md(message.from_user.first_name)
    text = (
        f"⚡ *Admin panel* — {name}\n\n"
        f"Review payment screenshots, approve or reject registrations\n"
        f"and follow the challenge dashboard.\n\n"
        f"Choose a section:"
    )
    await message.answer(text, parse_mode=ParseMode.MARKDOWN, reply_markup=admin_main_menu())


# ── Main menu callback ────────────────────────────────────────────────────────

@router.callback_query(MainMenuCb.filter(F.action == "main"))
async def cq_main_menu(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
    actor: Optional[Actor],
    is_admin: bool,
) -> None:
    await state.clear()
    if is_admin:
        text = "⚡ *Admin panel*\n\nChoose a section:"
        kb   = admin_main_menu()
    else:
        text = f"🚴 *{md(settings.CHALLENGE_NAME)}*\n\n{challenge_info_text()}\n\nChoose an action:"
        kb   = await rider_menu_for(session, actor)

    await callback.message.edit_text(text, parse_mode=ParseMode.MARKDOWN, reply_markup=kb)
    await callback.answer()


# ── Packages ──────────────────────────────────────────────────────────────────

@router.callback_query(MainMenuCb.filter(F.action == "packages"))
async def cq_packages(callback: CallbackQuery) -> None:
    await callback.message.edit_text(
        tier_overview_text(),
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=back_to_main(),
    )
    await callback.answer()


@router.callback_query(F.data == "noop")
async def cq_noop(callback: CallbackQuery) -> None:
    await callback.answer()
