"""
Admin panel entry point and registration review.

The list view keeps its filter (search term, status, package) in FSM data so
it survives paging and returning from the detail card.
"""
import logging
from typing import Optional

from aiogram import Bot, F, Router
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from sqlalchemy.ext.asyncio import AsyncSession

from challenge_bot.config import settings
from challenge_bot.errors import InvalidTransitionError, RegistrationNotFoundError, UnauthorizedError
from challenge_bot.keyboards import (
    AdminPanelCb, FilterCb, PageCb, RegistrationCb,
    admin_main_menu, registration_detail_admin_kb, registration_list_kb, search_cancel_kb,
)
from challenge_bot.middlewares import AdminOnly, IsAdmin
from challenge_bot.models.entities import Actor, PaymentTier, RegistrationStatus
from challenge_bot.services import (
    ALL, RegistrationFilter,
    apply_filter, fetch_registrations_for_admin, get_registration,
    notify_status_changed, registration_card, transition_status,
    update_registration_status,
)
from challenge_bot.services.formatting import md
from challenge_bot.states import AdminSearchStates

logger = logging.getLogger(__name__)
router = Router(name="admin_panel")
router.callback_query.filter(AdminOnly())

_FILTER_KEYS = {"search": "flt_search", "status": "flt_status", "tier": "flt_tier"}


async def _load_filter(state: FSMContext) -> RegistrationFilter:
    data = await state.get_data()
    return RegistrationFilter(
        search_term=data.get(_FILTER_KEYS["search"], ""),
        status_filter=data.get(_FILTER_KEYS["status"], ALL),
        tier_filter=data.get(_FILTER_KEYS["tier"], ALL),
    )


def _list_text(criteria: RegistrationFilter, shown: int, total: int) -> str:
    lines = [f"👥 *Registrations* — `{shown}` of `{total}`"]
    if not criteria.is_empty:
        lines.append("")
        if criteria.search_term.strip():
            lines.append(f"🔍 Search: _{md(criteria.search_term.strip())}_")
        if criteria.status_filter != ALL:
            lines.append(f"📌 Status: {criteria.status_filter}")
        if criteria.tier_filter != ALL:
            lines.append(f"📦 Package: {criteria.tier_filter}")
    if shown == 0:
        lines += ["", "_No registrations match._"]
    return "\n".join(lines)


async def _render_list(
    target: Message,
    session: AsyncSession,
    state: FSMContext,
    page: int = 0,
    edit: bool = True,
) -> None:
    criteria = await _load_filter(state)
    everything = await fetch_registrations_for_admin(session)
    shown = apply_filter(everything, criteria)

    text = _list_text(criteria, len(shown), len(everything))
    kb = registration_list_kb(shown, criteria, page)
    if edit:
        await target.edit_text(text, parse_mode=ParseMode.MARKDOWN, reply_markup=kb)
    else:
        await target.answer(text, parse_mode=ParseMode.MARKDOWN, reply_markup=kb)


# ── Admin home (back) ─────────────────────────────────────────────────────────

@router.callback_query(AdminPanelCb.filter(F.action == "back"))
async def cq_admin_home(callback: CallbackQuery, state: FSMContext) -> None:
    await state.clear()
    await callback.message.edit_text(
        "⚡ *Admin panel*\n\nChoose a section:",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=admin_main_menu(),
    )
    await callback.answer()


# ── List, filters, paging ─────────────────────────────────────────────────────

@router.callback_query(AdminPanelCb.filter(F.action == "list"))
async def cq_registration_list(callback: CallbackQuery, session: AsyncSession, state: FSMContext) -> None:
    await _render_list(callback.message, session, state)
    await callback.answer()


@router.callback_query(PageCb.filter())
async def cq_registration_page(
    callback: CallbackQuery,
    callback_data: PageCb,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    await state.set_state(None)
    await _render_list(callback.message, session, state, page=callback_data.page)
    await callback.answer()


@router.callback_query(FilterCb.filter())
async def cq_registration_filter(
    callback: CallbackQuery,
    callback_data: FilterCb,
    session: AsyncSession,
    state: FSMContext,
) -> None:
    allowed = RegistrationStatus.ALL if callback_data.kind == "status" else PaymentTier.ALL
    value = callback_data.value if callback_data.value in allowed else ALL
    await state.update_data({_FILTER_KEYS[callback_data.kind]: value})
    await _render_list(callback.message, session, state)
    await callback.answer()


@router.callback_query(AdminPanelCb.filter(F.action == "clear_filters"))
async def cq_clear_filters(callback: CallbackQuery, session: AsyncSession, state: FSMContext) -> None:
    await state.clear()
    await _render_list(callback.message, session, state)
    await callback.answer("Filters cleared")


# ── Search ────────────────────────────────────────────────────────────────────

@router.callback_query(AdminPanelCb.filter(F.action == "search"))
async def cq_search(callback: CallbackQuery, state: FSMContext) -> None:
    await state.set_state(AdminSearchStates.enter_search)
    await callback.message.edit_text(
        "🔍 Send a *name*, *e-mail* or *mobile number* fragment:",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=search_cancel_kb(),
    )
    await callback.answer()


@router.message(AdminSearchStates.enter_search, IsAdmin())
async def msg_search(message: Message, session: AsyncSession, state: FSMContext) -> None:
    term = message.text.strip() if message.text else ""
    await state.update_data({_FILTER_KEYS["search"]: term})
    await state.set_state(None)
    await _render_list(message, session, state, edit=False)


# ── Detail & review ───────────────────────────────────────────────────────────

@router.callback_query(RegistrationCb.filter(F.action == "view"))
async def cq_registration_detail(
    callback: CallbackQuery,
    callback_data: RegistrationCb,
    session: AsyncSession,
) -> None:
    r = await get_registration(session, callback_data.rid)
    if r is None:
        await callback.answer("Registration not found.", show_alert=True)
        return

    await callback.message.edit_text(
        registration_card(r, admin_view=True),
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=registration_detail_admin_kb(r, callback_data.page),
        disable_web_page_preview=True,
    )
    await callback.answer()


@router.callback_query(RegistrationCb.filter(F.action.in_({"approve", "reject"})))
async def cq_review_registration(
    callback: CallbackQuery,
    callback_data: RegistrationCb,
    bot: Bot,
    session: AsyncSession,
    actor: Optional[Actor],
) -> None:
    r = await get_registration(session, callback_data.rid)
    if r is None:
        await callback.answer("Registration not found.", show_alert=True)
        return

    target = (
        RegistrationStatus.APPROVED if callback_data.action == "approve"
        else RegistrationStatus.REJECTED
    )
    try:
        updated = transition_status(r, target, actor, settings.is_administrator)
        await update_registration_status(session, updated.id, updated.status, updated.updated_at)
    except UnauthorizedError:
        await callback.answer("⛔️ Access denied.", show_alert=True)
        return
    except InvalidTransitionError as e:
        await callback.answer(f"⚠️ {e}", show_alert=True)
        # another review landed first; show what is stored now
        current = await get_registration(session, r.id)
        if current is not None:
            try:
                await callback.message.edit_text(
                    registration_card(current, admin_view=True),
                    parse_mode=ParseMode.MARKDOWN,
                    reply_markup=registration_detail_admin_kb(current, callback_data.page),
                    disable_web_page_preview=True,
                )
            except TelegramBadRequest:
                pass
        return
    except RegistrationNotFoundError:
        await callback.answer("Registration not found.", show_alert=True)
        return

    logger.info(
        "Registration %s %s by telegram_id=%d", updated.id, updated.status, actor.user_id,
    )
    await notify_status_changed(bot, updated)

    await callback.answer(f"{updated.status_emoji} {updated.status.capitalize()}")
    await callback.message.edit_text(
        registration_card(updated, admin_view=True),
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=registration_detail_admin_kb(updated, callback_data.page),
        disable_web_page_preview=True,
    )
