"""
Keyboards for the admin panel: registrations list, filters and review.
"""
from typing import List

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from challenge_bot.keyboards.callbacks import (
    AdminPanelCb,
    FilterCb,
    PageCb,
    RegistrationCb,
)
from challenge_bot.models.entities import PaymentTier, Registration, RegistrationStatus
from challenge_bot.services.lifecycle_service import ALL, RegistrationFilter

PAGE_SIZE = 8


def page_count(total: int) -> int:
    return max(1, (total + PAGE_SIZE - 1) // PAGE_SIZE)


def _filter_row(kind: str, options: tuple, current: str) -> List[InlineKeyboardButton]:
    return [
        InlineKeyboardButton(
            text=("• " if value == current else "") + value.capitalize(),
            callback_data=FilterCb(kind=kind, value=value).pack(),
        )
        for value in (ALL, *options)
    ]


def registration_list_kb(
    registrations: List[Registration],
    criteria: RegistrationFilter,
    page: int = 0,
) -> InlineKeyboardMarkup:
    """Filter toggles, one page of registrations, pagination and search."""
    builder = InlineKeyboardBuilder()
    builder.row(*_filter_row("status", RegistrationStatus.ALL, criteria.status_filter))
    builder.row(*_filter_row("tier", PaymentTier.ALL, criteria.tier_filter))

    pages = page_count(len(registrations))
    page = min(max(page, 0), pages - 1)
    for r in registrations[page * PAGE_SIZE:(page + 1) * PAGE_SIZE]:
        builder.row(
            InlineKeyboardButton(
                text=f"{r.status_emoji} {r.full_name} · {PaymentTier.EMOJI.get(r.payment_tier, '')} {r.payment_tier}",
                callback_data=RegistrationCb(action="view", rid=r.id, page=page).pack(),
            )
        )

    if pages > 1:
        nav = []
        if page > 0:
            nav.append(InlineKeyboardButton(text="◀️", callback_data=PageCb(page=page - 1).pack()))
        nav.append(InlineKeyboardButton(text=f"{page + 1}/{pages}", callback_data="noop"))
        if page < pages - 1:
            nav.append(InlineKeyboardButton(text="▶️", callback_data=PageCb(page=page + 1).pack()))
        builder.row(*nav)

    builder.row(
        InlineKeyboardButton(text="🔍 Search", callback_data=AdminPanelCb(action="search").pack()),
        InlineKeyboardButton(text="♻️ Reset",  callback_data=AdminPanelCb(action="clear_filters").pack()),
    )
    builder.row(InlineKeyboardButton(text="🔙 Back", callback_data=AdminPanelCb(action="back").pack()))
    return builder.as_markup()


def registration_detail_admin_kb(r: Registration, page: int = 0) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    if r.is_pending:
        builder.row(
            InlineKeyboardButton(
                text="✅ Approve",
                callback_data=RegistrationCb(action="approve", rid=r.id, page=page).pack(),
            ),
            InlineKeyboardButton(
                text="❌ Reject",
                callback_data=RegistrationCb(action="reject", rid=r.id, page=page).pack(),
            ),
        )
    builder.row(InlineKeyboardButton(text="🔙 To list", callback_data=PageCb(page=page).pack()))
    return builder.as_markup()


def search_cancel_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="❌ Cancel", callback_data=PageCb(page=0).pack()))
    return builder.as_markup()


def stats_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="🔄 Refresh", callback_data=AdminPanelCb(action="stats").pack()))
    builder.row(InlineKeyboardButton(text="🔙 Back",    callback_data=AdminPanelCb(action="back").pack()))
    return builder.as_markup()
