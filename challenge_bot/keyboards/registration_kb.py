"""
Keyboards for the rider registration FSM flow.
"""
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from challenge_bot.keyboards.callbacks import FormOptionCb, MainMenuCb, TierCb
from challenge_bot.models.tiers import list_tiers
from challenge_bot.validators import GENDERS, TSHIRT_SIZES, WHERE_HEARD_OPTIONS


def _cancel_row(builder: InlineKeyboardBuilder) -> None:
    builder.row(InlineKeyboardButton(text="❌ Cancel", callback_data=MainMenuCb(action="main").pack()))


def tier_kb() -> InlineKeyboardMarkup:
    """One button per package, in display order."""
    builder = InlineKeyboardBuilder()
    for tier in list_tiers():
        builder.row(
            InlineKeyboardButton(
                text=f"{tier.emoji} {tier.label} — {tier.price_display}",
                callback_data=TierCb(tier=tier.tier_id).pack(),
            )
        )
    _cancel_row(builder)
    return builder.as_markup()


def gender_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(*[
        InlineKeyboardButton(
            text=g, callback_data=FormOptionCb(field="gender", value=g).pack()
        )
        for g in GENDERS
    ])
    _cancel_row(builder)
    return builder.as_markup()


def tshirt_size_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(*[
        InlineKeyboardButton(
            text=label, callback_data=FormOptionCb(field="tshirt_size", value=size).pack()
        )
        for size, label in TSHIRT_SIZES.items()
    ])
    builder.adjust(3, 2)
    _cancel_row(builder)
    return builder.as_markup()


def where_heard_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for value, label in WHERE_HEARD_OPTIONS.items():
        builder.row(
            InlineKeyboardButton(
                text=label, callback_data=FormOptionCb(field="where_heard", value=value).pack()
            )
        )
    _cancel_row(builder)
    return builder.as_markup()


def cancel_registration_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    _cancel_row(builder)
    return builder.as_markup()


def confirm_registration_kb() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="✅ Submit",     callback_data="reg_confirm"),
        InlineKeyboardButton(text="✏️ Start over", callback_data="reg_edit"),
    )
    _cancel_row(builder)
    return builder.as_markup()
