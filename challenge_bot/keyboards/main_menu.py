"""
Main menu keyboards — rider vs. admin.
"""
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from challenge_bot.keyboards.callbacks import MainMenuCb, AdminPanelCb


def rider_main_menu(has_registration: bool = False, signed_up: bool = True) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    if not signed_up:
        builder.row(
            InlineKeyboardButton(text="✉️ Sign up with e-mail", callback_data=MainMenuCb(action="signup").pack()),
        )
    elif has_registration:
        builder.row(
            InlineKeyboardButton(text="📋 My registration",     callback_data=MainMenuCb(action="my_registration").pack()),
        )
    else:
        builder.row(
            InlineKeyboardButton(text="🚴 Register now",        callback_data=MainMenuCb(action="register").pack()),
        )
    builder.row(
        InlineKeyboardButton(text="📦 Packages",               callback_data=MainMenuCb(action="packages").pack()),
    )
    return builder.as_markup()


def admin_main_menu() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="👥 Registrations",          callback_data=AdminPanelCb(action="list").pack()),
    )
    builder.row(
        InlineKeyboardButton(text="📊 Dashboard",              callback_data=AdminPanelCb(action="stats").pack()),
    )
    return builder.as_markup()


def back_to_main() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="🔙 Main menu", callback_data=MainMenuCb(action="main").pack()))
    return builder.as_markup()
