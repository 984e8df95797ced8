"""
Authentication middleware.

Attaches `actor: Actor | None` and `is_admin: bool` to handler data for all
updates. Must run after DatabaseMiddleware (needs `session`).
AdminOnly (below) gates whole routers silently; IsAdmin answers "Access denied"
and belongs on individual handlers.
"""
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.filters import BaseFilter
from aiogram.types import CallbackQuery, Message, TelegramObject

from challenge_bot.config import settings
from challenge_bot.services.auth_service import actor_for
from challenge_bot.services.registration_service import get_user


class AuthMiddleware(BaseMiddleware):
    """
    Resolves the Telegram sender to an Actor.
    Applied globally — individual routers restrict access via filters.
    """

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        tg_user = data.get("event_from_user")
        session = data.get("session")
        actor = None
        if tg_user is not None and session is not None:
            actor = actor_for(await get_user(session, tg_user.id))
        data["actor"] = actor
        data["is_admin"] = bool(actor and settings.is_administrator(actor.email))
        return await handler(event, data)


# ── Reusable filter ──────────────────────────────────────────────────────────

class IsAdmin(BaseFilter):
    """Use on individual routers/handlers to restrict access to admins."""

    async def __call__(self, event: Message | CallbackQuery, is_admin: bool = False) -> bool:
        if not is_admin:
            if isinstance(event, Message):
                await event.answer("⛔️ Access denied.")
            elif isinstance(event, CallbackQuery):
                await event.answer("⛔️ Access denied.", show_alert=True)
        return is_admin


class AdminOnly(BaseFilter):
    """
    Router-level gate that rejects without answering, so a rider's callback
    falls through to the fallback router instead of being claimed here.
    """

    async def __call__(self, event: TelegramObject, is_admin: bool = False) -> bool:
        return is_admin
