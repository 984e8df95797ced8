from challenge_bot.middlewares.db_middleware import DatabaseMiddleware
from challenge_bot.middlewares.auth_middleware import AdminOnly, AuthMiddleware, IsAdmin

__all__ = ["DatabaseMiddleware", "AuthMiddleware", "AdminOnly", "IsAdmin"]
