from challenge_bot.models.base import Base, engine, AsyncSessionFactory
from challenge_bot.models.entities import (
    Actor,
    PaymentTier,
    Registration,
    RegistrationStatus,
    UploadedFile,
)
from challenge_bot.models.models import User, RegistrationRecord
from challenge_bot.models.tiers import TierDefinition, get_tier, list_tiers

__all__ = [
    "Base",
    "engine",
    "AsyncSessionFactory",
    "Actor",
    "PaymentTier",
    "Registration",
    "RegistrationStatus",
    "UploadedFile",
    "User",
    "RegistrationRecord",
    "TierDefinition",
    "get_tier",
    "list_tiers",
]
