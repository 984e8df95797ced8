"""
Package tier catalog.

Three fixed packages (basic / plus / premium) with their price and the extra
form fields each one requires. Prices come from settings and are frozen at
import time.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from challenge_bot.config import settings
from challenge_bot.errors import UnknownTierError
from challenge_bot.models.entities import PaymentTier


@dataclass(frozen=True)
class TierDefinition:
    tier_id:                   str
    price_amount:              int
    requires_delivery_address: bool
    requires_tshirt_size:      bool
    label:                     str = ""
    perks:                     tuple[str, ...] = ()

    @property
    def price_display(self) -> str:
        return f"{settings.CURRENCY_SYMBOL}{self.price_amount}"

    @property
    def emoji(self) -> str:
        return PaymentTier.EMOJI.get(self.tier_id, "")


def build_catalog(
    basic_price: int,
    plus_price: int,
    premium_price: int,
) -> Dict[str, TierDefinition]:
    """Build the tier table. Insertion order is the display order."""
    return {
        PaymentTier.BASIC: TierDefinition(
            tier_id=PaymentTier.BASIC,
            price_amount=basic_price,
            requires_delivery_address=False,
            requires_tshirt_size=False,
            label="Basic",
            perks=("E-Certificate", "Challenge participation"),
        ),
        PaymentTier.PLUS: TierDefinition(
            tier_id=PaymentTier.PLUS,
            price_amount=plus_price,
            requires_delivery_address=True,
            requires_tshirt_size=False,
            label="Plus",
            perks=("E-Certificate", "Physical Medal"),
        ),
        PaymentTier.PREMIUM: TierDefinition(
            tier_id=PaymentTier.PREMIUM,
            price_amount=premium_price,
            requires_delivery_address=True,
            requires_tshirt_size=True,
            label="Premium",
            perks=("E-Certificate", "Physical Medal", "Dry Fit T-Shirt"),
        ),
    }


_CATALOG = build_catalog(settings.BASIC_PRICE, settings.PLUS_PRICE, settings.PREMIUM_PRICE)


def get_tier(tier_id: Optional[str]) -> TierDefinition:
    try:
        return _CATALOG[tier_id]  # type: ignore[index]
    except (KeyError, TypeError):
        raise UnknownTierError(tier_id) from None


def list_tiers() -> List[TierDefinition]:
    return list(_CATALOG.values())
