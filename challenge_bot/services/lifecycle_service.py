"""
Registration lifecycle — creation, status transitions and reporting.

Every function here is pure: it takes the current state from the caller and
returns the new state. Persisting the result is the data store's job
(see registration_service).

Status machine
--------------
    pending ──► approved
       └──────► rejected
approved / rejected are terminal.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from challenge_bot.errors import InvalidDraftError, InvalidTransitionError, UnauthorizedError
from challenge_bot.models.entities import (
    Actor,
    PaymentTier,
    Registration,
    RegistrationStatus,
    UploadedFile,
)
from challenge_bot.models.tiers import get_tier
from challenge_bot.validators import RegistrationDraft, ensure_valid

ALL = "all"


def _utcnow() -> datetime:
    return datetime.utcnow()


# ── Submission ────────────────────────────────────────────────────────────────

def can_submit(
    user_id: int,
    existing: Union[Registration, Sequence[Registration], None],
) -> bool:
    """
    True iff the user has no registration yet.

    `existing` is whatever the caller fetched for `user_id` — a single
    registration, a list of them, or None. The database unique constraint on
    user_id is the final guard; this check keeps duplicates from reaching it.
    """
    if existing is None:
        return True
    if isinstance(existing, Registration):
        return False
    return len(existing) == 0


def create_registration(
    draft: RegistrationDraft,
    uploaded_file: UploadedFile,
    user_id: int,
    *,
    registration_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Registration:
    """Assemble a pending Registration from a validated draft."""
    ensure_valid(draft)
    if not uploaded_file.url.strip() or not uploaded_file.name.strip():
        raise InvalidDraftError(message="Payment screenshot was not stored")

    tier = get_tier(draft.tier_id)
    now = now or _utcnow()
    return Registration(
        id=registration_id or str(uuid.uuid4()),
        user_id=user_id,
        full_name=draft.full_name.strip(),
        mobile_number=draft.mobile_number.strip(),
        email_address=draft.email_address.strip(),
        full_address=draft.full_address.strip(),
        gender=draft.gender.strip(),
        strava_profile_link=draft.strava_profile_link.strip(),
        tshirt_size=draft.tshirt_size.strip() if tier.requires_tshirt_size else "",
        delivery_address=draft.delivery_address.strip() if tier.requires_delivery_address else "",
        payment_screenshot_url=uploaded_file.url,
        payment_screenshot_name=uploaded_file.name,
        where_heard=draft.where_heard.strip(),
        payment_tier=tier.tier_id,
        status=RegistrationStatus.PENDING,
        created_at=now,
        updated_at=now,
    )


# ── Review ────────────────────────────────────────────────────────────────────

def transition_status(
    registration: Registration,
    new_status: str,
    actor: Actor,
    is_administrator: Callable[[Optional[str]], bool],
    *,
    now: Optional[datetime] = None,
) -> Registration:
    """
    Approve or reject a pending registration.

    The actor's capability is checked before anything else. Returns an updated
    copy; `registration` itself is left untouched.
    """
    if not is_administrator(actor.email):
        raise UnauthorizedError()
    if (
        registration.status != RegistrationStatus.PENDING
        or new_status not in RegistrationStatus.TERMINAL
    ):
        raise InvalidTransitionError(registration.status, new_status)
    return registration.with_status(new_status, now or _utcnow())


# ── Reporting ─────────────────────────────────────────────────────────────────

def _zero_by_tier() -> Dict[str, int]:
    return {t: 0 for t in PaymentTier.ALL}


@dataclass
class RegistrationStats:
    """Aggregated dashboard figures over a set of registrations."""
    total:                      int = 0
    count_by_status:            Dict[str, int] = field(
        default_factory=lambda: {s: 0 for s in RegistrationStatus.ALL}
    )
    revenue_by_tier:            Dict[str, int] = field(default_factory=_zero_by_tier)
    tier_distribution_approved: Dict[str, int] = field(default_factory=_zero_by_tier)
    tier_percentages:           Dict[str, int] = field(default_factory=_zero_by_tier)

    @property
    def total_revenue(self) -> int:
        return sum(self.revenue_by_tier.values())

    @property
    def approved_count(self) -> int:
        return self.count_by_status[RegistrationStatus.APPROVED]


def _percent(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return int((Decimal(part) * 100 / Decimal(whole)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_stats(registrations: Iterable[Registration]) -> RegistrationStats:
    """
    Revenue and distribution only count approved registrations; pending and
    rejected ones appear in the status counts alone.
    """
    stats = RegistrationStats()
    for r in registrations:
        stats.total += 1
        if r.status in stats.count_by_status:
            stats.count_by_status[r.status] += 1
        if r.status == RegistrationStatus.APPROVED:
            tier = get_tier(r.payment_tier)
            stats.revenue_by_tier[tier.tier_id] += tier.price_amount
            stats.tier_distribution_approved[tier.tier_id] += 1

    approved = sum(stats.tier_distribution_approved.values())
    stats.tier_percentages = {
        t: _percent(n, approved) for t, n in stats.tier_distribution_approved.items()
    }
    return stats


# ── Admin list filtering ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class RegistrationFilter:
    search_term:   str = ""
    status_filter: str = ALL
    tier_filter:   str = ALL

    @property
    def is_empty(self) -> bool:
        return not self.search_term.strip() and self.status_filter == ALL and self.tier_filter == ALL


def _compact(value: str) -> str:
    return "".join(ch for ch in value if not ch.isspace())


def _matches_search(r: Registration, term: str) -> bool:
    needle = term.strip().lower()
    if not needle:
        return True
    return (
        needle in r.full_name.lower()
        or needle in r.email_address.lower()
        or _compact(needle) in _compact(r.mobile_number)
    )


def filter_registrations(
    registrations: Iterable[Registration],
    search_term: str = "",
    status_filter: str = ALL,
    tier_filter: str = ALL,
) -> List[Registration]:
    """Stable filter: search AND status AND tier; input order is preserved."""
    return [
        r for r in registrations
        if (status_filter == ALL or r.status == status_filter)
        and (tier_filter == ALL or r.payment_tier == tier_filter)
        and _matches_search(r, search_term)
    ]


def apply_filter(
    registrations: Iterable[Registration],
    criteria: RegistrationFilter,
) -> List[Registration]:
    return filter_registrations(
        registrations,
        search_term=criteria.search_term,
        status_filter=criteria.status_filter,
        tier_filter=criteria.tier_filter,
    )
