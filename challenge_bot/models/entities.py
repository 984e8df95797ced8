"""
Domain value types for the challenge registration flow.

These are plain, immutable objects — the ORM rows in `models.py` are only the
storage format. Lifecycle functions take and return `Registration` values.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

# ─────────────────────────── Constants ────────────────────────────────────────

class PaymentTier:
    BASIC   = "basic"
    PLUS    = "plus"
    PREMIUM = "premium"

    ALL = (BASIC, PLUS, PREMIUM)   # display order

    EMOJI = {
        BASIC:   "🥉",
        PLUS:    "🥈",
        PREMIUM: "🥇",
    }


class RegistrationStatus:
    PENDING  = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    ALL      = (PENDING, APPROVED, REJECTED)
    TERMINAL = (APPROVED, REJECTED)

    EMOJI = {
        PENDING:  "⏳",
        APPROVED: "✅",
        REJECTED: "❌",
    }

    MESSAGES = {
        PENDING:  "We're reviewing your registration. You'll be notified once it's approved.",
        APPROVED: "Congratulations! Your registration has been approved. Get ready for the challenge!",
        REJECTED: "Your registration needs attention. Please contact us for more information.",
    }


# ─────────────────────────── Values ───────────────────────────────────────────

@dataclass(frozen=True)
class Actor:
    """The authenticated user performing an action."""
    user_id: int
    email:   Optional[str] = None


@dataclass(frozen=True)
class UploadedFile:
    """Result of storing a payment screenshot: public URL + stored object name."""
    url:  str
    name: str


@dataclass(frozen=True)
class Registration:
    """A user's completed challenge submission."""
    id:                      str
    user_id:                 int
    full_name:               str
    mobile_number:           str
    email_address:           str
    full_address:            str
    gender:                  str
    strava_profile_link:     str
    payment_screenshot_url:  str
    payment_screenshot_name: str
    where_heard:             str
    payment_tier:            str
    status:                  str = RegistrationStatus.PENDING
    tshirt_size:             str = ""
    delivery_address:        str = ""
    created_at:              Optional[datetime] = None
    updated_at:              Optional[datetime] = None

    def with_status(self, status: str, now: datetime) -> "Registration":
        return replace(self, status=status, updated_at=now)

    @property
    def status_emoji(self) -> str:
        return RegistrationStatus.EMOJI.get(self.status, "❓")

    @property
    def is_pending(self) -> bool:
        return self.status == RegistrationStatus.PENDING
