"""
Registration form validation — Pydantic v2 models.

`RegistrationDraft` is the transient form the user fills step by step in the
bot. `validate()` checks it against the selected package and returns every
problem at once so the user can fix them in one go.
"""
from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, field_validator

from challenge_bot.errors import (
    FileMissingError,
    FileTooLargeError,
    FileTypeError,
    InvalidDraftError,
    MissingTierError,
    RequiredFieldError,
    ValidationError,
)
from challenge_bot.models.tiers import get_tier

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024   # 10 MiB

ALLOWED_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
})

BASE_REQUIRED_FIELDS = (
    "full_name",
    "mobile_number",
    "email_address",
    "full_address",
    "gender",
    "strava_profile_link",
    "where_heard",
    "tier_id",
)

# Form option lists (keyboards only; the validator requires non-blank values)
GENDERS = ("Male", "Female", "Other")

TSHIRT_SIZES = {
    "S":   'S (36")',
    "M":   'M (38")',
    "L":   'L (40")',
    "XL":  'XL (42")',
    "XXL": 'XXL (44")',
}

WHERE_HEARD_OPTIONS = {
    "Instagram":             "Instagram",
    "Facebook":              "Facebook",
    "WhatsApp":              "WhatsApp Group",
    "Previous Participants": "Previous Participants",
    "Cycling Group":         "Local Cycling Group",
    "Friends":               "Friends & Family",
    "Other":                 "Other",
}

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AttachedFile(BaseModel):
    """Payment screenshot attached to a draft (metadata only)."""

    name: str
    size_bytes: int
    mime_type: str

    @field_validator("size_bytes")
    @classmethod
    def validate_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError("File size cannot be negative")
        return v

    @field_validator("mime_type")
    @classmethod
    def normalize_mime_type(cls, v: str) -> str:
        return v.strip().lower()


class RegistrationDraft(BaseModel):
    """
    In-progress registration form.

    Attributes
    ----------
    tier_id : selected package, None until the user picks one
    file    : attached payment screenshot, None until uploaded
    """

    full_name: str = ""
    mobile_number: str = ""
    email_address: str = ""
    full_address: str = ""
    gender: str = ""
    strava_profile_link: str = ""
    where_heard: str = ""
    delivery_address: str = ""
    tshirt_size: str = ""
    tier_id: Optional[str] = None
    file: Optional[AttachedFile] = None

    def with_field(self, name: str, value: Any) -> "RegistrationDraft":
        if name not in type(self).model_fields:
            raise KeyError(name)
        return self.model_validate({**self.model_dump(), name: value})

    @classmethod
    def from_state(cls, data: Mapping[str, Any]) -> "RegistrationDraft":
        """Build a draft from FSM storage, ignoring unrelated keys."""
        return cls.model_validate(
            {k: v for k, v in data.items() if k in cls.model_fields}
        )


class SignupData(BaseModel):
    """E-mail captured by /signup."""

    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if len(v) > 320 or not _EMAIL_RE.match(v):
            raise ValueError("Please enter a valid e-mail address")
        return v


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def validate(draft: RegistrationDraft) -> List[ValidationError]:
    """
    Check a draft against its package requirements.

    Raises MissingTierError / UnknownTierError when the package is absent or
    unknown. Every other problem is returned, in form order; an empty list
    means the draft can be submitted.
    """
    if _is_blank(draft.tier_id):
        raise MissingTierError()
    tier = get_tier(draft.tier_id)

    errors: List[ValidationError] = [
        RequiredFieldError(name)
        for name in BASE_REQUIRED_FIELDS
        if _is_blank(getattr(draft, name))
    ]

    if tier.requires_delivery_address and _is_blank(draft.delivery_address):
        errors.append(RequiredFieldError("delivery_address"))
    if tier.requires_tshirt_size and _is_blank(draft.tshirt_size):
        errors.append(RequiredFieldError("tshirt_size"))

    f = draft.file
    if f is None:
        errors.append(FileMissingError())
    else:
        if f.size_bytes > MAX_FILE_SIZE_BYTES:
            errors.append(FileTooLargeError(f.size_bytes, MAX_FILE_SIZE_BYTES))
        if f.mime_type not in ALLOWED_MIME_TYPES:
            errors.append(FileTypeError(f.mime_type))

    return errors


def ensure_valid(draft: RegistrationDraft) -> None:
    errors = validate(draft)
    if errors:
        raise InvalidDraftError(errors)
