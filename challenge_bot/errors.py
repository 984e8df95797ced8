"""
Registration domain errors.

Validation errors are collected as values by the validator and rendered to the
submitting user field by field; the remaining errors are raised at the
boundary that detected them and handled in the bot handlers.
"""
from __future__ import annotations

from typing import Optional, Sequence


class RegistrationError(Exception):
    """Base class for registration domain errors."""


# ── Validation (user-recoverable) ─────────────────────────────────────────────

class ValidationError(RegistrationError):
    """A single problem with a registration draft."""

    field: str = ""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        if field is not None:
            self.field = field

    @property
    def message(self) -> str:
        return str(self.args[0])

    def __eq__(self, other: object) -> bool:
        return (
            type(self) is type(other)
            and self.field == other.field           # type: ignore[attr-defined]
            and self.message == other.message       # type: ignore[attr-defined]
        )

    def __hash__(self) -> int:
        return hash((type(self), self.field, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(field={self.field!r})"


class RequiredFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        label = field.replace("_", " ")
        super().__init__(f"{label.capitalize()} is required", field=field)


class FileMissingError(ValidationError):
    field = "file"

    def __init__(self) -> None:
        super().__init__("Please upload payment confirmation screenshot")


class FileTooLargeError(ValidationError):
    field = "file"

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"File size must be less than {limit_bytes // (1024 * 1024)}MB"
        )


class FileTypeError(ValidationError):
    field = "file"

    def __init__(self, mime_type: str) -> None:
        self.mime_type = mime_type
        super().__init__("Please upload an image file (JPEG, PNG, GIF, or WebP)")


# ── Programmer / input errors ─────────────────────────────────────────────────

class UnknownTierError(RegistrationError):
    def __init__(self, tier_id: object) -> None:
        self.tier_id = tier_id
        super().__init__(f"Unknown payment tier: {tier_id!r}")


class MissingTierError(RegistrationError):
    def __init__(self) -> None:
        super().__init__("No payment tier selected")


class InvalidDraftError(RegistrationError):
    """Raised when a draft that fails validation reaches entity creation."""

    def __init__(self, errors: Sequence[ValidationError] = (), message: str = "") -> None:
        self.errors = list(errors)
        if not message:
            message = "; ".join(e.message for e in self.errors) or "Invalid registration draft"
        super().__init__(message)


# ── Lifecycle ─────────────────────────────────────────────────────────────────

class UnauthorizedError(RegistrationError):
    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class InvalidTransitionError(RegistrationError):
    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change registration status from {current!r} to {requested!r}"
        )


# ── Collaborators ─────────────────────────────────────────────────────────────

class DuplicateRegistrationError(RegistrationError):
    def __init__(self, user_id: object) -> None:
        self.user_id = user_id
        super().__init__("You have already registered for this challenge")


class RegistrationNotFoundError(RegistrationError):
    def __init__(self, registration_id: object) -> None:
        self.registration_id = registration_id
        super().__init__(f"Registration {registration_id!r} not found")


class StorageError(RegistrationError):
    """Object storage rejected or failed to store a file."""
