"""
Unit tests — Registration validation (validators.py).

Covers:
  - required base fields, reported together and in form order
  - package-dependent delivery address / t-shirt size
  - payment screenshot presence, size limit and image type
  - SignupData e-mail normalisation

All tests are synchronous; no database session required.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from challenge_bot.errors import (
    FileMissingError,
    FileTooLargeError,
    FileTypeError,
    InvalidDraftError,
    MissingTierError,
    RequiredFieldError,
    UnknownTierError,
)
from challenge_bot.validators import (
    MAX_FILE_SIZE_BYTES,
    AttachedFile,
    RegistrationDraft,
    SignupData,
    ensure_valid,
    validate,
)


def _png(size: int = 1024) -> AttachedFile:
    return AttachedFile(name="pay.png", size_bytes=size, mime_type="image/png")


# ─────────────────────────── Base fields ──────────────────────────────────────

class TestBaseFields:

    def test_complete_basic_draft_is_valid(self, make_draft) -> None:
        assert validate(make_draft()) == []

    def test_missing_fields_and_file_reported_together(self, make_draft) -> None:
        draft = make_draft(full_name="", mobile_number="", gender="", file=None)
        errors = validate(draft)
        assert len(errors) == 4
        assert [e.field for e in errors] == ["full_name", "mobile_number", "gender", "file"]
        assert isinstance(errors[-1], FileMissingError)

    def test_whitespace_only_counts_as_missing(self, make_draft) -> None:
        errors = validate(make_draft(full_address="   "))
        assert errors == [RequiredFieldError("full_address")]

    def test_required_message_names_the_field(self) -> None:
        assert RequiredFieldError("full_name").message == "Full name is required"


class TestTier:

    def test_missing_tier_raises(self, make_draft) -> None:
        with pytest.raises(MissingTierError):
            validate(make_draft(tier_id=None))

    def test_blank_tier_raises(self, make_draft) -> None:
        with pytest.raises(MissingTierError):
            validate(make_draft(tier_id="  "))

    def test_unknown_tier_raises(self, make_draft) -> None:
        with pytest.raises(UnknownTierError):
            validate(make_draft(tier_id="gold"))


# ─────────────────────────── Package-dependent fields ─────────────────────────

class TestConditionalFields:

    def test_basic_ignores_blank_delivery_and_size(self, make_draft) -> None:
        assert validate(make_draft(tier_id="basic", delivery_address="", tshirt_size="")) == []

    def test_plus_requires_delivery_address(self, make_draft) -> None:
        errors = validate(make_draft(tier_id="plus"))
        assert errors == [RequiredFieldError("delivery_address")]

    def test_plus_does_not_require_tshirt(self, make_draft) -> None:
        assert validate(make_draft(tier_id="plus", delivery_address="Flat 4, Pune 411001")) == []

    def test_premium_blank_tshirt_size(self, make_draft) -> None:
        errors = validate(make_draft(tier_id="premium", delivery_address="Flat 4, Pune 411001"))
        assert errors == [RequiredFieldError("tshirt_size")]

    def test_premium_missing_both_in_order(self, make_draft) -> None:
        errors = validate(make_draft(tier_id="premium"))
        assert [e.field for e in errors] == ["delivery_address", "tshirt_size"]

    def test_premium_complete(self, make_draft) -> None:
        draft = make_draft(tier_id="premium", delivery_address="Flat 4, Pune 411001", tshirt_size="M")
        assert validate(draft) == []


# ─────────────────────────── Payment screenshot ───────────────────────────────

class TestFile:

    def test_exactly_at_limit_is_accepted(self, make_draft) -> None:
        assert validate(make_draft(file=_png(MAX_FILE_SIZE_BYTES))) == []

    def test_one_byte_over_limit(self, make_draft) -> None:
        errors = validate(make_draft(file=_png(MAX_FILE_SIZE_BYTES + 1)))
        assert len(errors) == 1
        assert isinstance(errors[0], FileTooLargeError)
        assert errors[0].message == "File size must be less than 10MB"

    def test_pdf_rejected(self, make_draft) -> None:
        pdf = AttachedFile(name="pay.pdf", size_bytes=1000, mime_type="application/pdf")
        errors = validate(make_draft(file=pdf))
        assert len(errors) == 1
        assert isinstance(errors[0], FileTypeError)

    def test_large_pdf_reports_both_problems(self, make_draft) -> None:
        pdf = AttachedFile(name="pay.pdf", size_bytes=MAX_FILE_SIZE_BYTES * 2, mime_type="application/pdf")
        errors = validate(make_draft(file=pdf))
        assert [type(e) for e in errors] == [FileTooLargeError, FileTypeError]

    @pytest.mark.parametrize("mime", ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"])
    def test_allowed_image_types(self, make_draft, mime: str) -> None:
        f = AttachedFile(name="pay", size_bytes=10, mime_type=mime)
        assert validate(make_draft(file=f)) == []

    def test_mime_type_is_normalised(self) -> None:
        assert AttachedFile(name="a", size_bytes=1, mime_type=" Image/PNG ").mime_type == "image/png"

    def test_negative_size_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            AttachedFile(name="a", size_bytes=-1, mime_type="image/png")


# ─────────────────────────── Helpers ──────────────────────────────────────────

class TestDraftHelpers:

    def test_ensure_valid_carries_errors(self, make_draft) -> None:
        with pytest.raises(InvalidDraftError) as exc:
            ensure_valid(make_draft(full_name="", file=None))
        assert [e.field for e in exc.value.errors] == ["full_name", "file"]

    def test_from_state_ignores_unrelated_keys(self) -> None:
        draft = RegistrationDraft.from_state({
            "tier_id": "plus",
            "full_name": "Ravi",
            "file_id": "AgACAgIAAxkBAAI",
            "flt_status": "all",
            "file": {"name": "a.jpg", "size_bytes": 5, "mime_type": "image/jpeg"},
        })
        assert draft.tier_id == "plus"
        assert draft.full_name == "Ravi"
        assert draft.file.name == "a.jpg"

    def test_with_field_returns_updated_copy(self) -> None:
        draft = RegistrationDraft()
        updated = draft.with_field("gender", "Other")
        assert updated.gender == "Other"
        assert draft.gender == ""

    def test_with_field_unknown_name(self) -> None:
        with pytest.raises(KeyError):
            RegistrationDraft().with_field("bodyweight", 80)


class TestSignupData:

    def test_email_lowercased_and_stripped(self) -> None:
        assert SignupData(email="  Rider@Example.COM ").email == "rider@example.com"

    @pytest.mark.parametrize("bad", ["", "rider", "rider@", "@example.com", "a b@example.com"])
    def test_invalid_email(self, bad: str) -> None:
        with pytest.raises(PydanticValidationError):
            SignupData(email=bad)
