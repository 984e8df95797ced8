"""
Unit tests — Registration lifecycle (services/lifecycle_service.py).

Covers:
  - can_submit: one registration per user
  - create_registration: pending entity from a valid draft
  - transition_status: admin-only, pending → approved / rejected only
  - compute_stats: counts, approved revenue, package split percentages
  - filter_registrations: search / status / package, stable order

All tests are synchronous; no database session required.
"""
from __future__ import annotations

from datetime import datetime

import pytest

from challenge_bot.config import make_admin_predicate
from challenge_bot.errors import InvalidDraftError, InvalidTransitionError, UnauthorizedError
from challenge_bot.models.entities import Actor, RegistrationStatus, UploadedFile
from challenge_bot.services.lifecycle_service import (
    ALL,
    RegistrationFilter,
    apply_filter,
    can_submit,
    compute_stats,
    create_registration,
    filter_registrations,
    transition_status,
)

is_admin = make_admin_predicate(["admin@club.in"])
ADMIN = Actor(user_id=1, email="admin@club.in")
RIDER = Actor(user_id=2, email="rider@example.com")
UPLOADED = UploadedFile(url="http://files/registrations/payment-screenshots/2_1.png", name="2_1.png")


# ─────────────────────────── can_submit ───────────────────────────────────────

class TestCanSubmit:

    def test_no_registration(self) -> None:
        assert can_submit(2, None)
        assert can_submit(2, [])

    def test_existing_registration(self, make_registration) -> None:
        r = make_registration(user_id=2)
        assert not can_submit(2, r)
        assert not can_submit(2, [r])

    def test_existing_registration_of_any_status(self, make_registration) -> None:
        r = make_registration(user_id=2, status=RegistrationStatus.REJECTED)
        assert not can_submit(2, [r])


# ─────────────────────────── create_registration ──────────────────────────────

class TestCreateRegistration:

    def test_creates_pending_registration(self, make_draft) -> None:
        now = datetime(2025, 8, 10, 9, 30)
        r = create_registration(make_draft(), UPLOADED, user_id=2, registration_id="r-1", now=now)
        assert r.id == "r-1"
        assert r.user_id == 2
        assert r.status == RegistrationStatus.PENDING
        assert r.payment_tier == "basic"
        assert r.payment_screenshot_url == UPLOADED.url
        assert r.payment_screenshot_name == "2_1.png"
        assert r.created_at == r.updated_at == now

    def test_generates_unique_ids(self, make_draft) -> None:
        a = create_registration(make_draft(), UPLOADED, user_id=2)
        b = create_registration(make_draft(), UPLOADED, user_id=2)
        assert a.id != b.id

    def test_values_are_trimmed(self, make_draft) -> None:
        r = create_registration(make_draft(full_name="  Asha Patil "), UPLOADED, user_id=2)
        assert r.full_name == "Asha Patil"

    def test_basic_drops_fields_it_does_not_collect(self, make_draft) -> None:
        draft = make_draft(delivery_address="Somewhere", tshirt_size="XL")
        r = create_registration(draft, UPLOADED, user_id=2)
        assert r.delivery_address == ""
        assert r.tshirt_size == ""

    def test_premium_keeps_delivery_and_size(self, make_draft) -> None:
        draft = make_draft(tier_id="premium", delivery_address="Flat 4, Pune", tshirt_size="L")
        r = create_registration(draft, UPLOADED, user_id=2)
        assert r.delivery_address == "Flat 4, Pune"
        assert r.tshirt_size == "L"

    def test_invalid_draft_rejected(self, make_draft) -> None:
        with pytest.raises(InvalidDraftError):
            create_registration(make_draft(tier_id="plus"), UPLOADED, user_id=2)

    def test_missing_upload_rejected(self, make_draft) -> None:
        with pytest.raises(InvalidDraftError):
            create_registration(make_draft(), UploadedFile(url="", name=""), user_id=2)


# ─────────────────────────── transition_status ────────────────────────────────

class TestTransitionStatus:

    def test_admin_approves_pending(self, make_registration) -> None:
        r = make_registration()
        now = datetime(2025, 8, 12)
        updated = transition_status(r, RegistrationStatus.APPROVED, ADMIN, is_admin, now=now)
        assert updated.status == RegistrationStatus.APPROVED
        assert updated.updated_at == now
        assert updated.id == r.id
        assert r.status == RegistrationStatus.PENDING   # original untouched

    def test_admin_rejects_pending(self, make_registration) -> None:
        updated = transition_status(make_registration(), RegistrationStatus.REJECTED, ADMIN, is_admin)
        assert updated.status == RegistrationStatus.REJECTED

    def test_non_admin_is_unauthorized(self, make_registration) -> None:
        with pytest.raises(UnauthorizedError):
            transition_status(make_registration(), RegistrationStatus.APPROVED, RIDER, is_admin)

    def test_actor_without_email_is_unauthorized(self, make_registration) -> None:
        with pytest.raises(UnauthorizedError):
            transition_status(make_registration(), RegistrationStatus.APPROVED, Actor(user_id=3), is_admin)

    def test_authorization_checked_before_transition(self, make_registration) -> None:
        r = make_registration(status=RegistrationStatus.APPROVED)
        with pytest.raises(UnauthorizedError):
            transition_status(r, RegistrationStatus.REJECTED, RIDER, is_admin)

    @pytest.mark.parametrize("current", [RegistrationStatus.APPROVED, RegistrationStatus.REJECTED])
    def test_terminal_states_are_final(self, make_registration, current: str) -> None:
        r = make_registration(status=current)
        for target in RegistrationStatus.ALL:
            with pytest.raises(InvalidTransitionError):
                transition_status(r, target, ADMIN, is_admin)

    @pytest.mark.parametrize("target", [RegistrationStatus.PENDING, "archived"])
    def test_invalid_target(self, make_registration, target: str) -> None:
        with pytest.raises(InvalidTransitionError):
            transition_status(make_registration(), target, ADMIN, is_admin)


# ─────────────────────────── compute_stats ────────────────────────────────────

class TestComputeStats:

    def test_empty(self) -> None:
        stats = compute_stats([])
        assert stats.total == 0
        assert stats.total_revenue == 0
        assert stats.count_by_status == {"pending": 0, "approved": 0, "rejected": 0}
        assert stats.tier_percentages == {"basic": 0, "plus": 0, "premium": 0}

    def test_revenue_counts_approved_only(self, make_registration) -> None:
        regs = [
            make_registration(payment_tier="basic", status=RegistrationStatus.APPROVED),
            make_registration(payment_tier="plus", status=RegistrationStatus.APPROVED),
            make_registration(payment_tier="premium", status=RegistrationStatus.PENDING),
            make_registration(payment_tier="premium", status=RegistrationStatus.REJECTED),
        ]
        stats = compute_stats(regs)
        assert stats.total == 4
        assert stats.count_by_status == {"pending": 1, "approved": 2, "rejected": 1}
        assert stats.revenue_by_tier == {"basic": 199, "plus": 399, "premium": 0}
        assert stats.total_revenue == 598
        assert stats.tier_distribution_approved == {"basic": 1, "plus": 1, "premium": 0}
        assert stats.tier_percentages == {"basic": 50, "plus": 50, "premium": 0}

    def test_percentages_round_half_up(self, make_registration) -> None:
        regs = (
            [make_registration(payment_tier="basic", status=RegistrationStatus.APPROVED)]
            + [make_registration(payment_tier="plus", status=RegistrationStatus.APPROVED)] * 7
        )
        stats = compute_stats(regs)
        # 1/8 = 12.5 % → 13, 7/8 = 87.5 % → 88
        assert stats.tier_percentages == {"basic": 13, "plus": 88, "premium": 0}

    def test_thirds(self, make_registration) -> None:
        regs = [
            make_registration(payment_tier=t, status=RegistrationStatus.APPROVED)
            for t in ("basic", "plus", "premium")
        ]
        stats = compute_stats(regs)
        assert stats.tier_percentages == {"basic": 33, "plus": 33, "premium": 33}
        assert stats.total_revenue == 199 + 399 + 799

    def test_nothing_approved(self, make_registration) -> None:
        stats = compute_stats([make_registration(), make_registration()])
        assert stats.count_by_status["pending"] == 2
        assert stats.approved_count == 0
        assert stats.total_revenue == 0
        assert stats.tier_percentages == {"basic": 0, "plus": 0, "premium": 0}

    def test_accepts_generator(self, make_registration) -> None:
        stats = compute_stats(make_registration() for _ in range(3))
        assert stats.total == 3


# ─────────────────────────── filter_registrations ─────────────────────────────

@pytest.fixture
def sample(make_registration):
    return [
        make_registration(full_name="Asha Patil", email_address="asha@example.com",
                          mobile_number="98765 43210", payment_tier="basic"),
        make_registration(full_name="Ravi Kumar", email_address="ravi@cycling.in",
                          mobile_number="+91 91234 56789", payment_tier="plus",
                          status=RegistrationStatus.APPROVED),
        make_registration(full_name="Meera Shah", email_address="MEERA@example.com",
                          mobile_number="9000000001", payment_tier="premium",
                          status=RegistrationStatus.REJECTED),
    ]


class TestFilterRegistrations:

    def test_no_criteria_returns_everything_in_order(self, sample) -> None:
        assert filter_registrations(sample) == sample

    def test_name_search_case_insensitive(self, sample) -> None:
        assert [r.full_name for r in filter_registrations(sample, "ravi")] == ["Ravi Kumar"]

    def test_email_search(self, sample) -> None:
        result = filter_registrations(sample, "example.com")
        assert [r.full_name for r in result] == ["Asha Patil", "Meera Shah"]

    def test_mobile_search_ignores_spaces(self, sample) -> None:
        assert [r.full_name for r in filter_registrations(sample, "9123456")] == ["Ravi Kumar"]
        assert [r.full_name for r in filter_registrations(sample, "98765 432")] == ["Asha Patil"]

    def test_status_filter(self, sample) -> None:
        result = filter_registrations(sample, status_filter=RegistrationStatus.APPROVED)
        assert [r.full_name for r in result] == ["Ravi Kumar"]

    def test_status_filter_keeps_input_order(self, make_registration) -> None:
        rows = [
            make_registration(full_name="Zoya Khan", status=RegistrationStatus.APPROVED),
            make_registration(full_name="Asha Patil"),
            make_registration(full_name="Arjun Rao", status=RegistrationStatus.APPROVED),
            make_registration(full_name="Meera Shah", status=RegistrationStatus.REJECTED),
            make_registration(full_name="Dev Iyer", status=RegistrationStatus.APPROVED),
        ]
        result = filter_registrations(rows, status_filter=RegistrationStatus.APPROVED)
        assert [r.full_name for r in result] == ["Zoya Khan", "Arjun Rao", "Dev Iyer"]
        assert all(r in rows for r in result)

    def test_tier_filter(self, sample) -> None:
        result = filter_registrations(sample, tier_filter="premium")
        assert [r.full_name for r in result] == ["Meera Shah"]

    def test_criteria_are_combined(self, sample) -> None:
        result = filter_registrations(sample, "example", RegistrationStatus.PENDING, "basic")
        assert [r.full_name for r in result] == ["Asha Patil"]
        assert filter_registrations(sample, "ravi", tier_filter="basic") == []

    def test_blank_search_matches_all(self, sample) -> None:
        assert filter_registrations(sample, "   ") == sample

    def test_apply_filter(self, sample) -> None:
        criteria = RegistrationFilter(status_filter=RegistrationStatus.REJECTED)
        assert apply_filter(sample, criteria) == [sample[2]]
        assert not criteria.is_empty
        assert RegistrationFilter(search_term=" ", status_filter=ALL).is_empty
