from challenge_bot.models.tiers import TierDefinition, build_catalog, get_tier, list_tiers
from challenge_bot.services.lifecycle_service import (
    ALL, RegistrationFilter, RegistrationStats,
    can_submit, create_registration, transition_status,
    compute_stats, filter_registrations, apply_filter,
)
from challenge_bot.services.registration_service import (
    upsert_user, get_user, get_user_by_email, link_email,
    fetch_registrations_for_admin, fetch_registration_for_user,
    get_registration, insert_registration, update_registration_status,
)
from challenge_bot.services.storage_service import ObjectStorage, screenshot_path, storage
from challenge_bot.services.auth_service import actor_for, may_claim_email, sign_up
from challenge_bot.services.notification_service import notify_status_changed, notify_new_submission
from challenge_bot.services.formatting import (
    md, registration_card, format_stats_text, tier_overview_text, validation_errors_text,
)

__all__ = [
    # tier catalog
    "TierDefinition", "build_catalog", "get_tier", "list_tiers",
    # lifecycle
    "ALL", "RegistrationFilter", "RegistrationStats",
    "can_submit", "create_registration", "transition_status",
    "compute_stats", "filter_registrations", "apply_filter",
    # data store
    "upsert_user", "get_user", "get_user_by_email", "link_email",
    "fetch_registrations_for_admin", "fetch_registration_for_user",
    "get_registration", "insert_registration", "update_registration_status",
    # storage
    "ObjectStorage", "screenshot_path", "storage",
    # auth
    "actor_for", "may_claim_email", "sign_up",
    # notifications
    "notify_status_changed", "notify_new_submission",
    # formatting
    "md", "registration_card", "format_stats_text", "tier_overview_text",
    "validation_errors_text",
]
