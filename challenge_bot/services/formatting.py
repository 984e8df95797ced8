"""
Telegram message rendering for registrations and the admin dashboard.
"""
from __future__ import annotations

from typing import Iterable

from challenge_bot.config import settings
from challenge_bot.errors import ValidationError
from challenge_bot.models.entities import PaymentTier, Registration, RegistrationStatus
from challenge_bot.models.tiers import get_tier, list_tiers
from challenge_bot.services.lifecycle_service import RegistrationStats

_MD_SPECIAL = ("\\", "_", "*", "`", "[")


def md(value: object) -> str:
    """Escape user-supplied text for legacy Markdown parse mode."""
    text = str(value)
    for ch in _MD_SPECIAL:
        text = text.replace(ch, f"\\{ch}")
    return text


def money(amount: int) -> str:
    return f"{settings.CURRENCY_SYMBOL}{amount:,}"


def tier_overview_text() -> str:
    lines = [f"📦 *Packages*", ""]
    for tier in list_tiers():
        lines.append(f"{tier.emoji} *{tier.label}* — {tier.price_display}")
        lines.extend(f"   • {perk}" for perk in tier.perks)
    return "\n".join(lines)


def validation_errors_text(errors: Iterable[ValidationError]) -> str:
    lines = ["⚠️ *Please fix the following:*", ""]
    lines.extend(f"• {md(e.message)}" for e in errors)
    return "\n".join(lines)


def registration_card(r: Registration, admin_view: bool = False) -> str:
    """Render a registration summary card."""
    tier = get_tier(r.payment_tier)
    lines = [
        f"━━━━━━━━━━━━━━━━━━",
        f"🚴 *{md(r.full_name)}*",
        f"━━━━━━━━━━━━━━━━━━",
        "",
        f"📌 Status: {r.status_emoji} *{r.status.capitalize()}*",
        f"📦 Package: {tier.emoji} {tier.label} ({tier.price_display})",
        "",
        f"📱 Mobile: {md(r.mobile_number)}",
        f"✉️ E-mail: {md(r.email_address)}",
        f"🏠 Address: {md(r.full_address)}",
        f"🚻 Gender: {md(r.gender)}",
        f"👕 T-shirt: {md(r.tshirt_size) if r.tshirt_size else '_Not applicable_'}",
        f"📮 Delivery: {md(r.delivery_address) if r.delivery_address else '_Not required for this package_'}",
        f"🔗 Strava: {md(r.strava_profile_link)}",
        f"📣 Heard via: {md(r.where_heard)}",
    ]
    if admin_view:
        lines += [
            "",
            f"🧾 Payment: [{md(r.payment_screenshot_name)}]({r.payment_screenshot_url})",
        ]
        if r.created_at:
            lines.append(f"🕒 Submitted: `{r.created_at:%Y-%m-%d %H:%M}`")
    else:
        lines += ["", f"_{RegistrationStatus.MESSAGES.get(r.status, '')}_"]
    return "\n".join(lines)


def progress_bar(pct: float, length: int = 10) -> str:
    """ASCII progress bar: ████░░░░░░"""
    filled = round(pct / 100 * length)
    return "█" * filled + "░" * (length - filled)


def format_stats_text(stats: RegistrationStats) -> str:
    """Render the admin dashboard as a Markdown Telegram message."""
    lines = [
        f"📊 *{md(settings.CHALLENGE_NAME)} — Dashboard*",
        "",
        "━━━ 👥 Registrations ━━━",
        f"Total: `{stats.total}`",
    ]
    for status in RegistrationStatus.ALL:
        lines.append(
            f"{RegistrationStatus.EMOJI[status]} {status.capitalize()}: `{stats.count_by_status[status]}`"
        )

    lines += ["", "━━━ 💰 Revenue (approved) ━━━"]
    for tier_id in PaymentTier.ALL:
        tier = get_tier(tier_id)
        lines.append(f"{tier.emoji} {tier.label}: `{money(stats.revenue_by_tier[tier_id])}`")
    lines.append(f"*Total: `{money(stats.total_revenue)}`*")

    lines += ["", "━━━ 📦 Package split (approved) ━━━"]
    if stats.approved_count == 0:
        lines.append("_No approved registrations yet_")
    else:
        for tier_id in PaymentTier.ALL:
            tier = get_tier(tier_id)
            pct = stats.tier_percentages[tier_id]
            lines.append(
                f"{tier.label}: `{stats.tier_distribution_approved[tier_id]}` "
                f"— `{pct}%` {progress_bar(pct)}"
            )
    return "\n".join(lines)
