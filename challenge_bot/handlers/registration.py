"""
Rider self-registration FSM handler.

Flow:
  "Register" → choose package → full name → mobile → address
             → [delivery address] → gender → [t-shirt size]
             → Strava link → where heard → payment screenshot
             → confirm → saved ✅
"""
import logging
from typing import Optional

from aiogram import Bot, F, Router
from aiogram.enums import ParseMode
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from sqlalchemy.ext.asyncio import AsyncSession

from challenge_bot.config import settings
from challenge_bot.errors import DuplicateRegistrationError, StorageError, UnknownTierError
from challenge_bot.keyboards import (
    FormOptionCb, MainMenuCb, TierCb,
    cancel_registration_kb, confirm_registration_kb, gender_kb,
    rider_main_menu, tier_kb, tshirt_size_kb, where_heard_kb,
)
from challenge_bot.models.entities import Actor
from challenge_bot.models.tiers import TierDefinition, get_tier
from challenge_bot.services import (
    can_submit, create_registration, fetch_registration_for_user,
    insert_registration, notify_new_submission, storage,
    tier_overview_text, validation_errors_text,
)
from challenge_bot.services.formatting import md
from challenge_bot.states import RegistrationStates
from challenge_bot.validators import (
    TSHIRT_SIZES,
    WHERE_HEARD_OPTIONS,
    AttachedFile,
    RegistrationDraft,
    validate,
)

logger = logging.getLogger(__name__)
router = Router(name="registration")


async def _current_tier(state: FSMContext) -> TierDefinition:
    data = await state.get_data()
    return get_tier(data.get("tier_id"))


async def _ask_text(message: Message, state: FSMContext, next_state, prompt: str) -> None:
    await state.set_state(next_state)
    await message.answer(prompt, parse_mode=ParseMode.MARKDOWN, reply_markup=cancel_registration_kb())


# ── Entry: "Register" button ──────────────────────────────────────────────────

@router.callback_query(MainMenuCb.filter(F.action == "register"))
async def cq_start_registration(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
    actor: Optional[Actor],
) -> None:
    if actor is None or not actor.email:
        await callback.answer("Sign up with your e-mail first: /signup", show_alert=True)
        return

    existing = await fetch_registration_for_user(session, actor.user_id)
    if not can_submit(actor.user_id, existing):
        await callback.answer("You have already registered for the challenge.", show_alert=True)
        return

    await state.clear()
    await state.update_data(email_address=actor.email)
    await state.set_state(RegistrationStates.choose_tier)
    await callback.message.edit_text(
        f"{tier_overview_text()}\n\n*Choose your package:*",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=tier_kb(),
    )
    await callback.answer()


# ── Step 1: package ───────────────────────────────────────────────────────────

@router.callback_query(TierCb.filter(), RegistrationStates.choose_tier)
async def cq_tier_selected(
    callback: CallbackQuery,
    callback_data: TierCb,
    state: FSMContext,
) -> None:
    try:
        tier = get_tier(callback_data.tier)
    except UnknownTierError:
        await callback.answer("Unknown package.", show_alert=True)
        return

    await state.update_data(tier_id=tier.tier_id)
    await state.set_state(RegistrationStates.enter_full_name)
    await callback.message.edit_text(
        f"{tier.emoji} *{tier.label}* — {tier.price_display}\n\n"
        f"Enter your *full name*:",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=cancel_registration_kb(),
    )
    await callback.answer()


@router.message(RegistrationStates.choose_tier)
async def msg_tier_hint(message: Message) -> None:
    await message.answer("👆 Please pick a package using the buttons:", reply_markup=tier_kb())


# ── Step 2: full name ─────────────────────────────────────────────────────────

@router.message(RegistrationStates.enter_full_name)
async def msg_full_name(message: Message, state: FSMContext) -> None:
    name = message.text.strip() if message.text else ""
    if len(name) < 2:
        await message.answer(
            "⚠️ Name is too short. Enter your full name:",
            reply_markup=cancel_registration_kb(),
        )
        return

    await state.update_data(full_name=name)
    await _ask_text(
        message, state, RegistrationStates.enter_mobile,
        f"👤 *{md(name)}*\n\nEnter your *mobile number*:",
    )


# ── Step 3: mobile ────────────────────────────────────────────────────────────

@router.message(RegistrationStates.enter_mobile)
async def msg_mobile(message: Message, state: FSMContext) -> None:
    mobile = message.text.strip() if message.text else ""
    digits = sum(ch.isdigit() for ch in mobile)
    if digits < 7:
        await message.answer(
            "⚠️ Enter a valid mobile number, e.g. `98765 43210`:",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=cancel_registration_kb(),
        )
        return

    await state.update_data(mobile_number=mobile)
    await _ask_text(
        message, state, RegistrationStates.enter_full_address,
        "🏠 Enter your *full address*:",
    )


# ── Step 4: address (+ delivery address) ──────────────────────────────────────

@router.message(RegistrationStates.enter_full_address)
async def msg_full_address(message: Message, state: FSMContext) -> None:
    address = message.text.strip() if message.text else ""
    if not address:
        await message.answer("⚠️ Address cannot be empty:", reply_markup=cancel_registration_kb())
        return

    await state.update_data(full_address=address)
    tier = await _current_tier(state)
    if tier.requires_delivery_address:
        await _ask_text(
            message, state, RegistrationStates.enter_delivery_address,
            "📮 Enter the *delivery address* for your medal "
            "(with PIN code):",
        )
        return

    await state.set_state(RegistrationStates.choose_gender)
    await message.answer("Select your *gender*:", parse_mode=ParseMode.MARKDOWN, reply_markup=gender_kb())


@router.message(RegistrationStates.enter_delivery_address)
async def msg_delivery_address(message: Message, state: FSMContext) -> None:
    address = message.text.strip() if message.text else ""
    if not address:
        await message.answer("⚠️ Delivery address cannot be empty:", reply_markup=cancel_registration_kb())
        return

    await state.update_data(delivery_address=address)
    await state.set_state(RegistrationStates.choose_gender)
    await message.answer("Select your *gender*:", parse_mode=ParseMode.MARKDOWN, reply_markup=gender_kb())


# ── Step 5: gender (+ t-shirt size) ───────────────────────────────────────────

@router.callback_query(FormOptionCb.filter(F.field == "gender"), RegistrationStates.choose_gender)
async def cq_gender(callback: CallbackQuery, callback_data: FormOptionCb, state: FSMContext) -> None:
    await state.update_data(gender=callback_data.value)
    tier = await _current_tier(state)

    if tier.requires_tshirt_size:
        await state.set_state(RegistrationStates.choose_tshirt_size)
        await callback.message.edit_text(
            f"🚻 Gender: *{callback_data.value}*\n\nSelect your *T-shirt size*:",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=tshirt_size_kb(),
        )
    else:
        await state.set_state(RegistrationStates.enter_strava)
        await callback.message.edit_text(
            f"🚻 Gender: *{callback_data.value}*\n\nSend your *Strava profile link*:",
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=cancel_registration_kb(),
        )
    await callback.answer()


@router.callback_query(FormOptionCb.filter(F.field == "tshirt_size"), RegistrationStates.choose_tshirt_size)
async def cq_tshirt_size(callback: CallbackQuery, callback_data: FormOptionCb, state: FSMContext) -> None:
    await state.update_data(tshirt_size=callback_data.value)
    await state.set_state(RegistrationStates.enter_strava)
    await callback.message.edit_text(
        f"👕 Size: *{TSHIRT_SIZES.get(callback_data.value, callback_data.value)}*\n\n"
        f"Send your *Strava profile link*:",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=cancel_registration_kb(),
    )
    await callback.answer()


@router.message(RegistrationStates.choose_gender)
async def msg_gender_hint(message: Message) -> None:
    await message.answer("👆 Please choose using the buttons:", reply_markup=gender_kb())


@router.message(RegistrationStates.choose_tshirt_size)
async def msg_tshirt_hint(message: Message) -> None:
    await message.answer("👆 Please choose using the buttons:", reply_markup=tshirt_size_kb())


# ── Step 6: Strava ────────────────────────────────────────────────────────────

@router.message(RegistrationStates.enter_strava)
async def msg_strava(message: Message, state: FSMContext) -> None:
    link = message.text.strip() if message.text else ""
    if not link:
        await message.answer("⚠️ Send your Strava profile link:", reply_markup=cancel_registration_kb())
        return

    await state.update_data(strava_profile_link=link)
    await state.set_state(RegistrationStates.choose_where_heard)
    await message.answer(
        "📣 Where did you hear about the challenge?",
        reply_markup=where_heard_kb(),
    )


# ── Step 7: where heard ───────────────────────────────────────────────────────

@router.callback_query(FormOptionCb.filter(F.field == "where_heard"), RegistrationStates.choose_where_heard)
async def cq_where_heard(callback: CallbackQuery, callback_data: FormOptionCb, state: FSMContext) -> None:
    await state.update_data(where_heard=callback_data.value)
    await state.set_state(RegistrationStates.upload_screenshot)

    tier = await _current_tier(state)
    await callback.message.edit_text(
        f"💳 *Payment*\n\n"
        f"Pay *{tier.price_display}* for the {tier.emoji} {tier.label} package via UPI to:\n"
        f"`{settings.UPI_ID}`\n\n"
        f"Then send a *screenshot* of the payment (photo or image file, max 10 MB).",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=cancel_registration_kb(),
    )
    await callback.answer()


@router.message(RegistrationStates.choose_where_heard)
async def msg_where_heard_hint(message: Message) -> None:
    await message.answer("👆 Please choose using the buttons:", reply_markup=where_heard_kb())


# ── Step 8: payment screenshot ────────────────────────────────────────────────

def _attachment_from(message: Message) -> Optional[tuple]:
    """(file_id, AttachedFile) for a photo or document message, else None."""
    if message.photo:
        photo = message.photo[-1]   # largest size
        return photo.file_id, AttachedFile(
            name=f"{photo.file_unique_id}.jpg",
            size_bytes=photo.file_size or 0,
            mime_type="image/jpeg",
        )
    if message.document:
        doc = message.document
        return doc.file_id, AttachedFile(
            name=doc.file_name or doc.file_unique_id,
            size_bytes=doc.file_size or 0,
            mime_type=doc.mime_type or "",
        )
    return None


@router.message(RegistrationStates.upload_screenshot, F.photo | F.document)
async def msg_screenshot(message: Message, state: FSMContext) -> None:
    file_id, attached = _attachment_from(message)

    draft = RegistrationDraft.from_state(await state.get_data()).with_field("file", attached)
    file_errors = [e for e in validate(draft) if e.field == "file"]
    if file_errors:
        await message.answer(
            validation_errors_text(file_errors),
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=cancel_registration_kb(),
        )
        return

    await state.update_data(file=attached.model_dump(), file_id=file_id)
    await state.set_state(RegistrationStates.confirm)
    await message.answer(
        _summary_text(draft),
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=confirm_registration_kb(),
    )


@router.message(RegistrationStates.upload_screenshot)
async def msg_screenshot_hint(message: Message) -> None:
    await message.answer(
        "📎 Please send the payment screenshot as a photo or an image file.",
        reply_markup=cancel_registration_kb(),
    )


def _summary_text(draft: RegistrationDraft) -> str:
    tier = get_tier(draft.tier_id)
    lines = [
        "📝 *Check your registration:*",
        "",
        f"📦 Package: {tier.emoji} {tier.label} ({tier.price_display})",
        f"👤 Name: {md(draft.full_name)}",
        f"📱 Mobile: {md(draft.mobile_number)}",
        f"✉️ E-mail: {md(draft.email_address)}",
        f"🏠 Address: {md(draft.full_address)}",
    ]
    if tier.requires_delivery_address:
        lines.append(f"📮 Delivery: {md(draft.delivery_address)}")
    lines.append(f"🚻 Gender: {md(draft.gender)}")
    if tier.requires_tshirt_size:
        lines.append(f"👕 T-shirt: {TSHIRT_SIZES.get(draft.tshirt_size, md(draft.tshirt_size))}")
    lines += [
        f"🔗 Strava: {md(draft.strava_profile_link)}",
        f"📣 Heard via: {md(WHERE_HEARD_OPTIONS.get(draft.where_heard, draft.where_heard))}",
        f"🧾 Screenshot: {md(draft.file.name) if draft.file else '—'}",
    ]
    return "\n".join(lines)


# ── Step 9: confirm ───────────────────────────────────────────────────────────

@router.callback_query(F.data == "reg_confirm", RegistrationStates.confirm)
async def cq_confirm_registration(
    callback: CallbackQuery,
    bot: Bot,
    session: AsyncSession,
    state: FSMContext,
    actor: Optional[Actor],
) -> None:
    if actor is None or not actor.email:
        await state.clear()
        await callback.answer("Sign up with your e-mail first: /signup", show_alert=True)
        return

    existing = await fetch_registration_for_user(session, actor.user_id)
    if not can_submit(actor.user_id, existing):
        await state.clear()
        await callback.answer("You have already registered for the challenge.", show_alert=True)
        return

    data = await state.get_data()
    draft = RegistrationDraft.from_state(data)
    errors = validate(draft)
    if errors:
        await callback.message.edit_text(
            validation_errors_text(errors),
            parse_mode=ParseMode.MARKDOWN,
            reply_markup=confirm_registration_kb(),
        )
        await callback.answer()
        return

    await callback.answer("⏳ Submitting…")
    try:
        content = await bot.download(data["file_id"])
        uploaded = await storage.upload_screenshot(
            actor.user_id, draft.file.name, content.read(), mime_type=draft.file.mime_type,
        )
    except StorageError:
        logger.exception("Screenshot upload failed for user_id=%d", actor.user_id)
        await callback.message.answer(
            "⚠️ Could not store your payment screenshot. Please try again.",
            reply_markup=confirm_registration_kb(),
        )
        return

    registration = create_registration(draft, uploaded, actor.user_id)
    try:
        registration = await insert_registration(session, registration)
    except DuplicateRegistrationError:
        # nothing references the screenshot we just stored
        try:
            await storage.delete_screenshot(uploaded)
        except StorageError:
            logger.warning("Could not remove orphaned screenshot %s", uploaded.name)
        await state.clear()
        await callback.message.edit_text(
            "ℹ️ You have already registered for the challenge.",
            reply_markup=rider_main_menu(has_registration=True),
        )
        return

    await state.clear()
    tier = get_tier(registration.payment_tier)
    await callback.message.edit_text(
        f"🎉 *Registration submitted!*\n\n"
        f"━━━━━━━━━━━━━━━━━━\n"
        f"🚴 *{md(settings.CHALLENGE_NAME)}*\n"
        f"━━━━━━━━━━━━━━━━━━\n\n"
        f"👤 {md(registration.full_name)}\n"
        f"📦 {tier.emoji} {tier.label} ({tier.price_display})\n"
        f"📌 Status: {registration.status_emoji} Pending\n\n"
        f"We will verify your payment and notify you here. 🔔",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=rider_main_menu(has_registration=True),
    )
    await notify_new_submission(bot, registration, settings.admin_ids_list)


@router.callback_query(F.data == "reg_edit", RegistrationStates.confirm)
async def cq_edit_registration(callback: CallbackQuery, state: FSMContext) -> None:
    """Go back to the name step, keeping package and e-mail."""
    data = await state.get_data()
    await state.set_data({"tier_id": data.get("tier_id"), "email_address": data.get("email_address")})
    await state.set_state(RegistrationStates.enter_full_name)
    await callback.message.edit_text(
        "✏️ Enter your *full name* again:",
        parse_mode=ParseMode.MARKDOWN,
        reply_markup=cancel_registration_kb(),
    )
    await callback.answer()
