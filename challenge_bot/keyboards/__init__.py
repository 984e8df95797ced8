from challenge_bot.keyboards.callbacks import (
    MainMenuCb,
    TierCb,
    FormOptionCb,
    RegistrationCb,
    AdminPanelCb,
    FilterCb,
    PageCb,
)
from challenge_bot.keyboards.main_menu import rider_main_menu, admin_main_menu, back_to_main
from challenge_bot.keyboards.registration_kb import (
    tier_kb,
    gender_kb,
    tshirt_size_kb,
    where_heard_kb,
    cancel_registration_kb,
    confirm_registration_kb,
)
from challenge_bot.keyboards.admin_kb import (
    PAGE_SIZE,
    page_count,
    registration_list_kb,
    registration_detail_admin_kb,
    search_cancel_kb,
    stats_kb,
)

__all__ = [
    # callbacks
    "MainMenuCb", "TierCb", "FormOptionCb", "RegistrationCb",
    "AdminPanelCb", "FilterCb", "PageCb",
    # main menu
    "rider_main_menu", "admin_main_menu", "back_to_main",
    # registration
    "tier_kb", "gender_kb", "tshirt_size_kb", "where_heard_kb",
    "cancel_registration_kb", "confirm_registration_kb",
    # admin
    "PAGE_SIZE", "page_count", "registration_list_kb", "registration_detail_admin_kb",
    "search_cancel_kb", "stats_kb",
]
