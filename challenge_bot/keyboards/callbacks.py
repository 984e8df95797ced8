"""
Centralized CallbackData factories.
Telegram limits callback_data to 64 bytes — all prefixes are kept short.
"""
from aiogram.filters.callback_data import CallbackData


class MainMenuCb(CallbackData, prefix="mm"):
    action: str           # main | register | my_registration | packages | signup


class TierCb(CallbackData, prefix="tier"):
    tier: str             # PaymentTier.*


class FormOptionCb(CallbackData, prefix="opt"):
    field: str            # gender | tshirt_size | where_heard
    value: str


class RegistrationCb(CallbackData, prefix="reg"):
    action: str           # view | approve | reject
    rid: str = ""         # registration id (uuid)
    page: int = 0         # list page to return to


class AdminPanelCb(CallbackData, prefix="adm"):
    action: str           # back | list | stats | search | clear_filters


class FilterCb(CallbackData, prefix="flt"):
    kind: str             # status | tier
    value: str            # "all" or a concrete status / tier


class PageCb(CallbackData, prefix="pg"):
    page: int = 0
