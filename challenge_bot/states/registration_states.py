from aiogram.fsm.state import State, StatesGroup


class SignupStates(StatesGroup):
    """FSM for linking an e-mail to the Telegram account."""
    enter_email = State()


class RegistrationStates(StatesGroup):
    """FSM for the challenge registration form."""
    choose_tier           = State()   # Inline: basic / plus / premium
    enter_full_name       = State()   # Text input
    enter_mobile          = State()   # Text input
    enter_full_address    = State()   # Text input
    enter_delivery_address = State()  # Text input (plus / premium only)
    choose_gender         = State()   # Inline: Male / Female / Other
    choose_tshirt_size    = State()   # Inline: S…XXL (premium only)
    enter_strava          = State()   # Text input: Strava profile URL
    choose_where_heard    = State()   # Inline: Instagram / Facebook / …
    upload_screenshot     = State()   # Photo or image document
    confirm               = State()   # Show summary → submit or restart
