from aiogram.fsm.state import State, StatesGroup


class AdminSearchStates(StatesGroup):
    """FSM for the registrations list search box."""
    enter_search = State()   # Admin types a name / e-mail / mobile fragment
