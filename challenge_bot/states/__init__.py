from challenge_bot.states.registration_states import RegistrationStates, SignupStates
from challenge_bot.states.admin_states import AdminSearchStates

__all__ = ["RegistrationStates", "SignupStates", "AdminSearchStates"]
