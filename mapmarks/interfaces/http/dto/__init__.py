from .auth import LoginRequestDTO, MessageDTO, ProfileUpdateDTO, RegisterRequestDTO, UserOutDTO
from .locations import LocationOutDTO

__all__ = [
    "LocationOutDTO",
    "LoginRequestDTO",
    "MessageDTO",
    "ProfileUpdateDTO",
    "RegisterRequestDTO",
    "UserOutDTO",
]
