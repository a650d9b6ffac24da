"""Domain models for the credkeeper service."""

from .user import NewUser, User, UserProfile

__all__ = [
    "NewUser",
    "User",
    "UserProfile",
]
