"""SQLAlchemy models for the Chatline application."""

from .account import Account
from .profile import Profile, ProfileMessage

__all__ = [
    "Account",
    "Profile", "ProfileMessage",
]
