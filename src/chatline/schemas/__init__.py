"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .account import (
    AccountResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from .profile import (
    AppendResponse,
    ImageResponse,
    MarkSeenRequest,
    MessageCreate,
    MessageRecord,
    MessageStatus,
    ProfileCreate,
    ProfileRecord,
    SingleSeenRequest,
)

__all__ = [
    "AccountResponse", "LoginRequest", "LoginResponse", "RegisterRequest", "RegisterResponse",
    "AppendResponse", "ImageResponse", "MarkSeenRequest", "MessageCreate",
    "MessageRecord", "MessageStatus", "ProfileCreate", "ProfileRecord",
    "SingleSeenRequest",
]
