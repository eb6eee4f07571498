"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .data import router as data_router
from .realtime import router as realtime_router

__all__ = [
    "auth_router",
    "data_router",
    "realtime_router",
]
