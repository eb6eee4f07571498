"""Version 1 API endpoints."""

from .endpoints import auth_router, data_router, realtime_router

__all__ = [
    "auth_router",
    "data_router",
    "realtime_router",
]
