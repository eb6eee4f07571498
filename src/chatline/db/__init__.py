"""Profile store plumbing: engine, sessions and the declarative base."""

from .session import Base, SessionLocal, create_tables, get_db

__all__ = ["Base", "SessionLocal", "create_tables", "get_db"]
