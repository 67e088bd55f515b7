"""Database engine, session factory and schema helpers."""

from hostel_allocator.db.base import Base
from hostel_allocator.db.session import SessionLocal, engine, get_db

__all__ = ["Base", "SessionLocal", "engine", "get_db"]
