"""Repository base classes."""

from hostel_allocator.repositories.base.base_repository import BaseRepository

__all__ = ["BaseRepository"]
