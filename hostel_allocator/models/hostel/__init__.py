"""Hostel models."""

from hostel_allocator.models.hostel.hostel import Hostel

__all__ = ["Hostel"]
