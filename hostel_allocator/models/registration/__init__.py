"""Registration models."""

from hostel_allocator.models.registration.registration import Registration

__all__ = ["Registration"]
