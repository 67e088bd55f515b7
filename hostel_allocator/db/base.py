"""SQLAlchemy Base class for all models."""
from hostel_allocator.models.base.base_model import Base


def import_models():
    """Import all models to register them with SQLAlchemy."""
    from hostel_allocator.models import Bed, Hostel, Registration, Room  # noqa: F401


import_models()
