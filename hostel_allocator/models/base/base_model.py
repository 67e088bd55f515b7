"""
Declarative base and the abstract tables every hostel entity builds on.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.sql import func

Base = declarative_base()


def new_id() -> str:
    """Opaque string id used for hostels, rooms, beds and registrations."""
    return str(uuid4())


class BaseModel(Base):
    """Abstract entity keyed by an opaque string id."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


class TimestampModel(BaseModel):
    """Entity that records when it was created and last touched."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
