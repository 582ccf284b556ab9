"""Sport model for the shared sport catalogue."""

from typing import Any, Optional

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from goaltracker.models.base import Base, generate_uuid


class Sport(Base):
    """Catalogue entry mapping a short code (e.g. "run") to a display name."""

    __tablename__ = "sports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    code: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(64))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Generator parameters; `metadata` is reserved on declarative classes
    profile: Mapped[Optional[dict[str, Any]]] = mapped_column("metadata", JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<Sport(id={self.id}, code='{self.code}', name='{self.name}')>"
