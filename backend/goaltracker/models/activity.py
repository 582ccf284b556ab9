"""Activity model for storing completed exercise sessions."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from goaltracker.models.base import Base, generate_uuid


class Activity(Base):
    """A single completed exercise session owned by one user."""

    __tablename__ = "activities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), index=True)

    # Activity details
    name: Mapped[str] = mapped_column(String(255))
    type: Mapped[str] = mapped_column(String(64))  # e.g., "Run", "Ride"
    sport_type: Mapped[str] = mapped_column(String(64), index=True)  # normalized sport code

    # Start time, absolute plus the local wall clock it was recorded in
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    start_date_local: Mapped[str] = mapped_column(String(32))
    timezone: Mapped[str] = mapped_column(String(64))
    utc_offset: Mapped[int] = mapped_column(Integer)  # seconds

    # Performance metrics
    distance: Mapped[float] = mapped_column(Float)  # meters
    moving_time: Mapped[str] = mapped_column(String(32))  # interval text, e.g. "3600 seconds"
    elapsed_time: Mapped[str] = mapped_column(String(32))
    total_elevation_gain: Mapped[float] = mapped_column(Float)  # meters
    average_speed: Mapped[float] = mapped_column(Float)  # m/s

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, name='{self.name}', start_date={self.start_date})>"
