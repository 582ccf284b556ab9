"""Goal and goal history models."""

from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from goaltracker.models.base import Base, generate_uuid

if TYPE_CHECKING:
    from goaltracker.models.sport import Sport


class MetricType(str, PyEnum):
    """Quantity tracked by a goal or a progress series."""
    DISTANCE = "distance"
    TIME = "time"
    ELEVATION_GAIN = "elevation_gain"


class ScopeType(str, PyEnum):
    """Whether a goal covers all activities or a single sport."""
    GLOBAL = "global"
    PER_SPORT = "per_sport"


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Goal(Base):
    """Annual per-user target for one metric, globally or for one sport."""

    __tablename__ = "goals"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "year", "scope_type", "metric_type", "sport_id",
            name="uq_goals_user_year_scope_metric_sport",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    year: Mapped[int] = mapped_column(Integer, index=True)
    scope_type: Mapped[ScopeType] = mapped_column(
        Enum(ScopeType, name="goal_scope_type", values_callable=_enum_values)
    )
    sport_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("sports.id"), nullable=True, index=True
    )
    metric_type: Mapped[MetricType] = mapped_column(
        Enum(MetricType, name="goal_metric_type", values_callable=_enum_values)
    )
    # Hours for time goals, meters for distance and elevation gain
    target_value: Mapped[float] = mapped_column(Float)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    sport: Mapped[Optional["Sport"]] = relationship("Sport")
    history: Mapped[List["GoalHistory"]] = relationship(
        "GoalHistory", back_populates="goal", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return (
            f"<Goal(id={self.id}, year={self.year}, scope={self.scope_type}, "
            f"metric={self.metric_type}, target={self.target_value})>"
        )


class GoalHistory(Base):
    """Journal entry holding a goal's values before an edit."""

    __tablename__ = "goal_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    goal_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("goals.id", ondelete="CASCADE"), index=True
    )
    previous_metric_type: Mapped[MetricType] = mapped_column(
        Enum(MetricType, name="goal_metric_type", values_callable=_enum_values)
    )
    previous_target_value: Mapped[float] = mapped_column(Float)
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    goal: Mapped["Goal"] = relationship("Goal", back_populates="history")

    def __repr__(self) -> str:
        return f"<GoalHistory(id={self.id}, goal_id={self.goal_id}, changed_at={self.changed_at})>"
