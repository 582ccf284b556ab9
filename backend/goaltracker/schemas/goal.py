"""Pydantic schemas for goals and the goal history journal."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from goaltracker.models.goal import MetricType, ScopeType
from goaltracker.schemas.common import SortDirection

GoalSortField = Literal["created_at", "year", "target_value"]


def validate_uuid(value: Optional[str]) -> Optional[str]:
    """Trim and check that a value is a UUID string; None passes through."""
    if value is None:
        return None
    value = value.strip()
    try:
        UUID(value)
    except ValueError:
        raise ValueError("Value must be a valid UUID")
    return value


# ============== Goal Schemas ==============

class GoalCreate(BaseModel):
    """Schema for creating a goal."""

    scope_type: ScopeType = Field(..., description="Goal scope type")
    year: int = Field(..., ge=2000, le=2100, description="Calendar year")
    metric_type: MetricType = Field(..., description="Tracked metric type")
    target_value: float = Field(..., gt=0, description="Target (hours for time, meters otherwise)")
    sport_id: Optional[str] = Field(None, description="Sport ID for per-sport goals")

    @field_validator("sport_id")
    @classmethod
    def check_sport_id(cls, value: Optional[str]) -> Optional[str]:
        return validate_uuid(value)

    @model_validator(mode="after")
    def check_scope(self) -> "GoalCreate":
        if self.scope_type is ScopeType.PER_SPORT and not self.sport_id:
            raise ValueError('sport_id is required when scope_type is "per_sport"')
        if self.scope_type is ScopeType.GLOBAL and self.sport_id:
            raise ValueError('sport_id must be null when scope_type is "global"')
        return self


class GoalUpdate(BaseModel):
    """Schema for updating a goal's metric or target."""

    metric_type: Optional[MetricType] = None
    target_value: Optional[float] = Field(None, gt=0)

    @model_validator(mode="after")
    def check_not_empty(self) -> "GoalUpdate":
        if self.metric_type is None and self.target_value is None:
            raise ValueError("Provide at least one field to update (metric_type or target_value)")
        return self


class GoalResponse(BaseModel):
    """Schema for goal API responses."""

    id: str = Field(..., description="Goal ID")
    user_id: str = Field(..., description="Owning user ID")
    year: int = Field(..., description="Calendar year")
    scope_type: ScopeType = Field(..., description="Goal scope type")
    sport_id: Optional[str] = Field(None, description="Sport ID for per-sport goals")
    metric_type: MetricType = Field(..., description="Tracked metric type")
    target_value: float = Field(..., description="Target value")
    created_at: datetime = Field(..., description="Created timestamp")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": "3d2b9c1e-7f0a-4b5c-8d6e-1f2a3b4c5d6e",
                "user_id": "a7f2c1d0-3e4b-4c5d-8e9f-0a1b2c3d4e5f",
                "year": 2025,
                "scope_type": "global",
                "sport_id": None,
                "metric_type": "distance",
                "target_value": 1000000,
                "created_at": "2025-01-02T09:00:00Z",
            }
        }


class GoalListQuery(BaseModel):
    """Filters, sorting and pagination for the goal list."""

    year: Optional[int] = Field(None, ge=2000, le=2100)
    sport_id: Optional[str] = None
    scope_type: Optional[ScopeType] = None
    metric_type: Optional[MetricType] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
    sort_by: GoalSortField = "created_at"
    sort_dir: SortDirection = "desc"

    @field_validator("sport_id")
    @classmethod
    def check_sport_id(cls, value: Optional[str]) -> Optional[str]:
        return validate_uuid(value)


# ============== Goal History Schemas ==============

class GoalHistoryQuery(BaseModel):
    """Selects one goal's journal page."""

    goal_id: str
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
    sort_by: Literal["changed_at"] = "changed_at"
    sort_dir: SortDirection = "desc"

    @field_validator("goal_id")
    @classmethod
    def check_goal_id(cls, value: str) -> str:
        return validate_uuid(value)


class GoalHistoryResponse(BaseModel):
    """Schema for goal history API responses."""

    id: str = Field(..., description="History entry ID")
    goal_id: str = Field(..., description="Goal ID")
    previous_metric_type: MetricType = Field(..., description="Metric before the change")
    previous_target_value: float = Field(..., description="Target before the change")
    changed_at: datetime = Field(..., description="When the change happened")

    class Config:
        from_attributes = True
