"""Pydantic schemas for annual progress and progress history."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from goaltracker.models.goal import MetricType, ScopeType
from goaltracker.schemas.goal import validate_uuid


class ProgressAnnualRequest(BaseModel):
    """Request body for the annual cumulative progress series."""

    year: int = Field(..., ge=2000, le=2100, description="Calendar year")
    metric_type: MetricType = Field(..., description="Metric to accumulate")
    sport_id: Optional[str] = Field(None, description="Restrict to one sport")

    @field_validator("sport_id")
    @classmethod
    def check_sport_id(cls, value: Optional[str]) -> Optional[str]:
        return validate_uuid(value)


class ProgressSeriesPoint(BaseModel):
    """Running total at the end of one UTC day."""

    date: str = Field(..., description="Day in YYYY-MM-DD format")
    value: float = Field(..., description="Cumulative value (meters or seconds)")


class ProgressSummary(BaseModel):
    """Series end value against target, in display units."""

    achieved: float = Field(..., description="Achieved value (km, hours or meters)")
    target_value: float = Field(..., description="Target value (km, hours or meters)")
    percent: float = Field(..., ge=0, description="Percent of target reached, capped at 999")


class ProgressAnnualResponse(BaseModel):
    """Annual cumulative progress for one metric."""

    year: int
    metric_type: MetricType
    scope_type: ScopeType
    target_value: float = Field(..., description="Goal target in series units, 0 without a goal")
    series: List[ProgressSeriesPoint]
    summary: Optional[ProgressSummary] = None

    class Config:
        json_schema_extra = {
            "example": {
                "year": 2025,
                "metric_type": "distance",
                "scope_type": "global",
                "target_value": 1000000,
                "series": [
                    {"date": "2025-01-01", "value": 1500},
                    {"date": "2025-01-02", "value": 1700},
                ],
                "summary": {"achieved": 1.7, "target_value": 1000, "percent": 0.2},
            }
        }


class ProgressHistoryRequest(BaseModel):
    """Request body for per-year totals."""

    years: List[int] = Field(..., min_length=1, max_length=20, description="Calendar years")
    metric_type: MetricType = Field(..., description="Metric to total")
    sport_id: Optional[str] = Field(None, description="Restrict to one sport")

    @field_validator("years")
    @classmethod
    def check_years(cls, value: List[int]) -> List[int]:
        if any(year < 2000 or year > 2100 for year in value):
            raise ValueError("years must be between 2000 and 2100")
        return value

    @field_validator("sport_id")
    @classmethod
    def check_sport_id(cls, value: Optional[str]) -> Optional[str]:
        return validate_uuid(value)


class ProgressHistoryItem(BaseModel):
    """Total for one year."""

    year: int
    value: float


class ProgressHistoryResponse(BaseModel):
    """Per-year totals for one metric."""

    metric_type: MetricType
    items: List[ProgressHistoryItem]
