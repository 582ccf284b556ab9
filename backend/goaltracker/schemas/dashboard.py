"""Pydantic schemas for dashboard metrics."""

from typing import List

from pydantic import BaseModel, Field


class BreakdownItem(BaseModel):
    """Activity count for one sport."""

    sport: str = Field(..., description='Sport label, "<Name> (<code>)" or the bare code')
    count: int = Field(..., ge=1, description="Number of activities")


class DashboardMetrics(BaseModel):
    """Dashboard counts for the current UTC year and month."""

    total_goals: int = Field(..., ge=0)
    achieved_goals: int = Field(..., ge=0)
    activities_month: List[BreakdownItem]
    activities_year: List[BreakdownItem]

    class Config:
        json_schema_extra = {
            "example": {
                "total_goals": 3,
                "achieved_goals": 1,
                "activities_month": [{"sport": "Running (run)", "count": 6}],
                "activities_year": [
                    {"sport": "Running (run)", "count": 48},
                    {"sport": "Cycling (ride)", "count": 21},
                ],
            }
        }
