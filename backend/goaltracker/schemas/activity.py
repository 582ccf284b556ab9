"""Pydantic schemas for activity-related API operations."""

from datetime import datetime
from typing import List, Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator

from goaltracker.schemas.common import SortDirection

ActivitySortField = Literal["start_date", "distance", "moving_time"]


class ActivityResponse(BaseModel):
    """Schema for activity API responses."""

    id: str = Field(..., description="Activity ID")
    user_id: str = Field(..., description="Owning user ID")
    name: str = Field(..., description="Activity name")
    type: str = Field(..., description="Raw activity type (e.g., Run, Ride)")
    sport_type: str = Field(..., description="Normalized sport code")
    start_date: datetime = Field(..., description="Start time (UTC)")
    start_date_local: str = Field(..., description="Local start time with offset")
    timezone: str = Field(..., description="IANA timezone name")
    utc_offset: int = Field(..., description="UTC offset in seconds")
    distance: float = Field(..., description="Distance in meters")
    moving_time: str = Field(..., description="Moving time interval")
    elapsed_time: str = Field(..., description="Elapsed time interval")
    total_elevation_gain: float = Field(..., description="Elevation gain in meters")
    average_speed: float = Field(..., description="Average speed in m/s")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": "5b0f2f9e-8d1e-4a3c-9d55-0b6f3e8b9a11",
                "user_id": "a7f2c1d0-3e4b-4c5d-8e9f-0a1b2c3d4e5f",
                "name": "Evening Run",
                "type": "Run",
                "sport_type": "running",
                "start_date": "2025-03-14T17:32:10Z",
                "start_date_local": "2025-03-14T18:32:10+01:00",
                "timezone": "Europe/Warsaw",
                "utc_offset": 3600,
                "distance": 10230,
                "moving_time": "3120 seconds",
                "elapsed_time": "3400 seconds",
                "total_elevation_gain": 85,
                "average_speed": 3.28,
            }
        }


class ActivityListQuery(BaseModel):
    """Filters, sorting and pagination for the activity list."""

    from_: Optional[datetime] = Field(None, alias="from", description="Start of the date range")
    to: Optional[datetime] = Field(None, description="End of the date range")
    sport_type: Optional[str] = Field(None, min_length=1, max_length=64)
    type: Optional[str] = Field(None, min_length=1, max_length=64)
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
    sort_by: ActivitySortField = "start_date"
    sort_dir: SortDirection = "desc"

    model_config = {"populate_by_name": True}

    @field_validator("from_", "to")
    @classmethod
    def require_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            raise ValueError("Value must be a valid ISO 8601 date with timezone")
        return value

    @field_validator("sport_type", "type")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else None

    @model_validator(mode="after")
    def check_range(self) -> "ActivityListQuery":
        if self.from_ and self.to and self.from_ > self.to:
            raise ValueError('"from" must be earlier than "to"')
        return self


class ActivityDistribution(BaseModel):
    """Share of generated activities per sport slot."""

    primary: float = Field(..., ge=0, le=1)
    secondary: float = Field(..., ge=0, le=1)
    tertiary: float = Field(..., ge=0, le=1)
    quaternary: float = Field(..., ge=0, le=1)

    @model_validator(mode="after")
    def check_sum(self) -> "ActivityDistribution":
        total = self.primary + self.secondary + self.tertiary + self.quaternary
        if abs(total - 1) > 0.01:
            raise ValueError("Distribution values must add up to 1.0 (+/-0.01)")
        return self


class GenerateActivitiesRequest(BaseModel):
    """Optional overrides for synthetic activity generation."""

    primary_sports: Optional[List[str]] = Field(None, min_length=1, max_length=25)
    distribution: Optional[ActivityDistribution] = None
    timezone: Optional[str] = Field(None, min_length=1, max_length=64)

    @field_validator("primary_sports")
    @classmethod
    def check_sports(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        cleaned = [sport.strip() for sport in value]
        for sport in cleaned:
            if not sport or len(sport) > 64:
                raise ValueError("Each sport_type must contain between 1 and 64 characters")
        return cleaned

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError("timezone must be a valid IANA identifier")
        return value


class GenerateActivitiesResponse(BaseModel):
    """Schema for the activity generation response."""

    created_count: int = Field(..., ge=0, description="Number of activities created")
