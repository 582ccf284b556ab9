"""Pydantic schemas for the sport catalogue."""

from typing import Optional

from pydantic import BaseModel, Field


class SportProfile(BaseModel):
    """
    Generator parameters stored in a sport's metadata blob.

    Every field falls back to a generic workout profile when missing.
    """

    type: str = Field("Workout", description="Raw activity type written to generated rows")
    display_name: Optional[str] = Field(None, description="Name used in generated activity titles")
    distance_km_range: tuple[float, float] = Field((3, 10), description="Distance range in km")
    speed_kph_range: tuple[float, float] = Field((4, 8), description="Speed range in km/h")
    elevation_range: tuple[float, float] = Field((0, 200), description="Elevation gain range in meters")


class SportCreate(BaseModel):
    """Schema for creating a sport."""

    code: str = Field(
        ...,
        min_length=1,
        max_length=32,
        pattern=r"^[a-z][a-z0-9_]*$",
        description="snake_case sport code",
    )
    name: str = Field(..., min_length=1, max_length=64, description="Display name")
    description: Optional[str] = Field(None, max_length=255, description="Optional description")


class SportResponse(BaseModel):
    """Schema for sport API responses."""

    id: str = Field(..., description="Sport ID")
    code: str = Field(..., description="Sport code")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None, description="Optional description")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": "0c6f0e76-5f51-4f64-9d9f-3bf1a1b5a0a1",
                "code": "run",
                "name": "Running",
                "description": None,
            }
        }
