"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _QueryParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LocationQueryParams(_QueryParams):
    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")


class PositionQueryParams(LocationQueryParams):
    """Validated query parameters for the position endpoints."""

    time_utc: datetime = Field(
        ...,
        alias="time",
        description="Instant (ISO-8601); values without an offset are taken as UTC",
    )


class DayQueryParams(LocationQueryParams):
    date_utc: date = Field(..., alias="date", description="Calendar date (YYYY-MM-DD)")
    offset_hours: Optional[float] = Field(
        None,
        description="Optional fixed offset in hours for the local day and returned times",
    )

    @field_validator("offset_hours")
    def validate_offset_hours(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return value
        if not -24.0 < value < 24.0:
            raise ValueError("offset_hours must be strictly within ±24 hours")
        return value


class SunTimesQueryParams(DayQueryParams):
    """Validated query parameters for the ``/sun/times`` endpoint."""

    elev_m: float = Field(0.0, ge=0.0, description="Observer height in meters")


class MoonTimesQueryParams(DayQueryParams):
    """Validated query parameters for the ``/moon/times`` endpoint."""


class IlluminationQueryParams(_QueryParams):
    time_utc: datetime = Field(
        ...,
        alias="time",
        description="Instant (ISO-8601); values without an offset are taken as UTC",
    )


class SunPositionResponse(BaseModel):
    ok: bool = True
    azimuth: float = Field(..., description="Azimuth in radians from south, westward")
    altitude: float = Field(..., description="Geometric altitude in radians")


class MoonPositionResponse(SunPositionResponse):
    distance: float = Field(..., description="Earth-Moon distance in kilometers")
    parallactic_angle: float = Field(..., description="Parallactic angle in radians")


class SunTimesResponse(BaseModel):
    """Sun event times; labels the Sun never reaches that day are listed in ``missing``."""

    ok: bool = True
    date_utc: date = Field(..., description="Requested date")
    latitude: float
    longitude: float
    elevation_m: float
    offset_hours: Optional[float] = None
    solar_noon: str = Field(..., description="Solar noon (ISO-8601)")
    nadir: str = Field(..., description="Solar nadir (ISO-8601)")
    events: Dict[str, str] = Field(..., description="Event label to ISO-8601 time")
    missing: List[str] = Field(default_factory=list)


class MoonTimesResponse(BaseModel):
    ok: bool = True
    date_utc: date
    latitude: float
    longitude: float
    offset_hours: Optional[float] = None
    rise: Optional[str] = Field(None, description="Moonrise (ISO-8601)")
    set: Optional[str] = Field(None, description="Moonset (ISO-8601)")
    always_up: bool = False
    always_down: bool = False


class IlluminationResponse(BaseModel):
    ok: bool = True
    fraction: float = Field(..., ge=0.0, le=1.0)
    phase: float = Field(..., ge=0.0, lt=1.0)
    angle: float


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    version: str
    sun_times: List[str]


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
