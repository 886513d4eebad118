"""FastAPI application exposing Sun and Moon computations."""

from __future__ import annotations

import json
import logging
import os
import time
from datetime import UTC, date, datetime, timedelta, timezone, tzinfo
from typing import Annotated, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api_models import (
    ErrorResponse,
    HealthResponse,
    IlluminationQueryParams,
    IlluminationResponse,
    MoonPositionResponse,
    MoonTimesQueryParams,
    MoonTimesResponse,
    PositionQueryParams,
    SunPositionResponse,
    SunTimesQueryParams,
    SunTimesResponse,
)
from suncalc import (
    DEFAULT_SUN_TIMES,
    __version__,
    compute_moon_times,
    compute_sun_times,
    moon_illumination,
    moon_position,
    sun_position,
)
from suncalc.sun import NADIR, SOLAR_NOON

LOG_LEVEL = os.environ.get("SUNCALC_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in os.environ.get("SUNCALC_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

logging.basicConfig(level=LOG_LEVEL, format="%(message)s")
LOGGER = logging.getLogger("suncalc-api")

APP_DESCRIPTION = (
    "Sun and Moon positions, rise/set and twilight times, and lunar illumination"
)

app = FastAPI(
    title="SunCalc API",
    description=APP_DESCRIPTION,
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _zone(offset_hours: Optional[float]) -> tzinfo:
    if offset_hours is None:
        return UTC
    return timezone(timedelta(hours=offset_hours))


def _format(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat().replace("+00:00", "Z")


def _local_midnight(day: date, zone: tzinfo) -> datetime:
    return datetime.combine(day, datetime.min.time(), tzinfo=zone)


def _log_request(event: str, start_time: float, **fields: object) -> None:
    duration_ms = (time.perf_counter() - start_time) * 1000.0
    LOGGER.info(
        json.dumps({"event": event, **fields, "duration_ms": round(duration_ms, 3)}, default=str)
    )


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        ok=True,
        version=__version__,
        sun_times=list(DEFAULT_SUN_TIMES.labels),
    )


@app.get("/sun/position", response_model=SunPositionResponse, responses=ERROR_RESPONSES)
def sun_position_endpoint(
    params: Annotated[PositionQueryParams, Query()],
) -> SunPositionResponse:
    start_time = time.perf_counter()
    try:
        position = sun_position(params.time_utc, params.lat, params.lon)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    _log_request("sun_position", start_time, lat=params.lat, lon=params.lon, time=params.time_utc)
    return SunPositionResponse(azimuth=position.azimuth, altitude=position.altitude)


@app.get("/sun/times", response_model=SunTimesResponse, responses=ERROR_RESPONSES)
def sun_times_endpoint(
    params: Annotated[SunTimesQueryParams, Query()],
) -> SunTimesResponse:
    start_time = time.perf_counter()
    zone = _zone(params.offset_hours)
    # Noon of the requested local day selects its solar transit.
    reference = _local_midnight(params.date_utc, zone) + timedelta(hours=12)
    try:
        times = compute_sun_times(
            reference, params.lat, params.lon, height=params.elev_m, tz=zone
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    events = {
        label: _format(value)
        for label, value in times.items()
        if label not in (SOLAR_NOON, NADIR)
    }
    missing = [label for label in DEFAULT_SUN_TIMES.labels if label not in times]
    response = SunTimesResponse(
        date_utc=params.date_utc,
        latitude=params.lat,
        longitude=params.lon,
        elevation_m=params.elev_m,
        offset_hours=params.offset_hours,
        solar_noon=_format(times[SOLAR_NOON]),
        nadir=_format(times[NADIR]),
        events=events,
        missing=missing,
    )
    _log_request(
        "sun_times",
        start_time,
        lat=params.lat,
        lon=params.lon,
        date=params.date_utc.isoformat(),
        missing=len(missing),
    )
    return response


@app.get("/moon/position", response_model=MoonPositionResponse, responses=ERROR_RESPONSES)
def moon_position_endpoint(
    params: Annotated[PositionQueryParams, Query()],
) -> MoonPositionResponse:
    start_time = time.perf_counter()
    try:
        position = moon_position(params.time_utc, params.lat, params.lon)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    _log_request("moon_position", start_time, lat=params.lat, lon=params.lon, time=params.time_utc)
    return MoonPositionResponse(
        azimuth=position.azimuth,
        altitude=position.altitude,
        distance=position.distance,
        parallactic_angle=position.parallactic_angle,
    )


@app.get("/moon/times", response_model=MoonTimesResponse, responses=ERROR_RESPONSES)
def moon_times_endpoint(
    params: Annotated[MoonTimesQueryParams, Query()],
) -> MoonTimesResponse:
    start_time = time.perf_counter()
    try:
        result = compute_moon_times(
            params.date_utc, params.lat, params.lon, tz=_zone(params.offset_hours)
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    response = MoonTimesResponse(
        date_utc=params.date_utc,
        latitude=params.lat,
        longitude=params.lon,
        offset_hours=params.offset_hours,
        rise=_format(result.rise),
        set=_format(result.set),
        always_up=result.always_up,
        always_down=result.always_down,
    )
    _log_request(
        "moon_times",
        start_time,
        lat=params.lat,
        lon=params.lon,
        date=params.date_utc.isoformat(),
        state=result.state.value,
    )
    return response


@app.get(
    "/moon/illumination", response_model=IlluminationResponse, responses=ERROR_RESPONSES
)
def moon_illumination_endpoint(
    params: Annotated[IlluminationQueryParams, Query()],
) -> IlluminationResponse:
    start_time = time.perf_counter()
    try:
        illumination = moon_illumination(params.time_utc)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    _log_request("moon_illumination", start_time, time=params.time_utc)
    return IlluminationResponse(
        fraction=illumination.fraction,
        phase=illumination.phase,
        angle=illumination.angle,
    )
