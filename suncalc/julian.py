"""Conversions between civil instants and continuous Julian day numbers."""

from __future__ import annotations

import math
import warnings
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Union

import erfa

__all__ = [
    "ConversionError",
    "Instant",
    "J2000",
    "as_utc",
    "from_julian",
    "julian_from_civil",
    "to_days",
    "to_julian",
]

J2000 = 2451545.0

# Any scale other than UTC gives uniform 86400 s days (no leap seconds).
_TIME_SCALE = "UT1"

Instant = Union[datetime, date]


class ConversionError(ValueError):
    """Raised when a civil instant or Julian day cannot be converted."""


def as_utc(instant: Instant) -> datetime:
    """Return *instant* as a timezone-aware UTC datetime.

    Naive datetimes are taken to be in UTC already. A plain :class:`date`
    maps to its UTC midnight.
    """

    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            return instant.replace(tzinfo=UTC)
        try:
            return instant.astimezone(UTC)
        except OverflowError as exc:
            raise ConversionError(
                f"Instant {instant.isoformat()} cannot be expressed in UTC"
            ) from exc
    if isinstance(instant, date):
        return datetime.combine(instant, time.min, tzinfo=UTC)
    raise ConversionError(f"Unsupported instant type: {type(instant).__name__}")


def julian_from_civil(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
) -> float:
    """Convert proleptic Gregorian civil components to a Julian day number.

    Raises
    ------
    ConversionError
        If the components do not name an existing civil instant.
    """

    with warnings.catch_warnings():
        # ERFA reports e.g. second >= 60 as a warning; treat it as invalid.
        warnings.simplefilter("error", erfa.ErfaWarning)
        try:
            jd1, jd2 = erfa.dtf2d(_TIME_SCALE, year, month, day, hour, minute, second)
        except (erfa.ErfaError, erfa.ErfaWarning) as exc:
            raise ConversionError(
                f"Invalid civil instant {year:04d}-{month:02d}-{day:02d} "
                f"{hour:02d}:{minute:02d}:{second}: {exc}"
            ) from exc
    return float(jd1) + float(jd2)


def to_julian(instant: Instant) -> float:
    """Return the Julian day number of *instant* (J2000.0 is 2451545.0)."""

    utc = as_utc(instant)
    return julian_from_civil(
        utc.year,
        utc.month,
        utc.day,
        utc.hour,
        utc.minute,
        utc.second + utc.microsecond / 1_000_000,
    )


def to_days(instant: Instant) -> float:
    """Days elapsed since J2000.0, including the fraction of the day."""

    return to_julian(instant) - J2000


def from_julian(jd: float, tz: tzinfo = UTC) -> datetime:
    """Convert a Julian day number back to an aware datetime in *tz*.

    Raises
    ------
    ConversionError
        If *jd* is not finite or falls outside the range of :class:`datetime`.
    """

    if not math.isfinite(jd):
        raise ConversionError(f"Julian day must be finite, got {jd!r}")
    try:
        year, month, day, fraction = erfa.jd2cal(jd, 0.0)
    except erfa.ErfaError as exc:
        raise ConversionError(f"Julian day {jd} is out of range: {exc}") from exc
    try:
        midnight = datetime(int(year), int(month), int(day), tzinfo=UTC)
        result = (midnight + timedelta(days=float(fraction))).astimezone(tz)
    except (ValueError, OverflowError) as exc:
        raise ConversionError(
            f"Julian day {jd} cannot be represented as a datetime"
        ) from exc
    return result
