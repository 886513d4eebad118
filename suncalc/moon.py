"""Moonrise and moonset from hourly altitude samples.

The Moon moves too fast for the closed-form transit used for the Sun, so the
day is sampled every hour and a parabola is fitted through each two-hour
window of three samples to locate horizon crossings, after
https://www.aa.quae.nl/en/reken/hemelpositie.html.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from .bodies import RAD
from .horizon import GeoCoordinate, moon_altitudes
from .julian import ConversionError, Instant, as_utc, to_days

__all__ = [
    "HORIZON_CORRECTION",
    "HorizonCrossings",
    "MoonSkyState",
    "MoonTimes",
    "compute_moon_times",
    "find_horizon_crossings",
]

LOGGER = logging.getLogger(__name__)

# Mean lunar parallax less semidiameter, applied to the altitude samples.
HORIZON_CORRECTION = 0.133 * RAD
SAMPLE_HOURS = 24


class MoonSkyState(str, Enum):
    """Whether the Moon crosses the horizon during the sampled day."""

    rises_or_sets = "rises_or_sets"
    always_up = "always_up"
    always_down = "always_down"


@dataclass(frozen=True)
class HorizonCrossings:
    """Crossings in fractional hours from the first sample."""

    rise: Optional[float]
    set: Optional[float]
    last_vertex: float


@dataclass(frozen=True)
class MoonTimes:
    rise: Optional[datetime]
    set: Optional[datetime]
    state: MoonSkyState

    @property
    def always_up(self) -> bool:
        return self.state is MoonSkyState.always_up

    @property
    def always_down(self) -> bool:
        return self.state is MoonSkyState.always_down


def find_horizon_crossings(samples: Sequence[float]) -> HorizonCrossings:
    """Locate rise and set between hourly *samples* of altitude above the horizon.

    Each window of three samples ``(h0, h1, h2)`` centred on an odd hour is
    fitted with a parabola; its roots within ``[-1, 1]`` are crossings. A
    window whose samples lie on a straight line has no vertex and is
    skipped, with its middle sample standing in for the vertex value.
    """

    rise: Optional[float] = None
    set_: Optional[float] = None
    ye = 0.0

    for i in range(1, len(samples) - 1, 2):
        h0, h1, h2 = samples[i - 1], samples[i], samples[i + 1]
        a = (h0 + h2) / 2 - h1
        b = (h2 - h0) / 2
        if a == 0.0:
            LOGGER.debug(json.dumps({"event": "degenerate_window", "hour": i}))
            ye = h1
            continue

        xe = -b / (2 * a)
        ye = (a * xe + b) * xe + h1
        d = b * b - 4 * a * h1
        roots = 0
        x1 = x2 = 0.0

        if d >= 0:
            dx = math.sqrt(d) / (abs(a) * 2)
            x1 = xe - dx
            x2 = xe + dx
            if abs(x1) <= 1:
                roots += 1
            if abs(x2) <= 1:
                roots += 1
            if x1 < -1:
                x1 = x2

        if roots == 1:
            if h0 < 0:
                rise = i + x1
            else:
                set_ = i + x1
        elif roots == 2:
            rise = i + (x2 if ye < 0 else x1)
            set_ = i + (x1 if ye < 0 else x2)

        if rise is not None and set_ is not None:
            break

    return HorizonCrossings(rise=rise, set=set_, last_vertex=ye)


def _scan_start(instant: Instant, tz: Optional[tzinfo]) -> datetime:
    if isinstance(instant, datetime):
        zone = tz or instant.tzinfo or UTC
        try:
            day = as_utc(instant).astimezone(zone).date()
        except OverflowError as exc:
            raise ConversionError(
                f"Instant {instant.isoformat()} has no calendar day in {zone}"
            ) from exc
    else:
        zone = tz or UTC
        day = instant
    return datetime.combine(day, time.min, tzinfo=zone)


def _after_midnight(midnight: datetime, hours: float) -> datetime:
    # Elapsed time, so offsets are added in UTC and shifted back into the zone.
    try:
        return (midnight.astimezone(UTC) + timedelta(hours=hours)).astimezone(midnight.tzinfo)
    except OverflowError as exc:
        raise ConversionError(
            f"{hours:.3f} h after {midnight.isoformat()} is outside the datetime range"
        ) from exc


def compute_moon_times(
    instant: Instant,
    lat: float,
    lon: float,
    tz: Optional[tzinfo] = None,
) -> MoonTimes:
    """Compute moonrise and moonset for the calendar day of *instant*.

    The time of day is ignored: the scan covers the 24 hours from midnight
    in *tz* (or the zone of *instant*, or UTC). When the Moon crosses the
    horizon only once that day, the other time is ``None``.
    """

    observer = GeoCoordinate(lat, lon)
    midnight = _scan_start(instant, tz)

    hours = np.arange(SAMPLE_HOURS + 1, dtype=float)
    samples = moon_altitudes(to_days(midnight) + hours / 24.0, observer) - HORIZON_CORRECTION
    crossings = find_horizon_crossings(samples.tolist())

    if crossings.rise is None and crossings.set is None:
        state = MoonSkyState.always_up if crossings.last_vertex > 0 else MoonSkyState.always_down
        return MoonTimes(rise=None, set=None, state=state)

    return MoonTimes(
        rise=None if crossings.rise is None else _after_midnight(midnight, crossings.rise),
        set=None if crossings.set is None else _after_midnight(midnight, crossings.set),
        state=MoonSkyState.rises_or_sets,
    )
