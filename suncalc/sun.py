"""Sunrise, sunset and twilight times from the analytic solar transit.

The rise and set instants for an altitude threshold are placed
symmetrically around the solar transit of the day, following
https://www.aa.quae.nl/en/reken/zonpositie.html.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, time, tzinfo
from typing import Dict, Iterator, Optional, Tuple

from .bodies import RAD, declination, ecliptic_longitude, solar_mean_anomaly
from .horizon import GeoCoordinate
from .julian import J2000, Instant, from_julian, to_days

__all__ = [
    "DEFAULT_SUN_TIMES",
    "NADIR",
    "SOLAR_NOON",
    "SunTime",
    "SunTimeDefinitions",
    "approx_transit",
    "compute_sun_julian",
    "compute_sun_times",
    "hour_angle",
    "julian_cycle",
    "observer_angle",
    "solar_transit_j",
]

LOGGER = logging.getLogger(__name__)

J0 = 0.0009
SOLAR_NOON = "solarNoon"
NADIR = "nadir"
_NOON = time(12)


@dataclass(frozen=True)
class SunTime:
    """Altitude threshold in degrees and the labels of its rise and set events."""

    angle: float
    rise_name: str
    set_name: str


@dataclass(frozen=True)
class SunTimeDefinitions:
    """Immutable, ordered collection of :class:`SunTime` thresholds.

    :meth:`add` returns a new collection, so a definition set can be shared
    freely between callers and threads.
    """

    times: Tuple[SunTime, ...] = ()

    def __post_init__(self) -> None:
        seen = {SOLAR_NOON, NADIR}
        for sun_time in self.times:
            for label in (sun_time.rise_name, sun_time.set_name):
                if label in seen:
                    raise ValueError(f"Duplicate sun time label: {label}")
                seen.add(label)

    def add(self, angle: float, rise_name: str, set_name: str) -> "SunTimeDefinitions":
        return SunTimeDefinitions(self.times + (SunTime(angle, rise_name, set_name),))

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(
            label for sun_time in self.times for label in (sun_time.rise_name, sun_time.set_name)
        )

    def __iter__(self) -> Iterator[SunTime]:
        return iter(self.times)

    def __len__(self) -> int:
        return len(self.times)


DEFAULT_SUN_TIMES = SunTimeDefinitions(
    (
        SunTime(-0.833, "sunrise", "sunset"),
        SunTime(-0.3, "sunriseEnd", "sunsetStart"),
        SunTime(-6.0, "dawn", "dusk"),
        SunTime(-12.0, "nauticalDawn", "nauticalDusk"),
        SunTime(-18.0, "nightEnd", "night"),
        SunTime(6.0, "goldenHourEnd", "goldenHour"),
    )
)


def julian_cycle(d: float, lw: float) -> int:
    # Half-up rounding; the built-in round() rounds halves to even.
    return math.floor(d - J0 - lw / (2 * math.pi) + 0.5)


def approx_transit(hour_angle: float, lw: float, n: int) -> float:
    return J0 + (hour_angle + lw) / (2 * math.pi) + n


def solar_transit_j(ds: float, mean_anomaly: float, longitude: float) -> float:
    return J2000 + ds + 0.0053 * math.sin(mean_anomaly) - 0.0069 * math.sin(2 * longitude)


def hour_angle(h: float, phi: float, dec: float) -> Optional[float]:
    """Hour angle at which the Sun crosses altitude *h*, or ``None``.

    ``None`` means the Sun stays above or below *h* for the whole day.
    """

    cos_w = (math.sin(h) - math.sin(phi) * math.sin(dec)) / (math.cos(phi) * math.cos(dec))
    if not -1.0 <= cos_w <= 1.0:
        return None
    return math.acos(cos_w)


def observer_angle(height: float) -> float:
    """Dip of the horizon in degrees for an observer *height* meters up."""

    return -2.076 * math.sqrt(height) / 60


def compute_sun_julian(
    instant: Instant,
    lat: float,
    lon: float,
    height: float = 0.0,
    definitions: SunTimeDefinitions = DEFAULT_SUN_TIMES,
) -> Dict[str, float]:
    """Compute solar noon, nadir and threshold crossings as Julian days.

    Labels whose threshold is never crossed on that day (polar day or
    night) are left out of the result.
    """

    if not isinstance(instant, datetime):
        instant = datetime.combine(instant, _NOON, tzinfo=UTC)

    observer = GeoCoordinate(lat, lon, height)
    lw = observer.lw
    phi = observer.phi
    dh = observer_angle(observer.height)

    d = to_days(instant)
    n = julian_cycle(d, lw)
    ds = approx_transit(0.0, lw, n)

    mean_anomaly = float(solar_mean_anomaly(ds))
    longitude = float(ecliptic_longitude(mean_anomaly))
    dec = float(declination(longitude, 0.0))

    j_noon = solar_transit_j(ds, mean_anomaly, longitude)
    result: Dict[str, float] = {SOLAR_NOON: j_noon, NADIR: j_noon - 0.5}

    for sun_time in definitions:
        h0 = (sun_time.angle + dh) * RAD
        w = hour_angle(h0, phi, dec)
        if w is None:
            LOGGER.debug(
                json.dumps(
                    {
                        "event": "sun_time_omitted",
                        "angle": sun_time.angle,
                        "labels": [sun_time.rise_name, sun_time.set_name],
                        "lat": lat,
                        "lon": lon,
                    }
                )
            )
            continue
        j_set = solar_transit_j(approx_transit(w, lw, n), mean_anomaly, longitude)
        j_rise = j_noon - (j_set - j_noon)
        result[sun_time.rise_name] = j_rise
        result[sun_time.set_name] = j_set

    return result


def compute_sun_times(
    instant: Instant,
    lat: float,
    lon: float,
    height: float = 0.0,
    definitions: SunTimeDefinitions = DEFAULT_SUN_TIMES,
    tz: Optional[tzinfo] = None,
) -> Dict[str, datetime]:
    """Compute sun event times for the day around *instant*.

    Parameters
    ----------
    instant:
        Datetime whose nearest solar transit is used, or a date, which stands
        for its noon in *tz*. Naive datetimes are taken as UTC.
    lat, lon:
        Geographic coordinates in degrees (east-positive longitude).
    height:
        Observer height above the surrounding horizon in meters.
    definitions:
        Altitude thresholds to solve for, :data:`DEFAULT_SUN_TIMES` by default.
    tz:
        Zone of the returned datetimes. Defaults to the zone of *instant*,
        or UTC when it has none.

    Returns
    -------
    dict
        ``solarNoon`` and ``nadir`` always, plus the rise and set label of
        every threshold the Sun actually crosses.
    """

    if tz is None:
        tz = getattr(instant, "tzinfo", None) or UTC
    if not isinstance(instant, datetime):
        instant = datetime.combine(instant, _NOON, tzinfo=tz)
    julian = compute_sun_julian(instant, lat, lon, height, definitions)
    return {label: from_julian(jd, tz) for label, jd in julian.items()}
