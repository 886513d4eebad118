"""Transforms from geocentric equatorial to local horizontal coordinates."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .bodies import RAD, moon_equatorial, sun_equatorial
from .julian import Instant, to_days

__all__ = [
    "GeoCoordinate",
    "HorizontalCoordinate",
    "InvalidCoordinateError",
    "MoonPosition",
    "altitude",
    "astro_refraction",
    "azimuth",
    "moon_altitudes",
    "moon_position",
    "parallactic_angle",
    "sidereal_time",
    "sun_position",
]


class InvalidCoordinateError(ValueError):
    """Raised when an observer location is outside the valid range."""


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer location in degrees with an optional height in meters."""

    latitude: float
    longitude: float
    height: float = 0.0

    def __post_init__(self) -> None:
        # Written so that NaN fails every check.
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidCoordinateError(
                f"Latitude must be within [-90, 90] degrees, got {self.latitude}"
            )
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidCoordinateError(
                f"Longitude must be within [-180, 180] degrees, got {self.longitude}"
            )
        if not self.height >= 0.0:
            raise InvalidCoordinateError(
                f"Observer height must be non-negative, got {self.height}"
            )

    @property
    def phi(self) -> float:
        """Latitude in radians."""
        return RAD * self.latitude

    @property
    def lw(self) -> float:
        """West longitude in radians (east-positive longitude negated)."""
        return RAD * -self.longitude


@dataclass(frozen=True)
class HorizontalCoordinate:
    """Azimuth (from south, westward positive) and altitude in radians."""

    azimuth: float
    altitude: float


@dataclass(frozen=True)
class MoonPosition(HorizontalCoordinate):
    """Moon position with distance in kilometers and parallactic angle in radians."""

    distance: float
    parallactic_angle: float


def sidereal_time(d, lw):
    return RAD * (280.16 + 360.9856235 * d) - lw


def azimuth(hour_angle, phi, dec):
    return np.arctan2(
        np.sin(hour_angle), np.cos(hour_angle) * np.sin(phi) - np.tan(dec) * np.cos(phi)
    )


def altitude(hour_angle, phi, dec):
    return np.arcsin(
        np.sin(phi) * np.sin(dec) + np.cos(phi) * np.cos(dec) * np.cos(hour_angle)
    )


def parallactic_angle(hour_angle, phi, dec):
    return np.arctan2(
        np.sin(hour_angle), np.tan(phi) * np.cos(dec) - np.sin(dec) * np.cos(hour_angle)
    )


def astro_refraction(h):
    """Atmospheric refraction in radians for a true altitude *h* in radians.

    Meeus, *Astronomical Algorithms* (2nd ed.), formula 16.4:
    ``1.02 / tan(h + 10.26 / (h + 5.10))`` arcminutes with *h* in degrees.
    """

    # Valid for positive altitudes only; h = -0.08901179 would divide by zero.
    h = np.maximum(h, 0.0)
    return 0.0002967 / np.tan(h + 0.00312536 / (h + 0.08901179))


def sun_position(instant: Instant, lat: float, lon: float) -> HorizontalCoordinate:
    """Geometric horizontal position of the Sun for an observer."""

    observer = GeoCoordinate(lat, lon)
    d = to_days(instant)
    dec, ra = sun_equatorial(d)
    hour_angle = sidereal_time(d, observer.lw) - ra
    return HorizontalCoordinate(
        azimuth=float(azimuth(hour_angle, observer.phi, dec)),
        altitude=float(altitude(hour_angle, observer.phi, dec)),
    )


def moon_altitudes(days, observer: GeoCoordinate, refraction: bool = True) -> np.ndarray:
    """Moon altitudes in radians for an array of day counts since J2000."""

    days = np.asarray(days, dtype=float)
    dec, ra, _ = moon_equatorial(days)
    hour_angle = sidereal_time(days, observer.lw) - ra
    h = altitude(hour_angle, observer.phi, dec)
    if refraction:
        h = h + astro_refraction(h)
    return h


def moon_position(
    instant: Instant, lat: float, lon: float, refraction: bool = False
) -> MoonPosition:
    """Horizontal position, distance and parallactic angle of the Moon.

    The altitude is geometric unless *refraction* is set, in which case the
    near-horizon refraction correction is added.
    """

    observer = GeoCoordinate(lat, lon)
    d = to_days(instant)
    dec, ra, distance_km = moon_equatorial(d)
    hour_angle = sidereal_time(d, observer.lw) - ra
    h = altitude(hour_angle, observer.phi, dec)
    if refraction:
        h = h + astro_refraction(h)
    return MoonPosition(
        azimuth=float(azimuth(hour_angle, observer.phi, dec)),
        altitude=float(h),
        distance=float(distance_km),
        parallactic_angle=float(parallactic_angle(hour_angle, observer.phi, dec)),
    )
