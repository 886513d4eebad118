"""Low-precision geocentric coordinates of the Sun and the Moon.

The series follow the simplified formulas published at
https://www.aa.quae.nl/en/reken/zonpositie.html (Sun) and
https://www.aa.quae.nl/en/reken/hemelpositie.html (Moon). All angles are in
radians and *d* is the number of days since J2000.0. Every function accepts
either a float or a numpy array of day counts.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

__all__ = [
    "EquatorialCoordinate",
    "MoonCoordinate",
    "OBLIQUITY",
    "RAD",
    "declination",
    "ecliptic_longitude",
    "equation_of_center",
    "moon_coordinates",
    "moon_equatorial",
    "right_ascension",
    "solar_mean_anomaly",
    "sun_coordinates",
    "sun_equatorial",
]

RAD = math.pi / 180.0
OBLIQUITY = RAD * 23.4397  # obliquity of the ecliptic, held constant
PERIHELION = RAD * 102.9372  # ecliptic longitude of Earth's perihelion


@dataclass(frozen=True)
class EquatorialCoordinate:
    """Geocentric equatorial position in radians."""

    declination: float
    right_ascension: float


@dataclass(frozen=True)
class MoonCoordinate(EquatorialCoordinate):
    """Equatorial position of the Moon plus its distance in kilometers."""

    distance: float


def right_ascension(l, b):
    return np.arctan2(
        np.sin(l) * math.cos(OBLIQUITY) - np.tan(b) * math.sin(OBLIQUITY), np.cos(l)
    )


def declination(l, b):
    return np.arcsin(
        np.sin(b) * math.cos(OBLIQUITY) + np.cos(b) * math.sin(OBLIQUITY) * np.sin(l)
    )


def solar_mean_anomaly(d):
    return RAD * (357.5291 + 0.98560028 * d)


def equation_of_center(mean_anomaly):
    return RAD * (
        1.9148 * np.sin(mean_anomaly)
        + 0.02 * np.sin(2 * mean_anomaly)
        + 0.0003 * np.sin(3 * mean_anomaly)
    )


def ecliptic_longitude(mean_anomaly):
    """Ecliptic longitude of the Sun for the given solar mean anomaly."""

    return mean_anomaly + equation_of_center(mean_anomaly) + PERIHELION + math.pi


def sun_equatorial(d):
    longitude = ecliptic_longitude(solar_mean_anomaly(d))
    # The Sun's ecliptic latitude never exceeds ~1.2 arcseconds.
    return declination(longitude, 0.0), right_ascension(longitude, 0.0)


def moon_equatorial(d):
    """Return ``(declination, right_ascension, distance_km)`` of the Moon."""

    mean_longitude = RAD * (218.316 + 13.176396 * d)
    mean_anomaly = RAD * (134.963 + 13.064993 * d)
    mean_distance = RAD * (93.272 + 13.229350 * d)

    longitude = mean_longitude + RAD * 6.289 * np.sin(mean_anomaly)
    latitude = RAD * 5.128 * np.sin(mean_distance)
    distance_km = 385001.0 - 20905.0 * np.cos(mean_anomaly)
    return declination(longitude, latitude), right_ascension(longitude, latitude), distance_km


def sun_coordinates(d: float) -> EquatorialCoordinate:
    """Return the Sun's declination and right ascension *d* days after J2000."""

    dec, ra = sun_equatorial(d)
    return EquatorialCoordinate(declination=float(dec), right_ascension=float(ra))


def moon_coordinates(d: float) -> MoonCoordinate:
    """Return the Moon's equatorial position and distance *d* days after J2000."""

    dec, ra, distance_km = moon_equatorial(d)
    return MoonCoordinate(
        declination=float(dec), right_ascension=float(ra), distance=float(distance_km)
    )
