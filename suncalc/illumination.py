"""Illuminated fraction, phase and bright-limb angle of the Moon."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .bodies import EquatorialCoordinate, MoonCoordinate, moon_coordinates, sun_coordinates
from .julian import Instant, to_days

__all__ = ["Illumination", "SUN_DISTANCE_KM", "illumination_from_coordinates", "moon_illumination"]

SUN_DISTANCE_KM = 149598000.0


@dataclass(frozen=True)
class Illumination:
    """Lunar illumination state.

    ``phase`` runs from 0 (new) through 0.25 (first quarter), 0.5 (full)
    and 0.75 (last quarter). ``angle`` is the position angle of the bright
    limb's midpoint in radians, measured eastward from north; it is negative
    while the Moon is waxing.
    """

    fraction: float
    phase: float
    angle: float


def illumination_from_coordinates(
    sun: EquatorialCoordinate, moon: MoonCoordinate
) -> Illumination:
    dra = sun.right_ascension - moon.right_ascension
    cos_elongation = math.sin(sun.declination) * math.sin(moon.declination) + math.cos(
        sun.declination
    ) * math.cos(moon.declination) * math.cos(dra)
    elongation = math.acos(max(-1.0, min(1.0, cos_elongation)))

    inc = math.atan2(
        SUN_DISTANCE_KM * math.sin(elongation),
        moon.distance - SUN_DISTANCE_KM * math.cos(elongation),
    )
    angle = math.atan2(
        math.cos(sun.declination) * math.sin(dra),
        math.sin(sun.declination) * math.cos(moon.declination)
        - math.cos(sun.declination) * math.sin(moon.declination) * math.cos(dra),
    )

    phase = 0.5 + 0.5 * inc * (-1 if angle < 0 else 1) / math.pi
    if phase >= 1.0:
        phase = 0.0
    return Illumination(fraction=(1 + math.cos(inc)) / 2, phase=phase, angle=angle)


def moon_illumination(instant: Instant) -> Illumination:
    """Illumination of the Moon as seen from the Earth's center at *instant*."""

    d = to_days(instant)
    return illumination_from_coordinates(sun_coordinates(d), moon_coordinates(d))
