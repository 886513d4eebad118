"""Sun and Moon positions, rise/set times and lunar illumination."""

from .horizon import InvalidCoordinateError, moon_position, sun_position
from .illumination import Illumination, moon_illumination
from .julian import ConversionError, from_julian, to_julian
from .moon import MoonSkyState, MoonTimes, compute_moon_times
from .sun import DEFAULT_SUN_TIMES, SunTime, SunTimeDefinitions, compute_sun_times

__version__ = "1.0.0"

__all__ = [
    "ConversionError",
    "DEFAULT_SUN_TIMES",
    "Illumination",
    "InvalidCoordinateError",
    "MoonSkyState",
    "MoonTimes",
    "SunTime",
    "SunTimeDefinitions",
    "compute_moon_times",
    "compute_sun_times",
    "from_julian",
    "moon_illumination",
    "moon_position",
    "sun_position",
    "to_julian",
]
