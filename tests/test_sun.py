from __future__ import annotations

import dataclasses
from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from suncalc.bodies import RAD
from suncalc.horizon import InvalidCoordinateError
from suncalc.sun import (
    DEFAULT_SUN_TIMES,
    NADIR,
    SOLAR_NOON,
    SunTime,
    SunTimeDefinitions,
    compute_sun_julian,
    compute_sun_times,
    hour_angle,
    julian_cycle,
    observer_angle,
)

LONDON = (51.5, -0.1)
SVALBARD = (78.0, 15.6469)


def _minutes_apart(first: datetime, second: datetime) -> float:
    return abs((first - second).total_seconds()) / 60.0


def _day_length_seconds(sunrise: datetime, sunset: datetime) -> float:
    delta = (sunset - sunrise).total_seconds()
    if delta < 0:
        delta += 86400.0
    return delta


def test_london_winter_solstice_reference():
    result = compute_sun_times(date(2020, 12, 22), *LONDON)
    # Almanac values for London on 2020-12-22.
    assert _minutes_apart(result["sunrise"], datetime(2020, 12, 22, 8, 4, tzinfo=UTC)) <= 2.0
    assert _minutes_apart(result["sunset"], datetime(2020, 12, 22, 15, 54, tzinfo=UTC)) <= 2.0
    assert _minutes_apart(result[SOLAR_NOON], datetime(2020, 12, 22, 12, 0, tzinfo=UTC)) <= 3.0
    assert abs((result[SOLAR_NOON] - result[NADIR]) - timedelta(hours=12)) < timedelta(milliseconds=1)


def test_all_default_labels_present_at_mid_latitude():
    result = compute_sun_times(date(2021, 3, 20), *LONDON)
    assert set(result) == {SOLAR_NOON, NADIR, *DEFAULT_SUN_TIMES.labels}


def test_events_are_ordered_through_the_day():
    result = compute_sun_times(date(2021, 3, 20), *LONDON)
    order = [
        "nightEnd",
        "nauticalDawn",
        "dawn",
        "sunrise",
        "sunriseEnd",
        "goldenHourEnd",
        SOLAR_NOON,
        "goldenHour",
        "sunsetStart",
        "sunset",
        "dusk",
        "nauticalDusk",
        "night",
    ]
    times = [result[label] for label in order]
    assert times == sorted(times)


def test_rise_and_set_are_symmetric_about_transit():
    for day in (date(2020, 12, 22), date(2021, 6, 21), date(2022, 9, 1)):
        julian = compute_sun_julian(day, *LONDON, height=12.0)
        noon = julian[SOLAR_NOON]
        for sun_time in DEFAULT_SUN_TIMES:
            rise = julian[sun_time.rise_name]
            set_ = julian[sun_time.set_name]
            assert abs((noon - rise) - (set_ - noon)) < 1e-9


def test_polar_day_svalbard():
    result = compute_sun_times(date(2025, 6, 21), *SVALBARD)
    assert "sunrise" not in result
    assert "sunset" not in result
    assert "dawn" not in result
    assert SOLAR_NOON in result
    assert NADIR in result


def test_polar_night_keeps_deep_twilight():
    result = compute_sun_times(date(2025, 12, 21), *SVALBARD)
    for label in ("sunrise", "sunset", "dawn", "dusk", "goldenHour"):
        assert label not in result
    # The Sun still climbs to about -11.4 degrees at noon.
    assert result["nauticalDawn"] < result[SOLAR_NOON] < result["nauticalDusk"]
    assert result["nightEnd"] < result["nauticalDawn"]


def test_equator_day_length_is_about_twelve_hours():
    result = compute_sun_times(date(2021, 3, 20), 0.0, 0.0)
    day_length = _day_length_seconds(result["sunrise"], result["sunset"])
    assert (12 * 3600) <= day_length <= (12 * 3600 + 600)


def test_observer_height_widens_the_day():
    ground = compute_sun_times(date(2021, 5, 1), *LONDON)
    tower = compute_sun_times(date(2021, 5, 1), *LONDON, height=300.0)
    assert tower["sunrise"] < ground["sunrise"]
    assert tower["sunset"] > ground["sunset"]
    assert tower[SOLAR_NOON] == ground[SOLAR_NOON]


def test_observer_angle():
    assert observer_angle(0.0) == 0.0
    assert observer_angle(100.0) == pytest.approx(-2.076 * 10 / 60)


def test_hour_angle_signals_missing_crossing():
    assert hour_angle(0.0, 0.0, 0.0) == pytest.approx(1.5707963267948966)
    assert hour_angle(-0.0145, 1.36, 0.409) is None
    assert hour_angle(-0.0145, 1.36, -0.409) is None


def test_julian_cycle_picks_nearest_transit():
    lw = RAD * 0.1
    assert julian_cycle(7661.0, lw) == 7661
    # Midnight west of Greenwich belongs to the previous transit.
    assert julian_cycle(7660.5, lw) == 7660


def test_results_follow_input_timezone():
    tokyo = timezone(timedelta(hours=9))
    result = compute_sun_times(datetime(2023, 5, 5, 12, tzinfo=tokyo), 35.68, 139.69)
    assert all(value.utcoffset() == timedelta(hours=9) for value in result.values())
    assert result["sunrise"].date() == date(2023, 5, 5)
    assert 4 <= result["sunrise"].hour <= 5


def test_explicit_timezone_for_plain_date():
    tokyo = timezone(timedelta(hours=9))
    local = compute_sun_times(date(2023, 5, 5), 35.68, 139.69, tz=tokyo)
    assert local["sunrise"].utcoffset() == timedelta(hours=9)
    assert local[SOLAR_NOON].date() == date(2023, 5, 5)


def test_naive_datetime_is_utc():
    naive = compute_sun_times(datetime(2021, 3, 20, 12), *LONDON)
    aware = compute_sun_times(datetime(2021, 3, 20, 12, tzinfo=UTC), *LONDON)
    assert naive == aware


def test_custom_sun_time_is_solved():
    definitions = DEFAULT_SUN_TIMES.add(-4.0, "blueHourEnd", "blueHour")
    result = compute_sun_times(date(2021, 3, 20), *LONDON, definitions=definitions)
    assert result["dawn"] < result["blueHourEnd"] < result["sunrise"]
    assert result["sunset"] < result["blueHour"] < result["dusk"]


def test_definitions_are_immutable():
    extended = DEFAULT_SUN_TIMES.add(-4.0, "blueHourEnd", "blueHour")
    assert len(DEFAULT_SUN_TIMES) == 6
    assert len(extended) == 7
    assert "blueHour" not in DEFAULT_SUN_TIMES.labels
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_SUN_TIMES.times = ()  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_SUN_TIMES.times[0].angle = 0.0  # type: ignore[misc]


def test_duplicate_labels_are_rejected():
    with pytest.raises(ValueError):
        DEFAULT_SUN_TIMES.add(-3.0, "sunrise", "lateSunset")
    with pytest.raises(ValueError):
        SunTimeDefinitions((SunTime(1.0, SOLAR_NOON, "x"),))


def test_invalid_latitude():
    with pytest.raises(InvalidCoordinateError):
        compute_sun_times(date(2021, 3, 20), 91.0, 0.0)


def test_negative_height_is_rejected():
    with pytest.raises(InvalidCoordinateError):
        compute_sun_times(date(2021, 3, 20), *LONDON, height=-5.0)
