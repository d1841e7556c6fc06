from datetime import datetime, timedelta

import pytest

from src.hrms.hrms.core.constants import MAX_SPEED_KMH
from src.hrms.hrms.core.exceptions import ValidationError
from src.hrms.hrms.gps.geo import (
    GPSCoordinates,
    haversine_distance,
    is_suspicious_movement,
    is_valid_coordinates,
    parse_coordinates,
)

T0 = datetime(2026, 3, 10, 9, 0)


def test_haversine_one_degree_of_latitude():
    assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.01)
    assert haversine_distance(28.6, 77.2, 28.6, 77.2) == 0
    assert haversine_distance(28.6139, 77.2090, 28.6139, 77.2090) == 0


def test_coordinate_ranges():
    assert is_valid_coordinates(90, 180)
    assert is_valid_coordinates(-90, -180)
    assert not is_valid_coordinates(90.1, 0)
    assert not is_valid_coordinates(0, -180.5)
    assert not is_valid_coordinates(float("nan"), 0)


def test_fast_jump_is_suspicious():
    last = GPSCoordinates(28.6139, 77.2090, timestamp=T0)
    current = GPSCoordinates(28.7139, 77.2090, timestamp=T0 + timedelta(minutes=1))

    assert is_suspicious_movement(last, current)


def test_plausible_travel_is_not_suspicious():
    last = GPSCoordinates(28.6139, 77.2090, timestamp=T0)
    current = GPSCoordinates(28.7139, 77.2090, timestamp=T0 + timedelta(hours=1))

    assert not is_suspicious_movement(last, current)


def test_speed_exactly_at_the_limit_is_not_suspicious():
    last = GPSCoordinates(28.6139, 77.2090, timestamp=T0)
    current = GPSCoordinates(29.6139, 77.2090, timestamp=T0 + timedelta(hours=1))
    implied_kmh = haversine_distance(last.latitude, last.longitude, current.latitude, current.longitude)

    assert MAX_SPEED_KMH == 120
    assert not is_suspicious_movement(last, current, max_speed_kmh=implied_kmh)
    assert is_suspicious_movement(last, current, max_speed_kmh=implied_kmh - 0.001)


def test_movement_without_timestamps_is_never_suspicious():
    assert not is_suspicious_movement(GPSCoordinates(0, 0), GPSCoordinates(10, 10, timestamp=T0))


def test_zero_elapsed_time_is_suspicious_only_when_moved():
    assert is_suspicious_movement(GPSCoordinates(0, 0, timestamp=T0), GPSCoordinates(0.01, 0, timestamp=T0))
    assert not is_suspicious_movement(GPSCoordinates(0, 0, timestamp=T0), GPSCoordinates(0, 0, timestamp=T0))


def test_parse_coordinates():
    assert parse_coordinates(None, None) is None
    parsed = parse_coordinates("28.5", "77.1", accuracy="12")
    assert (parsed.latitude, parsed.longitude, parsed.accuracy) == (28.5, 77.1, 12.0)

    with pytest.raises(ValidationError):
        parse_coordinates(None, None, required=True)
    with pytest.raises(ValidationError):
        parse_coordinates(28.5, None)
    with pytest.raises(ValidationError):
        parse_coordinates(95, 10)
    with pytest.raises(ValidationError):
        parse_coordinates("north", 10)
