"""Great-circle distance and movement plausibility checks."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.validators import optional_float
from ..core.constants import EARTH_RADIUS_KM, MAX_SPEED_KMH
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class GPSCoordinates:
    latitude: float
    longitude: float
    timestamp: Optional[datetime] = None
    accuracy: Optional[float] = None


def is_valid_coordinates(latitude: float, longitude: float) -> bool:
    if latitude is None or longitude is None:
        return False
    if math.isnan(latitude) or math.isnan(longitude):
        return False
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in kilometres between two points on the Earth's surface."""

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_between(a: GPSCoordinates, b: GPSCoordinates) -> float:
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def is_suspicious_movement(
    last: GPSCoordinates,
    current: GPSCoordinates,
    *,
    max_speed_kmh: float = MAX_SPEED_KMH,
) -> bool:
    """True when moving from `last` to `current` implies a speed above `max_speed_kmh`.

    Points without timestamps cannot be judged and are never suspicious. A
    non-positive elapsed time is suspicious only if the position changed.
    """

    if last.timestamp is None or current.timestamp is None:
        return False

    distance_km = distance_between(last, current)
    elapsed_hours = (current.timestamp - last.timestamp).total_seconds() / 3600
    if elapsed_hours <= 0:
        return distance_km > 0
    return distance_km / elapsed_hours > max_speed_kmh


def parse_coordinates(
    latitude: Any,
    longitude: Any,
    *,
    timestamp: Optional[datetime] = None,
    accuracy: Any = None,
    required: bool = False,
) -> Optional[GPSCoordinates]:
    """Build coordinates from request values; None when both are absent and not `required`."""

    lat = optional_float(latitude, "latitude")
    lon = optional_float(longitude, "longitude")
    if lat is None and lon is None and not required:
        return None
    if lat is None or lon is None or not is_valid_coordinates(lat, lon):
        raise ValidationError(
            "Invalid GPS coordinates",
            {"latitude": "must be within [-90, 90]", "longitude": "must be within [-180, 180]"},
        )
    return GPSCoordinates(
        latitude=lat,
        longitude=lon,
        timestamp=timestamp,
        accuracy=optional_float(accuracy, "accuracy"),
    )
