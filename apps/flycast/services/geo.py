"""Great-circle distance between coordinates."""

import math
from dataclasses import dataclass

EARTH_RADIUS_MILES = 3959


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


def distance_miles(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance in statute miles."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.atan2(math.sqrt(h), math.sqrt(1 - h))
