"""
Airport registry and nearest-station lookup.

The registry is a hand-picked list of major US airports with reliable
METAR coverage. Distances are attached to copies per query, registry
entries are never modified.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from .geo import Coordinate, distance_miles

logger = logging.getLogger(__name__)

MAX_NEARBY_AIRPORTS = 5
DEFAULT_SEARCH_RADIUS_MILES = 100


@dataclass(frozen=True)
class Airport:
    """Aviation weather station."""
    icao: str
    name: str
    city: str
    country: str
    latitude: float
    longitude: float
    elevation: int  # feet MSL
    distance: Optional[float] = None  # miles, set by find_nearby_airports

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


MAJOR_AIRPORTS = (
    Airport('KATL', 'Hartsfield-Jackson Atlanta International', 'Atlanta', 'US', 33.6407, -84.4277, 1026),
    Airport('KLAX', 'Los Angeles International', 'Los Angeles', 'US', 33.9416, -118.4085, 125),
    Airport('KORD', "O'Hare International", 'Chicago', 'US', 41.9786, -87.9048, 672),
    Airport('KDFW', 'Dallas/Fort Worth International', 'Dallas', 'US', 32.8968, -97.0380, 607),
    Airport('KDEN', 'Denver International', 'Denver', 'US', 39.8617, -104.6731, 5433),
    Airport('KJFK', 'John F. Kennedy International', 'New York', 'US', 40.6413, -73.7781, 13),
    Airport('KSFO', 'San Francisco International', 'San Francisco', 'US', 37.6213, -122.3790, 13),
    Airport('KLAS', 'Harry Reid International', 'Las Vegas', 'US', 36.0840, -115.1537, 2181),
    Airport('KSEA', 'Seattle-Tacoma International', 'Seattle', 'US', 47.4502, -122.3088, 131),
    Airport('KMIA', 'Miami International', 'Miami', 'US', 25.7959, -80.2870, 8),
    Airport('KMCO', 'Orlando International', 'Orlando', 'US', 28.4312, -81.3081, 96),
    Airport('KPHX', 'Phoenix Sky Harbor International', 'Phoenix', 'US', 33.4484, -112.0740, 1135),
    Airport('KBOS', 'Logan International', 'Boston', 'US', 42.3656, -71.0096, 19),
    Airport('KMSN', 'Dane County Regional', 'Madison', 'US', 43.1399, -89.3375, 887),
    Airport('KBNA', 'Nashville International', 'Nashville', 'US', 36.1245, -86.6782, 599),
)


def find_nearby_airports(
    latitude: float,
    longitude: float,
    max_distance: float = DEFAULT_SEARCH_RADIUS_MILES,
    airports: Optional[Iterable[Airport]] = None,
) -> list[Airport]:
    """
    Return up to five airports within max_distance miles, closest first.

    An empty list means no airport qualified; it is not an error.
    """
    center = Coordinate(latitude, longitude)
    registry = MAJOR_AIRPORTS if airports is None else airports

    candidates = [
        replace(airport, distance=distance_miles(center, airport.coordinate))
        for airport in registry
    ]
    nearby = sorted(
        (airport for airport in candidates if airport.distance <= max_distance),
        key=lambda airport: airport.distance,
    )

    logger.debug(f"{len(nearby)} airports within {max_distance} mi of {latitude},{longitude}")
    return nearby[:MAX_NEARBY_AIRPORTS]


def get_airport(icao: str) -> Optional[Airport]:
    code = (icao or '').strip().upper()
    for airport in MAJOR_AIRPORTS:
        if airport.icao == code:
            return airport
    return None
