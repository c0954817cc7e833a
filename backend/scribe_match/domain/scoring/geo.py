"""
Geographic helpers: great-circle distance and a travel-time estimate.
"""

import math

from scribe_match.domain.models import Location


EARTH_RADIUS_KM = 6371.0
DEFAULT_SPEED_KMH = 30.0


def distance_km(a: Location, b: Location) -> float:
    """Haversine distance between two points in kilometres."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push h a hair past 1.0 for antipodal points
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def travel_time_minutes(distance: float, average_speed_kmh: float = DEFAULT_SPEED_KMH) -> int:
    """
    Rough door-to-door estimate at a flat urban average speed.

    Not a routing or traffic-aware ETA.
    """
    if average_speed_kmh <= 0:
        raise ValueError("average_speed_kmh must be positive")
    return int(round(max(distance, 0.0) / average_speed_kmh * 60))
