from __future__ import annotations

import math

from backpacker.api.models import Location, TransportMode
from backpacker.core.rules import COST_PER_KM, EARTH_RADIUS_KM, PLANE_MIN_KM, TRAIN_MIN_KM


def great_circle_distance_km(a: Location, b: Location, *, radius_km: float = EARTH_RADIUS_KM) -> float:
    """Haversine distance between two locations."""

    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.latitude)) * math.cos(math.radians(b.latitude)) * math.sin(d_lon / 2) ** 2
    )
    # Antipodal points can round h just past 1.
    h = min(h, 1.0)
    return radius_km * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def transport_mode_for(distance_km: float) -> TransportMode:
    if distance_km > PLANE_MIN_KM:
        return "Plane"
    if distance_km > TRAIN_MIN_KM:
        return "Train"
    return "Bus"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going up (2.5 -> 3), unlike `round`."""

    return math.floor(value + 0.5)


def travel_cost_for(distance_km: float) -> int:
    return round_half_up(distance_km * COST_PER_KM)
