"""Geodesic displacement on a spherical Earth."""

import math
from dataclasses import dataclass

EARTH_RADIUS_M = 6_372_797.6  # spherical Earth radius in meters

# Width of the span (degrees) used to measure the local meters-per-degree ratio.
_PROBE_SPAN_DEG = 0.001

# Below this many meters per degree of longitude the point is treated as a pole.
_POLE_METERS_PER_DEG = 1e-6


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float

    def __lt__(self, other: "Coordinate") -> bool:
        # Both components must be smaller; pairs that differ in only one
        # component compare as neither less nor greater.
        return self.lat < other.lat and self.lon < other.lon

    def __gt__(self, other: "Coordinate") -> bool:
        return other < self


def haversine(a: Coordinate, b: Coordinate, *, radius_m: float = EARTH_RADIUS_M) -> float:
    """Distance in meters between two coordinates (haversine formula)."""
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlam = math.radians(b.lon - a.lon)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    return 2 * radius_m * math.asin(min(1.0, math.sqrt(h)))


def move_by_bearing(
    coord: Coordinate,
    distance_m: float,
    bearing_rad: float,
    *,
    radius_m: float = EARTH_RADIUS_M,
) -> Coordinate:
    """Great-circle destination from ``coord``.

    bearing_rad is measured clockwise from north. A negative distance moves
    in the opposite direction.
    """
    delta = distance_m / radius_m
    lat1 = math.radians(coord.lat)
    lon1 = math.radians(coord.lon)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(delta)
        + math.cos(lat1) * math.sin(delta) * math.cos(bearing_rad)
    )
    lon2 = lon1 + math.atan2(
        math.sin(bearing_rad) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )
    return Coordinate(lat=math.degrees(lat2), lon=math.degrees(lon2))


def meters_per_degree(coord: Coordinate, *, radius_m: float = EARTH_RADIUS_M) -> tuple[float, float]:
    """Local (latitudinal, longitudinal) meters per degree around ``coord``."""
    half = _PROBE_SPAN_DEG / 2
    lat_m = haversine(
        Coordinate(coord.lat - half, coord.lon),
        Coordinate(coord.lat + half, coord.lon),
        radius_m=radius_m,
    )
    lon_m = haversine(
        Coordinate(coord.lat, coord.lon - half),
        Coordinate(coord.lat, coord.lon + half),
        radius_m=radius_m,
    )
    return lat_m / _PROBE_SPAN_DEG, lon_m / _PROBE_SPAN_DEG


def move_by_meters(
    coord: Coordinate,
    lat_m: float,
    lon_m: float,
    *,
    radius_m: float = EARTH_RADIUS_M,
) -> Coordinate:
    """Shift ``lat_m`` meters north and ``lon_m`` meters east (negative = south/west)."""
    m_per_deg_lat, m_per_deg_lon = meters_per_degree(coord, radius_m=radius_m)
    lat_delta = abs(lat_m) / m_per_deg_lat
    # Longitude collapses at the poles; cos(90 deg) is not exactly zero in floating point.
    lon_delta = abs(lon_m) / m_per_deg_lon if m_per_deg_lon > _POLE_METERS_PER_DEG else 0.0
    return Coordinate(
        lat=coord.lat + math.copysign(lat_delta, lat_m),
        lon=coord.lon + math.copysign(lon_delta, lon_m),
    )
