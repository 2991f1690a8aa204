"""Boundary handling: read GeoJSON boundaries, frame a grid on them, clip cells to them.

Boundaries arrive as GeoJSON (a JSON string or an already-decoded dict) and may
be a bare geometry, a Feature or a FeatureCollection. Cells are clipped in
(lon, lat) degrees, treating a single cell as locally planar.
"""

import json
import logging

from shapely.errors import ShapelyError
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon, shape
from shapely.geometry.base import BaseGeometry

import config
from geodesy import Coordinate
from grid import BoundingRegion, GridCell

logger = logging.getLogger(__name__)

GeoJSON = str | dict


class BoundaryError(ValueError):
    """Raised when a boundary cannot be read as GeoJSON."""


def _decode(geojson: GeoJSON) -> dict:
    obj = json.loads(geojson) if isinstance(geojson, str) else geojson
    if not isinstance(obj, dict):
        raise ValueError(f"GeoJSON must be an object, got {type(obj).__name__}")
    return obj


def boundary_geometries(geojson: GeoJSON) -> list[BaseGeometry | None]:
    """One geometry per feature; a bare geometry yields itself.

    Features with a null geometry come back as None. Anything that is not
    readable GeoJSON raises BoundaryError.
    """
    try:
        obj = _decode(geojson)
        kind = obj.get("type")
        if kind == "Feature":
            raw = [obj.get("geometry")]
        elif kind == "FeatureCollection":
            raw = [f.get("geometry") for f in obj.get("features", [])]
        else:
            raw = [obj]
        return [shape(g) if g else None for g in raw]
    except (ValueError, TypeError, KeyError, IndexError, AttributeError, ShapelyError) as e:
        raise BoundaryError(str(e)) from e


def extract_polygons(geometry: BaseGeometry) -> list[Polygon]:
    """Areal parts of a geometry; points and lines are dropped."""
    if isinstance(geometry, Polygon):
        return [] if geometry.is_empty else [geometry]
    if isinstance(geometry, (MultiPolygon, GeometryCollection)):
        polygons: list[Polygon] = []
        for part in geometry.geoms:
            polygons.extend(extract_polygons(part))
        return polygons
    return []


def boundary_polygons(geojson: GeoJSON) -> list[Polygon]:
    return [p for g in boundary_geometries(geojson) if g is not None for p in extract_polygons(g)]


def _vertices(geometry: BaseGeometry) -> list[tuple[float, float]]:
    if hasattr(geometry, "geoms"):
        return [xy for part in geometry.geoms for xy in _vertices(part)]
    if isinstance(geometry, Polygon):
        coords = list(geometry.exterior.coords)
        for interior in geometry.interiors:
            coords.extend(interior.coords)
        return coords
    return list(geometry.coords)


def boundary_coordinates(geojson: GeoJSON) -> list[Coordinate]:
    """Every vertex of every geometry in the boundary."""
    return [
        Coordinate(lat=xy[1], lon=xy[0])
        for g in boundary_geometries(geojson)
        if g is not None
        for xy in _vertices(g)
    ]


def _extent(geojson: GeoJSON) -> tuple[float, float, float, float]:
    coords = boundary_coordinates(geojson)
    if not coords:
        raise BoundaryError("Boundary has no coordinates")
    lats = [c.lat for c in coords]
    lons = [c.lon for c in coords]
    return min(lats), min(lons), max(lats), max(lons)


def boundary_center(geojson: GeoJSON) -> Coordinate:
    """Centre of the boundary's vertex bounding box."""
    south, west, north, east = _extent(geojson)
    return Coordinate(lat=(south + north) * 0.5, lon=(west + east) * 0.5)


def boundary_bounds(geojson: GeoJSON, padding: float = config.BOUNDS_PADDING_DEG) -> BoundingRegion:
    """Vertex bounding box grown by ``padding`` degrees on every side."""
    south, west, north, east = _extent(geojson)
    return BoundingRegion(
        southwest=Coordinate(lat=south - padding, lon=west - padding),
        northeast=Coordinate(lat=north + padding, lon=east + padding),
    )


def intersect(cell: GridCell, geojson: GeoJSON) -> GridCell | None:
    """Clip ``cell`` to a boundary.

    Returns a new selected cell holding the overlap, or None when the cell lies
    outside the boundary or the boundary cannot be read. When several boundary
    geometries overlap the cell only the last overlap is kept.
    """
    try:
        geometries = boundary_geometries(geojson)
    except BoundaryError as e:
        logger.warning("Cannot read boundary for cell %s: %s", cell.id, e)
        return None
    return clip_to_geometries(cell, geometries)


def clip_to_geometries(cell: GridCell, geometries: list[BaseGeometry | None]) -> GridCell | None:
    """Clip ``cell`` to boundary geometries already read with boundary_geometries."""
    intersected: BaseGeometry | None = None
    for geometry in geometries:
        if geometry is None:
            continue
        try:
            overlap = cell.boundary.intersection(geometry)
        except ShapelyError as e:
            logger.warning("Intersection failed for cell %s: %s", cell.id, e)
            continue
        if not overlap.is_empty:
            intersected = overlap

    if intersected is None:
        logger.debug("Cell %s lies outside the boundary", cell.id)
        return None

    polygons = extract_polygons(intersected)
    if not polygons:
        logger.debug("Cell %s only touches the boundary (%s)", cell.id, intersected.geom_type)
        return None

    boundary = polygons[0] if len(polygons) == 1 else MultiPolygon(polygons)
    return GridCell(boundary=boundary, selected=True)
