"""Grid generation: rotated, offset grid lines and cells over a bounding region.

The grid is laid out from an origin (the region centre shifted by a meter
offset). Vertical lines run along the horizontal bearing and are stepped along
the vertical bearing; horizontal lines the other way round, so the whole grid
rotates rigidly with ``rotation``. Every element is placed with great-circle
displacement; nothing is projected.
"""

import json
import logging
import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from shapely.geometry import MultiPolygon, Polygon, mapping

from geodesy import Coordinate, haversine, move_by_bearing, move_by_meters

logger = logging.getLogger(__name__)


class InvalidParameter(ValueError):
    """Raised when the tiling inputs cannot describe a grid."""


class CellStatus(str, Enum):
    PENDING = "pending"
    SKIPPED = "skipped"
    DONE = "done"


@dataclass(frozen=True)
class BoundingRegion:
    southwest: Coordinate
    northeast: Coordinate

    @property
    def northwest(self) -> Coordinate:
        return Coordinate(self.northeast.lat, self.southwest.lon)

    @property
    def southeast(self) -> Coordinate:
        return Coordinate(self.southwest.lat, self.northeast.lon)


@dataclass(frozen=True)
class MeterOffset:
    """Origin shift in meters: width east/west, height north/south."""

    width: float = 0.0
    height: float = 0.0


@dataclass
class GridLine:
    start: Coordinate
    end: Coordinate
    orientation: str  # "vertical" or "horizontal"

    is_grid: ClassVar[bool] = True

    @property
    def coordinate(self) -> Coordinate:
        """Centre of the line's bounding rectangle."""
        return Coordinate(
            (self.start.lat + self.end.lat) / 2,
            (self.start.lon + self.end.lon) / 2,
        )

    def __lt__(self, other: "GridLine") -> bool:
        return self.coordinate < other.coordinate


@dataclass(eq=False)
class GridCell:
    """One grid tile, or the part of a tile left after clipping.

    ``boundary`` holds (lon, lat) geometry: a Polygon for generated cells, a
    Polygon or MultiPolygon for clipped ones. ``selected`` and ``status`` belong
    to the application; nothing in the grid code changes them after creation.
    """

    boundary: Polygon | MultiPolygon
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    selected: bool = False
    status: CellStatus = CellStatus.PENDING

    is_grid: ClassVar[bool] = True

    @classmethod
    def from_ring(cls, ring: list[Coordinate], selected: bool = False) -> "GridCell":
        return cls(boundary=Polygon([(c.lon, c.lat) for c in ring]), selected=selected)

    @property
    def opacity(self) -> float:
        return 1.0 if self.selected else 0.0

    @property
    def polygons(self) -> list[Polygon]:
        if isinstance(self.boundary, MultiPolygon):
            return list(self.boundary.geoms)
        return [self.boundary]

    @property
    def ring(self) -> list[Coordinate]:
        """Exterior ring of the first polygon, closed."""
        return [Coordinate(lat, lon) for lon, lat in self.polygons[0].exterior.coords]

    @property
    def coordinate(self) -> Coordinate:
        """Centre of the boundary's bounding rectangle."""
        min_lon, min_lat, max_lon, max_lat = self.boundary.bounds
        return Coordinate((min_lat + max_lat) / 2, (min_lon + max_lon) / 2)

    @property
    def feature(self) -> dict:
        """GeoJSON Feature with the boundary as a MultiPolygon and the id as a property."""
        return {
            "type": "Feature",
            "geometry": mapping(MultiPolygon(self.polygons)),
            "properties": {"id": self.id},
        }

    @property
    def geojson(self) -> str:
        return json.dumps(self.feature)

    def __lt__(self, other: "GridCell") -> bool:
        return self.coordinate < other.coordinate

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridCell):
            return NotImplemented
        return self.coordinate == other.coordinate and self.selected == other.selected

    __hash__ = None  # mutable


@dataclass(frozen=True)
class _Layout:
    origin: Coordinate
    num_lines: int
    v_bearing: float  # direction vertical lines are stepped in
    h_bearing: float  # direction horizontal lines are stepped in


def _check_finite(name: str, *values: float) -> None:
    if not all(math.isfinite(v) for v in values):
        raise InvalidParameter(f"{name} must be finite")


def num_grid_lines(bounds: BoundingRegion, cell_size: float) -> int:
    """Number of cells spanning the region diagonal, rounded up to an even count."""
    _check_finite("cell_size", cell_size)
    if cell_size <= 0:
        raise InvalidParameter(f"cell_size must be positive, got {cell_size}")
    _check_finite(
        "bounds",
        bounds.southwest.lat, bounds.southwest.lon,
        bounds.northeast.lat, bounds.northeast.lon,
    )
    if bounds.northeast.lat < bounds.southwest.lat or bounds.northeast.lon < bounds.southwest.lon:
        raise InvalidParameter("bounds northeast corner lies south or west of southwest corner")

    grid_size = haversine(bounds.northwest, bounds.southeast)
    num_lines = math.ceil(grid_size / cell_size)
    if num_lines % 2:
        num_lines += 1  # keep the grid symmetric about the origin
    return num_lines


def count_grid_lines(bounds: BoundingRegion, cell_size: float) -> int:
    return 2 * (num_grid_lines(bounds, cell_size) + 1)


def count_grid_cells(bounds: BoundingRegion, cell_size: float) -> int:
    return (num_grid_lines(bounds, cell_size) + 1) ** 2


def _layout(
    bounds: BoundingRegion,
    center: Coordinate,
    rotation: float,
    offset: MeterOffset,
    cell_size: float,
) -> _Layout:
    """Origin, line count and movement bearings shared by lines and cells."""
    num_lines = num_grid_lines(bounds, cell_size)
    _check_finite("rotation", rotation)
    _check_finite("offset", offset.width, offset.height)
    _check_finite("center", center.lat, center.lon)

    origin = move_by_meters(center, offset.height, offset.width)
    rotation_rad = math.radians(rotation)
    return _Layout(
        origin=origin,
        num_lines=num_lines,
        v_bearing=math.pi / 2 + rotation_rad,
        h_bearing=math.pi + rotation_rad,
    )


def _stepped_lines(
    start: Coordinate,
    end: Coordinate,
    bearing: float,
    steps: int,
    cell_size: float,
    orientation: str,
) -> list[GridLine]:
    lines: list[GridLine] = []
    for k in range(1, steps + 1):
        mvmt = cell_size * k
        lines.append(GridLine(
            move_by_bearing(start, -mvmt, bearing),
            move_by_bearing(end, -mvmt, bearing),
            orientation,
        ))
        lines.append(GridLine(
            move_by_bearing(start, mvmt, bearing),
            move_by_bearing(end, mvmt, bearing),
            orientation,
        ))
    lines.append(GridLine(start, end, orientation))
    return lines


def calc_grid_lines(
    bounds: BoundingRegion,
    center: Coordinate,
    rotation: float,
    offset: MeterOffset,
    cell_size: float,
) -> list[GridLine]:
    """Grid lines covering ``bounds``, vertical lines first.

    rotation is in degrees, offset in meters and cell_size is the spacing in
    meters between neighbouring lines. Each axis has ``1 + num_lines`` lines
    where num_lines is the (even) number of cells spanning the region diagonal.
    """
    layout = _layout(bounds, center, rotation, offset, cell_size)
    origin = layout.origin
    half_length = layout.num_lines * cell_size / 2.0

    v_start = move_by_bearing(origin, -half_length, layout.h_bearing)
    v_end = move_by_bearing(origin, half_length, layout.h_bearing)
    h_start = move_by_bearing(origin, -half_length, layout.v_bearing)
    h_end = move_by_bearing(origin, half_length, layout.v_bearing)

    steps = layout.num_lines // 2
    v_lines = _stepped_lines(v_start, v_end, layout.v_bearing, steps, cell_size, "vertical")
    h_lines = _stepped_lines(h_start, h_end, layout.h_bearing, steps, cell_size, "horizontal")
    logger.debug("Grid lines: %d vertical, %d horizontal", len(v_lines), len(h_lines))
    return sorted(v_lines) + sorted(h_lines)


def build_cell(
    origin: Coordinate,
    v_mvmt: float,
    h_mvmt: float,
    v_bearing: float,
    h_bearing: float,
    cell_size: float,
) -> GridCell:
    """Cell whose first corner sits v_mvmt along h_bearing and h_mvmt along v_bearing from origin."""
    tl = move_by_bearing(move_by_bearing(origin, v_mvmt, h_bearing), h_mvmt, v_bearing)
    tr = move_by_bearing(tl, cell_size, v_bearing)
    bl = move_by_bearing(tr, cell_size, h_bearing)
    br = move_by_bearing(tl, cell_size, h_bearing)
    return GridCell.from_ring([tl, tr, bl, br, tl])


def calc_grid_cells(
    bounds: BoundingRegion,
    center: Coordinate,
    rotation: float,
    offset: MeterOffset,
    cell_size: float,
) -> list[GridCell]:
    """Grid cells covering ``bounds`` in construction order.

    One quadrant of index pairs is walked and mirrored into the other three,
    so a grid of ``num_lines`` yields ``(num_lines + 1) ** 2`` cells with the
    origin cell emitted exactly once.
    """
    layout = _layout(bounds, center, rotation, offset, cell_size)
    half = layout.num_lines // 2

    def build(v_mvmt: float, h_mvmt: float) -> GridCell:
        return build_cell(layout.origin, v_mvmt, h_mvmt, layout.v_bearing, layout.h_bearing, cell_size)

    cells: list[GridCell] = []
    for v_index in range(half + 1):
        for h_index in range(half + 1):
            v_mvmt = cell_size * v_index
            h_mvmt = cell_size * h_index
            if v_index == 0 and h_index == 0:
                cells.append(build(v_mvmt, h_mvmt))
            elif v_index == 0:
                cells += [build(v_mvmt, h_mvmt), build(v_mvmt, -h_mvmt)]
            elif h_index == 0:
                cells += [build(v_mvmt, h_mvmt), build(-v_mvmt, h_mvmt)]
            else:
                cells += [
                    build(v_mvmt, h_mvmt),
                    build(-v_mvmt, h_mvmt),
                    build(v_mvmt, -h_mvmt),
                    build(-v_mvmt, -h_mvmt),
                ]
    logger.debug("Grid cells: %d (num_lines=%d)", len(cells), layout.num_lines)
    return cells
