"""Pydantic models for API requests and responses."""

from typing import Any

from pydantic import BaseModel

import config
from geodesy import Coordinate
from grid import BoundingRegion, CellStatus, GridCell, GridLine, MeterOffset


class CoordinateModel(BaseModel):
    lat: float
    lon: float

    @classmethod
    def of(cls, c: Coordinate) -> "CoordinateModel":
        return cls(lat=c.lat, lon=c.lon)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lon=self.lon)


class BoundsModel(BaseModel):
    southwest: CoordinateModel
    northeast: CoordinateModel

    @classmethod
    def of(cls, b: BoundingRegion) -> "BoundsModel":
        return cls(southwest=CoordinateModel.of(b.southwest), northeast=CoordinateModel.of(b.northeast))

    def to_region(self) -> BoundingRegion:
        return BoundingRegion(self.southwest.to_coordinate(), self.northeast.to_coordinate())


class OffsetModel(BaseModel):
    width: float = 0.0
    height: float = 0.0

    def to_offset(self) -> MeterOffset:
        return MeterOffset(width=self.width, height=self.height)


class GridRequest(BaseModel):
    """Grid parameters. bounds and center may be omitted when a boundary is given."""

    bounds: BoundsModel | None = None
    center: CoordinateModel | None = None
    rotation: float = 0.0
    offset: OffsetModel = OffsetModel()
    cell_size: float = config.GRID_CELL_SIZE_M
    boundary: dict[str, Any] | None = None


class FrameResponse(BaseModel):
    bounds: BoundsModel
    center: CoordinateModel


class GridLineModel(BaseModel):
    orientation: str
    start: CoordinateModel
    end: CoordinateModel

    @classmethod
    def of(cls, line: GridLine) -> "GridLineModel":
        return cls(
            orientation=line.orientation,
            start=CoordinateModel.of(line.start),
            end=CoordinateModel.of(line.end),
        )


class GridCellModel(BaseModel):
    id: str
    selected: bool
    opacity: float
    status: CellStatus
    feature: dict[str, Any]

    @classmethod
    def of(cls, cell: GridCell) -> "GridCellModel":
        return cls(
            id=cell.id,
            selected=cell.selected,
            opacity=cell.opacity,
            status=cell.status,
            feature=cell.feature,
        )


class CellUpdate(BaseModel):
    selected: bool | None = None
    status: CellStatus | None = None
