"""FastAPI application for field grid mapping."""

import logging
from typing import Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

import config
import store
from clip import BoundaryError, boundary_bounds, boundary_center, boundary_geometries, clip_to_geometries
from grid import InvalidParameter, calc_grid_cells, calc_grid_lines, count_grid_cells, count_grid_lines
from models import (
    BoundsModel,
    CellUpdate,
    CoordinateModel,
    FrameResponse,
    GridCellModel,
    GridLineModel,
    GridRequest,
)

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Field Grid", version="1.0.0")

# CORS: allow frontend origin(s)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _frame(req: GridRequest):
    """Bounds and center from the request, framed from its boundary where missing."""
    bounds = req.bounds.to_region() if req.bounds else None
    center = req.center.to_coordinate() if req.center else None
    if bounds is None or center is None:
        if req.boundary is None:
            raise HTTPException(400, "Provide bounds and center, or a boundary to frame them from")
        try:
            bounds = bounds or boundary_bounds(req.boundary)
            center = center or boundary_center(req.boundary)
        except ValueError as e:
            raise HTTPException(400, f"Cannot frame boundary: {e}")
    return bounds, center


# ---------- Health check ----------

@app.get("/health")
async def health():
    return {"status": "ok"}


# ---------- Boundary ----------

@app.post("/boundary/frame", response_model=FrameResponse)
async def frame_boundary(boundary: dict[str, Any] = Body(...)):
    """Padded bounding region and center of a GeoJSON boundary."""
    try:
        bounds = boundary_bounds(boundary)
        center = boundary_center(boundary)
    except ValueError as e:
        raise HTTPException(400, f"Cannot frame boundary: {e}")
    return FrameResponse(bounds=BoundsModel.of(bounds), center=CoordinateModel.of(center))


# ---------- Grid ----------

@app.post("/grid/lines")
async def grid_lines(req: GridRequest):
    bounds, center = _frame(req)
    try:
        expected = count_grid_lines(bounds, req.cell_size)
        if expected > config.MAX_GRID_LINES:
            raise HTTPException(
                400,
                f"Grid would have {expected} lines (max {config.MAX_GRID_LINES}). Use a larger cell_size.",
            )
        lines = calc_grid_lines(bounds, center, req.rotation, req.offset.to_offset(), req.cell_size)
    except InvalidParameter as e:
        raise HTTPException(400, str(e))
    return {"count": len(lines), "lines": [GridLineModel.of(line) for line in lines]}


@app.post("/grid/cells")
async def grid_cells(req: GridRequest):
    """Generate cells, clip them to the boundary when one is given, and store them."""
    bounds, center = _frame(req)
    geometries = None
    if req.boundary is not None:
        try:
            geometries = boundary_geometries(req.boundary)
        except BoundaryError as e:
            raise HTTPException(400, f"Cannot read boundary: {e}")
    try:
        expected = count_grid_cells(bounds, req.cell_size)
        if expected > config.MAX_GRID_CELLS:
            raise HTTPException(
                400,
                f"Grid would have {expected} cells (max {config.MAX_GRID_CELLS}). Use a larger cell_size.",
            )
        cells = calc_grid_cells(bounds, center, req.rotation, req.offset.to_offset(), req.cell_size)
    except InvalidParameter as e:
        raise HTTPException(400, str(e))

    if geometries is not None:
        clipped = (clip_to_geometries(cell, geometries) for cell in cells)
        cells = [cell for cell in clipped if cell is not None]
        logger.info("Clipped grid to boundary: %d of %d cells kept", len(cells), expected)

    store.replace_cells(cells)
    return {"count": len(cells), "cells": [GridCellModel.of(c) for c in cells]}


# ---------- Cells ----------

@app.get("/cells")
async def get_cells():
    cells = store.get_all_cells()
    return {"count": len(cells), "cells": [GridCellModel.of(c) for c in cells]}


@app.get("/cells/{cell_id}", response_model=GridCellModel)
async def get_cell(cell_id: str):
    cell = store.get_cell(cell_id)
    if cell is None:
        raise HTTPException(404, f"No cell {cell_id}. Generate a grid first via POST /grid/cells")
    return GridCellModel.of(cell)


@app.patch("/cells/{cell_id}", response_model=GridCellModel)
async def update_cell(cell_id: str, update: CellUpdate):
    cell = store.update_cell(cell_id, selected=update.selected, status=update.status)
    if cell is None:
        raise HTTPException(404, f"No cell {cell_id}")
    return GridCellModel.of(cell)


# ---------- Config (read-only) ----------

@app.get("/config")
async def get_config():
    return {
        "grid_cell_size_m": config.GRID_CELL_SIZE_M,
        "max_grid_cells": config.MAX_GRID_CELLS,
        "max_grid_lines": config.MAX_GRID_LINES,
        "bounds_padding_deg": config.BOUNDS_PADDING_DEG,
    }
