"""In-memory cell store: the most recently generated grid, keyed by cell id.

The grid code never mutates a cell after creation; this is where the
application keeps the cells whose ``selected``/``status`` it toggles.
"""

import threading

from grid import CellStatus, GridCell

_lock = threading.Lock()
_cells: dict[str, GridCell] = {}


def replace_cells(cells: list[GridCell]) -> None:
    """Drop the stored grid and keep ``cells`` instead (ids are never reused)."""
    with _lock:
        _cells.clear()
        _cells.update((c.id, c) for c in cells)


def get_all_cells() -> list[GridCell]:
    with _lock:
        return list(_cells.values())


def get_cell(cell_id: str) -> GridCell | None:
    with _lock:
        return _cells.get(cell_id)


def update_cell(
    cell_id: str,
    selected: bool | None = None,
    status: CellStatus | None = None,
) -> GridCell | None:
    """Apply the given fields; any status transition is allowed."""
    with _lock:
        cell = _cells.get(cell_id)
        if cell is None:
            return None
        if selected is not None:
            cell.selected = selected
        if status is not None:
            cell.status = status
        return cell


def clear() -> None:
    with _lock:
        _cells.clear()
