"""Tests for the in-memory cell store."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import store
from geodesy import Coordinate
from grid import CellStatus, GridCell


def _cell() -> GridCell:
    return GridCell.from_ring([Coordinate(0, 0), Coordinate(0, 1), Coordinate(1, 1), Coordinate(1, 0), Coordinate(0, 0)])


def setup_function():
    store.clear()


def test_replace_and_get():
    cells = [_cell(), _cell()]
    store.replace_cells(cells)
    assert {c.id for c in store.get_all_cells()} == {c.id for c in cells}
    assert store.get_cell(cells[0].id) is cells[0]


def test_replace_drops_previous_grid():
    old = _cell()
    store.replace_cells([old])
    store.replace_cells([_cell()])
    assert store.get_cell(old.id) is None
    assert len(store.get_all_cells()) == 1


def test_update_any_transition():
    cell = _cell()
    store.replace_cells([cell])
    store.update_cell(cell.id, status=CellStatus.DONE)
    store.update_cell(cell.id, status=CellStatus.PENDING)
    updated = store.update_cell(cell.id, status=CellStatus.SKIPPED, selected=True)
    assert updated is cell
    assert cell.status is CellStatus.SKIPPED
    assert cell.selected is True


def test_update_leaves_unset_fields():
    cell = _cell()
    cell.selected = True
    store.replace_cells([cell])
    store.update_cell(cell.id, status=CellStatus.DONE)
    assert cell.selected is True


def test_update_unknown_cell():
    assert store.update_cell("missing", selected=True) is None
