"""Sparse, append-only integer lattice that grows around its active cells."""

from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .cell import Cell, Coordinate


class Lattice:
    """Cells of one D-dimensional trial, indexed by their full coordinate.

    Cells are only ever added. A coordinate that was never materialised is
    Inactive: every neighbour of a cell that has been Active is materialised
    by expand_frontier().
    """

    def __init__(self, dimensions: int):
        if dimensions < 1:
            raise ValueError(f"A lattice needs at least one dimension, got {dimensions}")
        self.dimensions = dimensions
        self.cells: List[Cell] = []
        self._index: Dict[Coordinate, int] = {}

    def _check(self, coordinates: Sequence[int]) -> Coordinate:
        coordinates = tuple(coordinates)
        if len(coordinates) != self.dimensions:
            raise ValueError(
                f"Coordinate {coordinates} does not have {self.dimensions} components"
            )
        return coordinates

    def _append(self, cell: Cell):
        self._index[cell.coordinates] = len(self.cells)
        self.cells.append(cell)

    def push(self, cell: Cell):
        """Insert a copy of cell, or overwrite the state of the cell already there."""
        coordinates = self._check(cell.coordinates)
        position = self._index.get(coordinates)
        if position is None:
            self._append(Cell(coordinates, cell.active))
        else:
            self.cells[position].active = cell.active
        self.expand_frontier()

    def search(self, coordinates: Sequence[int]) -> Optional[Cell]:
        position = self._index.get(self._check(coordinates))
        if position is None:
            return None
        return self.cells[position]

    def state_at(self, coordinates: Sequence[int]) -> bool:
        position = self._index.get(tuple(coordinates))
        return position is not None and self.cells[position].active

    def expand_frontier(self):
        """Materialise an Inactive cell at every missing neighbour of an Active cell."""
        length = len(self.cells)
        for position in range(length):
            cell = self.cells[position]
            if not cell.active:
                continue
            for coordinates in cell.iter_nearby_coordinates():
                if coordinates not in self._index:
                    self._append(Cell(coordinates))

    def count_active(self) -> int:
        return sum(1 for cell in self.cells if cell.active)

    def count_inactive(self) -> int:
        return len(self.cells) - self.count_active()

    def active_coordinates(self) -> FrozenSet[Coordinate]:
        return frozenset(cell.coordinates for cell in self.cells if cell.active)

    def to_array(self, axes: Tuple[int, int] = (0, 1)) -> np.ndarray:
        """Occupancy grid of the active cells, projected onto two axes."""
        return coordinates_to_array(self.active_coordinates(), self.dimensions, axes)

    def __len__(self):
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __contains__(self, coordinates) -> bool:
        return tuple(coordinates) in self._index


def coordinates_to_array(
    active: FrozenSet[Coordinate],
    dimensions: int,
    axes: Tuple[int, int] = (0, 1),
    bounds: Optional[Tuple[Coordinate, Coordinate]] = None,
) -> np.ndarray:
    """Render a set of active coordinates as a uint8 grid (rows = second axis).

    A 1-D lattice gives a single row. Extra dimensions are collapsed: a grid
    cell is on if any active coordinate projects onto it.
    """
    if dimensions == 1:
        axes = (0, 0)
    x_axis, y_axis = axes

    if bounds is None:
        if not active:
            return np.zeros((1, 1), dtype=np.uint8)
        points = np.array(sorted(active), dtype=np.int64)
        low, high = points.min(axis=0), points.max(axis=0)
    else:
        low, high = np.array(bounds[0]), np.array(bounds[1])

    width = int(high[x_axis] - low[x_axis]) + 1
    height = 1 if dimensions == 1 else int(high[y_axis] - low[y_axis]) + 1
    grid = np.zeros((height, width), dtype=np.uint8)

    for coordinates in active:
        x = coordinates[x_axis] - low[x_axis]
        y = 0 if dimensions == 1 else coordinates[y_axis] - low[y_axis]
        if 0 <= x < width and 0 <= y < height:
            grid[y, x] = 1
    return grid
