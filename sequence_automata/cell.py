"""Lattice points with a reusable neighbour-enumeration cursor."""

from enum import Enum
from typing import Iterator, List, Sequence, Tuple

from .errors import EnumerationOverflow

Coordinate = Tuple[int, ...]


class Offset(Enum):
    SAME = 0
    PLUS = 1
    MINUS = -1


# Advance order of a single axis of the cursor
_NEXT_OFFSET = {
    Offset.SAME: Offset.PLUS,
    Offset.PLUS: Offset.MINUS,
    Offset.MINUS: Offset.SAME,
}


class Cell:
    """A point of the integer lattice with a boolean state.

    The per-axis cursor walks the 3^D - 1 neighbouring offsets in mixed-radix
    order (axis 0 varies fastest). It is scratch state and takes no part in
    equality.
    """

    __slots__ = ("coordinates", "active", "_cursor")

    def __init__(self, coordinates: Sequence[int], active: bool = False):
        self.coordinates: Coordinate = tuple(int(c) for c in coordinates)
        self.active = bool(active)
        self._cursor: List[Offset] = [Offset.SAME] * len(self.coordinates)

    @classmethod
    def origin(cls, dimensions: int, active: bool = False) -> "Cell":
        return cls((0,) * dimensions, active=active)

    @property
    def dimensions(self) -> int:
        return len(self.coordinates)

    def get_coordinate(self, axis: int) -> int:
        if not 0 <= axis < len(self.coordinates):
            raise IndexError(f"Axis {axis} outside a {len(self.coordinates)}-dimensional cell")
        return self.coordinates[axis]

    def set(self):
        self.active = True

    def unset(self):
        self.active = False

    def flip(self):
        self.active = not self.active

    def has_unexplored_nearby_cell(self) -> bool:
        return any(offset != Offset.MINUS for offset in self._cursor)

    def generate_next_unexplored_nearby_cell(self):
        if not self.has_unexplored_nearby_cell():
            raise EnumerationOverflow("Every nearby cell has already been explored")

        for axis, offset in enumerate(self._cursor):
            self._cursor[axis] = _NEXT_OFFSET[offset]
            if offset != Offset.MINUS:
                # No rollover, no carry
                return

    def get_nearby_coordinate(self) -> Coordinate:
        return tuple(c + offset.value for c, offset in zip(self.coordinates, self._cursor))

    def reset_explore(self):
        self._cursor = [Offset.SAME] * len(self.coordinates)

    def iter_nearby_coordinates(self) -> Iterator[Coordinate]:
        """Yield every neighbouring coordinate (excluding the cell's own) in cursor order."""
        self.reset_explore()
        while self.has_unexplored_nearby_cell():
            self.generate_next_unexplored_nearby_cell()
            yield self.get_nearby_coordinate()
        self.reset_explore()

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return False
        return self.coordinates == other.coordinates and self.active == other.active

    def __repr__(self):
        state = "active" if self.active else "inactive"
        return f"Cell({self.coordinates}, {state})"
