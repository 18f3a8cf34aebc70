"""Sparse N-dimensional cellular automaton grown from a single active cell."""

from typing import FrozenSet, List, Optional, Sequence

from .cell import Cell, Coordinate
from .lattice import Lattice
from .rule import Rule, neighbourhood_size


class CellularAutomaton:
    """Runs one rule (under one leaf permutation) on a fresh lattice."""

    def __init__(self, dimensions: int, rule: Rule, permutation: Optional[Sequence[int]] = None):
        if rule.dimensions != dimensions:
            raise ValueError(
                f"Rule reads a {rule.dimensions}-dimensional neighbourhood, "
                f"automaton has {dimensions} dimensions"
            )
        if permutation is not None:
            size = neighbourhood_size(dimensions)
            if sorted(permutation) != list(range(size)):
                raise ValueError(
                    f"{list(permutation)} is not a permutation of the {size} neighbourhood values"
                )
        self.dimensions = dimensions
        self.rule = rule
        self.permutation = list(permutation) if permutation is not None else rule.permutation
        self.lattice = Lattice(dimensions)
        self.generation = 0
        self._history: List[FrozenSet[Coordinate]] = []
        self.seed()

    def seed(self):
        """Start over from a single active cell at the origin."""
        self.lattice = Lattice(self.dimensions)
        self.lattice.push(Cell.origin(self.dimensions, active=True))
        self.generation = 0
        self._history = []

    def neighbourhood(self, cell: Cell) -> List[bool]:
        """The cell's own state followed by its neighbours' states."""
        values = [cell.active]
        for coordinates in cell.iter_nearby_coordinates():
            values.append(self.lattice.state_at(coordinates))
        return values

    def step(self, record_history: bool = False):
        """Advance simulation by one generation."""
        if record_history:
            self._history.append(self.lattice.active_coordinates())

        self.lattice.expand_frontier()

        # Every condition reads the previous generation
        firing = [
            cell for cell in self.lattice
            if self.rule.evaluate(self.neighbourhood(cell), self.permutation)
        ]
        for cell in firing:
            self.rule.apply(cell)

        self.generation += 1

    def run(self, steps: int, record_history: bool = False) -> List[FrozenSet[Coordinate]]:
        """Run simulation for multiple steps."""
        for _ in range(steps):
            self.step(record_history=record_history)
        if record_history:
            self._history.append(self.lattice.active_coordinates())
        return self._history

    def get_history(self) -> List[FrozenSet[Coordinate]]:
        return self._history

    def population(self) -> int:
        """Count active cells."""
        return self.lattice.count_active()

    def trajectory(self, steps: int) -> List[int]:
        """Population of the current generation followed by the next `steps` ones."""
        populations = [self.population()]
        for _ in range(steps):
            self.step()
            populations.append(self.population())
        return populations

    def match_depth(self, target: Sequence[int]) -> int:
        """How many leading entries of target this automaton reproduces.

        Stops at the first mismatch; the last entry is checked without
        stepping past it.
        """
        for iteration, expected in enumerate(target, start=1):
            if self.population() != expected:
                return iteration - 1
            if iteration < len(target):
                self.step()
        return len(target)
