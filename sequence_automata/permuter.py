"""Cross-cluster transposition cursor used to relabel formula leaves."""

import copy
from typing import List, Optional, Sequence, Tuple

from .errors import EnumerationOverflow

# ((cluster i, position x), (cluster j, position y)) with j > i
Position = Tuple[int, int]
Pair = Tuple[Position, Position]


class SymmetryPermuter:
    """Enumerates leaf relabelings that exchange variables between clusters.

    The first configuration is always the identity. Each generate_next()
    applies the next cross-cluster pair in row-major order over (i, x) then
    (j, y); the swapped layout is handed to a child permuter that keeps going
    from one x-position further, so chains of exchanges are covered without
    building the cross product up front.
    """

    def __init__(self, clusters: Sequence[Sequence[int]] = ()):
        self.reset(clusters)

    def reset(self, clusters: Sequence[Sequence[int]]):
        self._clusters: List[List[int]] = [list(cluster) for cluster in clusters]
        self._layout: List[List[int]] = copy.deepcopy(self._clusters)
        self._cursor: Optional[Pair] = None
        self._child: Optional["SymmetryPermuter"] = None

    def _successor(self, pair: Optional[Pair]) -> Optional[Pair]:
        clusters = self._clusters
        n = len(clusters)
        if n < 2:
            return None
        if pair is None:
            return (0, 0), (1, 0)

        (xi, xj), (yi, yj) = pair
        if yj + 1 < len(clusters[yi]):
            return (xi, xj), (yi, yj + 1)
        if yi + 1 < n:
            return (xi, xj), (yi + 1, 0)
        if xj + 1 < len(clusters[xi]):
            return (xi, xj + 1), (xi + 1, 0)
        if xi + 2 < n:
            return (xi + 1, 0), (xi + 2, 0)
        return None

    def _last_pair(self) -> Pair:
        n = len(self._clusters)
        return (n - 2, len(self._clusters[n - 2]) - 1), (n - 1, len(self._clusters[n - 1]) - 1)

    def _spawn(self, pair: Pair) -> "SymmetryPermuter":
        (xi, xj), (yi, yj) = pair
        child = SymmetryPermuter.__new__(SymmetryPermuter)
        child._clusters = copy.deepcopy(self._clusters)
        child._clusters[xi][xj], child._clusters[yi][yj] = (
            child._clusters[yi][yj],
            child._clusters[xi][xj],
        )
        child._layout = self._layout
        child._child = None

        n = len(self._clusters)
        if xj + 1 < len(self._clusters[xi]):
            child._cursor = (xi, xj + 1), (xi + 1, 0)
        elif xi + 2 < n:
            child._cursor = (xi + 1, 0), (xi + 2, 0)
        else:
            child._cursor = self._last_pair()
        return child

    def has_next(self) -> bool:
        if self._child is not None and self._child.has_next():
            return True
        return self._successor(self._cursor) is not None

    def generate_next(self):
        if self._child is not None and self._child.has_next():
            self._child.generate_next()
            return

        pair = self._successor(self._cursor)
        if pair is None:
            raise EnumerationOverflow("Every cross-cluster exchange has been generated")
        self._cursor = pair
        self._child = self._spawn(pair)

    def get_sequence(self) -> List[int]:
        """Value index read by each leaf, in leaf order (identity before any exchange)."""
        if self._child is not None:
            return self._child.get_sequence()

        mapping = {}
        for original, current in zip(self._layout, self._clusters):
            for leaf, value in zip(original, current):
                mapping[leaf] = value
        return [mapping[leaf] for leaf in sorted(mapping)]

    def __repr__(self):
        return f"SymmetryPermuter({self._layout}, sequence={self.get_sequence()})"
