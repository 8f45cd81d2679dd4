"""
KD-tree with removal, used as the colour palette of a growth stage.

Nodes live in flat arrays (an index-addressed arena): each node knows its
parent, the number of live points under it, and either its two children
with the split (dimension, median) or, for leaves, the contiguous range of
point slots it owns. Removing a point clears its ``alive`` flag and
decrements the live count from its leaf up to the root, so emptied
subtrees are skipped by later searches without restructuring the tree.

The per-leaf distance scan is compiled with ``numba.njit``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
from numba import njit

MAX_LEAF_SIZE = 50


@dataclass
class PerformanceStats:
    """Work done by a single search."""

    nodes_checked: int = 0
    leaf_nodes_checked: int = 0
    points_checked: int = 0


@dataclass
class KDTreeResult:
    res: Optional[Tuple] = None
    stats: PerformanceStats = field(default_factory=PerformanceStats)


@njit(cache=True)
def _scan_leaf(points: np.ndarray, alive: np.ndarray, start: int, end: int,
               target: np.ndarray) -> Tuple[int, float]:
    """Index and squared distance of the closest live point in [start, end)."""
    best = -1
    best_dist2 = 0.0
    for k in range(start, end):
        if not alive[k]:
            continue
        dist2 = 0.0
        for dim in range(points.shape[1]):
            diff = points[k, dim] - target[dim]
            dist2 += diff * diff
        # Strict comparison keeps the first minimum on ties.
        if best == -1 or dist2 < best_dist2:
            best = k
            best_dist2 = dist2
    return best, best_dist2


class KDTree:
    """
    Approximate nearest-neighbour index over an (N, D) array of points.

    ``closest`` and ``pop_closest`` accept an ``epsilon`` >= 0. With
    ``epsilon == 0`` the exact nearest point is returned. Larger values
    let the search accept a candidate from the near side of a split
    without visiting the far side whenever the candidate's squared distance
    is below ``(diff * (1 + epsilon)) ** 2``, where ``diff`` is the
    target's offset from the split plane.
    """

    def __init__(self, points: Sequence | np.ndarray, num_dimensions: Optional[int] = None) -> None:
        values = np.asarray(points)
        if values.ndim != 2:
            values = values.reshape(-1, num_dimensions or 3)
        self.num_dimensions = values.shape[1]

        coords = values.astype(np.float64)
        order = np.arange(values.shape[0], dtype=np.int64)

        self._parent: List[int] = []
        self._count: List[int] = []
        self._is_leaf: List[bool] = []
        self._left: List[int] = []
        self._right: List[int] = []
        self._dimension: List[int] = []
        self._median: List[float] = []
        self._start: List[int] = []
        self._end: List[int] = []

        self._generate_nodes(coords, order, 0, len(order), 0, -1)

        self._values = values[order]
        self._coords = np.ascontiguousarray(coords[order])
        self._alive = np.ones(len(order), dtype=np.bool_)

    # ------------------------------------------------------------------ build
    def _push_node(self, parent: int, count: int) -> int:
        self._parent.append(parent)
        self._count.append(count)
        self._is_leaf.append(True)
        self._left.append(-1)
        self._right.append(-1)
        self._dimension.append(-1)
        self._median.append(0.0)
        self._start.append(0)
        self._end.append(0)
        return len(self._parent) - 1

    def _generate_nodes(self, coords: np.ndarray, order: np.ndarray, lo: int,
                        hi: int, dimension: int, parent: int) -> int:
        size = hi - lo
        node = self._push_node(parent, size)

        if size <= MAX_LEAF_SIZE:
            self._start[node] = lo
            self._end[node] = hi
            return node

        # Linear-time selection of the median along this dimension.
        mid = size // 2
        segment = order[lo:hi]
        part = np.argpartition(coords[segment, dimension], mid, kind="introselect")
        order[lo:hi] = segment[part]

        self._is_leaf[node] = False
        self._dimension[node] = dimension
        self._median[node] = float(coords[order[lo + mid], dimension])

        next_dimension = (dimension + 1) % self.num_dimensions
        self._left[node] = self._generate_nodes(
            coords, order, lo, lo + mid, next_dimension, node
        )
        self._right[node] = self._generate_nodes(
            coords, order, lo + mid, hi, next_dimension, node
        )
        return node

    # ------------------------------------------------------------------ public
    def __len__(self) -> int:
        return self.num_points()

    @property
    def num_nodes(self) -> int:
        return len(self._parent)

    def num_points(self) -> int:
        """Number of points not yet popped."""
        return self._count[0]

    def iter_points(self) -> Iterator[Optional[Tuple]]:
        """Stored points in slot order, ``None`` for popped slots."""
        for value, alive in zip(self._values, self._alive):
            yield tuple(value.tolist()) if alive else None

    def closest(self, target: Sequence[float], epsilon: float = 0.0) -> KDTreeResult:
        stats = PerformanceStats()
        found = self._closest_node(self._as_target(target), 0, stats, epsilon)
        if found is None:
            return KDTreeResult(None, stats)
        return KDTreeResult(tuple(self._values[found[1]].tolist()), stats)

    def pop_closest(self, target: Sequence[float], epsilon: float = 0.0) -> KDTreeResult:
        stats = PerformanceStats()
        found = self._closest_node(self._as_target(target), 0, stats, epsilon)
        if found is None:
            return KDTreeResult(None, stats)

        _, point_index, leaf = found
        self._alive[point_index] = False
        node = leaf
        while node != -1:
            self._count[node] -= 1
            node = self._parent[node]
        return KDTreeResult(tuple(self._values[point_index].tolist()), stats)

    # ------------------------------------------------------------------ search
    def _as_target(self, target: Sequence[float]) -> np.ndarray:
        return np.asarray(target, dtype=np.float64).reshape(self.num_dimensions)

    def _closest_node(self, target: np.ndarray, node: int, stats: PerformanceStats,
                      epsilon: float) -> Optional[Tuple[float, int, int]]:
        """(dist2, point slot, leaf node) of the best live point under ``node``."""
        if self._count[node] == 0:
            return None
        stats.nodes_checked += 1

        if self._is_leaf[node]:
            stats.leaf_nodes_checked += 1
            stats.points_checked += self._count[node]
            index, dist2 = _scan_leaf(
                self._coords, self._alive, self._start[node], self._end[node], target
            )
            return float(dist2), int(index), node

        diff = target[self._dimension[node]] - self._median[node]
        if diff < 0.0:
            first, second = self._left[node], self._right[node]
        else:
            first, second = self._right[node], self._left[node]

        res1 = self._closest_node(target, first, stats, epsilon)
        if res1 is not None and res1[0] < (diff * (epsilon + 1.0)) ** 2:
            return res1

        res2 = self._closest_node(target, second, stats, epsilon)
        if res1 is None:
            return res2
        if res2 is None or res1[0] <= res2[0]:
            return res1
        return res2


__all__ = ["KDTree", "KDTreeResult", "PerformanceStats", "MAX_LEAF_SIZE"]
