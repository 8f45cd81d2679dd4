from __future__ import annotations

from typing import Dict, List

import numpy as np

from .topology import PixelLoc, Topology


class FrontierTracker:
    """
    Growable boundary of the painted region.

    ``visited`` is set for every location that is on the frontier, already
    filled, or excluded up front. The frontier list plus a position map
    give O(1) append and swap-removal.
    """

    def __init__(self, topology: Topology) -> None:
        self.topology = topology
        self.frontier: List[PixelLoc] = []
        self.frontier_index: Dict[PixelLoc, int] = {}
        self.visited = np.zeros(len(topology), dtype=bool)

    def add_to_frontier(self, loc: PixelLoc) -> None:
        index = self.topology.get_index(loc)
        if index is None or self.visited[index]:
            return
        self.visited[index] = True
        self.frontier_index[loc] = len(self.frontier)
        self.frontier.append(loc)

    def mark_as_used(self, loc: PixelLoc) -> None:
        index = self.topology.get_index(loc)
        if index is not None:
            self.visited[index] = True

    def mark_as_unused(self, loc: PixelLoc) -> None:
        index = self.topology.get_index(loc)
        if index is not None:
            self.visited[index] = False

    def mark_all_used(self) -> None:
        self.visited[:] = True

    def add_random_to_frontier(self, num_points: int, rng: np.random.Generator) -> None:
        """Add up to ``num_points`` distinct unvisited locations, chosen uniformly."""
        unvisited = np.flatnonzero(~self.visited)
        count = min(num_points, len(unvisited))
        if count <= 0:
            return
        picks = np.sort(rng.choice(len(unvisited), size=count, replace=False))
        for index in unvisited[picks]:
            self.add_to_frontier(self.topology.get_loc(int(index)))

    def fill(self, loc: PixelLoc) -> None:
        """Frontier the neighbours of ``loc`` and retire ``loc`` itself."""
        self.mark_as_used(loc)
        for adjacent in self.topology.iter_adjacent(loc):
            self.add_to_frontier(adjacent)
        self._remove_from_frontier(loc)

    def _remove_from_frontier(self, loc: PixelLoc) -> None:
        index = self.frontier_index.pop(loc, None)
        if index is None:
            return
        last = self.frontier.pop()
        if last != loc:
            self.frontier[index] = last
            self.frontier_index[last] = index

    def is_done(self) -> bool:
        return not self.frontier

    def frontier_size(self) -> int:
        return len(self.frontier)

    def get_frontier_point(self, index: int) -> PixelLoc:
        return self.frontier[index]

    def num_unvisited(self) -> int:
        return int(np.count_nonzero(~self.visited))
