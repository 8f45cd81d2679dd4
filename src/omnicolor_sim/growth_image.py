"""
Multi-stage growth of an image from a finite colour palette.

Each call to :meth:`GrowthImage.fill` picks a random frontier pixel,
estimates a target colour from its already-painted neighbours and paints
it with the closest colour still left in the active stage's palette.
Stages run one after another; a stage ends when its iteration budget is
used, its palette is empty or its frontier is empty.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .color import RGB
from .kd_tree import KDTree, PerformanceStats
from .point_tracker import FrontierTracker
from .topology import PixelLoc, Topology

FORBIDDEN = "forbidden"
ALLOWED = "allowed"


@dataclass(frozen=True)
class Region:
    """Points a stage may not grow into (``forbidden``) or is limited to (``allowed``)."""

    kind: str = FORBIDDEN
    points: Tuple[PixelLoc, ...] = ()

    @classmethod
    def forbidden(cls, points: Sequence) -> "Region":
        return cls(FORBIDDEN, tuple(PixelLoc(*p) for p in points))

    @classmethod
    def allowed(cls, points: Sequence) -> "Region":
        return cls(ALLOWED, tuple(PixelLoc(*p) for p in points))

    def apply(self, tracker: FrontierTracker) -> None:
        if self.kind == ALLOWED:
            tracker.mark_all_used()
            for loc in self.points:
                tracker.mark_as_unused(loc)
        else:
            for loc in self.points:
                tracker.mark_as_used(loc)


@dataclass
class GrowthStage:
    palette: KDTree
    max_iter: Optional[int] = None
    grow_from_previous: bool = True
    seed_points: Tuple[PixelLoc, ...] = ()
    num_random_seed_points: int = 0
    region: Region = field(default_factory=Region)
    portals: Dict[PixelLoc, PixelLoc] = field(default_factory=dict)


class GrowthImage:
    """
    Owns the canvas and drives the stages.

    Pixel colours are stored per flat index (see :class:`Topology`) in
    ``pixels`` with a parallel ``painted`` mask. ``stage_map`` records which
    stage painted each pixel (-1 if none) and ``stats`` the palette search
    cost of each fill attempt.
    """

    def __init__(
        self,
        topology: Topology,
        stages: List[GrowthStage],
        *,
        epsilon: float = 1.0,
        rng: Optional[np.random.Generator] = None,
        verbose: bool = False,
    ) -> None:
        self.topology = topology
        self.stages = stages
        self.epsilon = epsilon
        self.rng = rng if rng is not None else np.random.default_rng()
        self.verbose = verbose

        size = len(topology)
        self.pixels = np.zeros((size, 3), dtype=np.uint8)
        self.painted = np.zeros(size, dtype=bool)
        self.stage_map = np.full(size, -1, dtype=np.int64)
        self.stats: List[Optional[PerformanceStats]] = [None] * size

        self.active_stage: Optional[int] = None
        self.current_stage_iter = 0
        self.point_tracker = FrontierTracker(topology)
        self.is_done = False

        self.num_filled = 0
        self.num_steps = 0
        self._start_time = time.time()

    # ------------------------------------------------------------------ driving
    def fill(self) -> Optional[PixelLoc]:
        """
        Paint at most one pixel.

        Returns the painted location, or ``None`` if nothing was painted on
        this call (all stages finished, or the palette came up empty).
        """
        if self.is_done:
            return None

        while self.active_stage is None or self._stage_finished():
            if not self._start_next_stage():
                self.is_done = True
                if self.verbose:
                    print(
                        f"[grow] Done: filled {self.num_filled}/{len(self.topology)} "
                        f"in {self.num_steps} steps, "
                        f"elapsed={time.time() - self._start_time:.1f}s"
                    )
                return None

        return self._try_fill()

    def fill_until_done(
        self,
        callback: Optional[Callable[["GrowthImage"], None]] = None,
        callback_every: int = 1000,
    ) -> None:
        """Fill until every stage is finished, calling ``callback`` every ``callback_every`` pixels."""
        while not self.is_done:
            loc = self.fill()
            if (
                callback is not None
                and loc is not None
                and self.num_filled % max(1, callback_every) == 0
            ):
                callback(self)
        if callback is not None:
            callback(self)

    # ------------------------------------------------------------------ stages
    def _stage_finished(self) -> bool:
        stage = self.stages[self.active_stage]
        if stage.max_iter is not None and self.current_stage_iter >= stage.max_iter:
            return True
        if stage.palette.num_points() == 0:
            return True
        return self.point_tracker.is_done()

    def _start_next_stage(self) -> bool:
        next_stage = 0 if self.active_stage is None else self.active_stage + 1
        if next_stage >= len(self.stages):
            return False

        self.active_stage = next_stage
        self.current_stage_iter = 0
        stage = self.stages[next_stage]

        self.topology.portals = dict(stage.portals)

        tracker = FrontierTracker(self.topology)
        stage.region.apply(tracker)

        for index in np.flatnonzero(self.painted):
            loc = self.topology.get_loc(int(index))
            if stage.grow_from_previous:
                tracker.fill(loc)
            else:
                tracker.mark_as_used(loc)

        for loc in stage.seed_points:
            tracker.add_to_frontier(loc)
        tracker.add_random_to_frontier(stage.num_random_seed_points, self.rng)

        self.point_tracker = tracker

        if self.verbose:
            print(
                f"[grow] Starting stage {next_stage + 1}/{len(self.stages)}: "
                f"palette={stage.palette.num_points()}, "
                f"frontier={tracker.frontier_size()}"
            )
        return True

    # ------------------------------------------------------------------ filling
    def _try_fill(self) -> Optional[PixelLoc]:
        tracker = self.point_tracker
        pick = int(self.rng.integers(tracker.frontier_size()))
        loc = tracker.get_frontier_point(pick)
        tracker.fill(loc)
        self.num_steps += 1

        index = self.topology.get_index(loc)
        if index is None:
            return None

        target = self.get_adjacent_color(loc)
        if target is None:
            target = RGB.from_values(self.rng.integers(0, 256, size=3))

        stage = self.stages[self.active_stage]
        result = stage.palette.pop_closest(target, self.epsilon)
        self.stats[index] = result.stats
        if result.res is None:
            return None

        self.pixels[index] = result.res
        self.painted[index] = True
        self.stage_map[index] = self.active_stage
        self.current_stage_iter += 1
        self.num_filled += 1

        if self.verbose and self.num_filled % max(1, len(self.topology) // 10) == 0:
            print(
                f"[grow] Filled {self.num_filled}/{len(self.topology)}, "
                f"stage={self.active_stage + 1}, "
                f"elapsed={time.time() - self._start_time:.1f}s"
            )
        return loc

    def get_adjacent_color(self, loc: PixelLoc) -> Optional[RGB]:
        """Channel-wise integer mean of the painted neighbours, portals included."""
        total = np.zeros(3, dtype=np.int64)
        count = 0
        for adjacent in self.topology.iter_adjacent(loc):
            index = self.topology.get_index(adjacent)
            if index is not None and self.painted[index]:
                total += self.pixels[index]
                count += 1
        if count == 0:
            return None
        return RGB.from_values(total // count)

    # ------------------------------------------------------------------ access
    def get_pixel(self, loc: PixelLoc) -> Optional[RGB]:
        index = self.topology.get_index(loc)
        if index is None or not self.painted[index]:
            return None
        return RGB.from_values(self.pixels[index])

    def _layer_shape(self, layer: int) -> Tuple[int, int]:
        geometry = self.topology.layers[layer]
        return geometry.height, geometry.width

    def layer_pixels(self, layer: int = 0) -> np.ndarray:
        """(height, width, 4) RGBA array; unpainted pixels are transparent black."""
        bounds = self.topology.layer_bounds(layer)
        rgba = np.zeros((len(bounds), 4), dtype=np.uint8)
        rgba[:, :3] = self.pixels[bounds.start : bounds.stop]
        rgba[:, 3] = np.where(self.painted[bounds.start : bounds.stop], 255, 0)
        return rgba.reshape(*self._layer_shape(layer), 4)

    def layer_stage_map(self, layer: int = 0) -> np.ndarray:
        bounds = self.topology.layer_bounds(layer)
        return self.stage_map[bounds.start : bounds.stop].reshape(
            self._layer_shape(layer)
        )

    def layer_stats(self, layer: int = 0, attr: str = "points_checked") -> np.ndarray:
        """Per-pixel search counter ``attr``; -1 where no search happened."""
        bounds = self.topology.layer_bounds(layer)
        values = np.array(
            [
                -1 if s is None else getattr(s, attr)
                for s in self.stats[bounds.start : bounds.stop]
            ],
            dtype=np.int64,
        )
        return values.reshape(self._layer_shape(layer))


__all__ = ["GrowthImage", "GrowthStage", "Region"]
