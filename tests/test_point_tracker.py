import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from src.omnicolor_sim.point_tracker import FrontierTracker
from src.omnicolor_sim.topology import Layer, PixelLoc, Topology


def assert_consistent(tracker):
    assert len(set(tracker.frontier)) == len(tracker.frontier)
    assert len(tracker.frontier_index) == len(tracker.frontier)
    for position, loc in enumerate(tracker.frontier):
        assert tracker.frontier_index[loc] == position
        assert tracker.visited[tracker.topology.get_index(loc)]


def test_add_to_frontier_ignores_duplicates_and_invalid():
    tracker = FrontierTracker(Topology([Layer(4, 4)]))
    tracker.add_to_frontier(PixelLoc(1, 1))
    tracker.add_to_frontier(PixelLoc(1, 1))
    tracker.add_to_frontier(PixelLoc(7, 1))
    tracker.add_to_frontier(PixelLoc(0, 0, layer=1))

    assert tracker.frontier == [PixelLoc(1, 1)]
    assert not tracker.is_done()
    assert_consistent(tracker)


def test_fill_moves_frontier_outward():
    tracker = FrontierTracker(Topology([Layer(4, 4)]))
    tracker.add_to_frontier(PixelLoc(0, 0))
    tracker.fill(PixelLoc(0, 0))

    assert set(tracker.frontier) == {PixelLoc(1, 0), PixelLoc(0, 1), PixelLoc(1, 1)}
    assert tracker.visited[0]
    assert_consistent(tracker)

    tracker.fill(PixelLoc(1, 0))
    assert PixelLoc(1, 0) not in tracker.frontier
    assert PixelLoc(2, 0) in tracker.frontier
    assert PixelLoc(2, 1) in tracker.frontier
    assert PixelLoc(0, 0) not in tracker.frontier
    assert_consistent(tracker)


def test_flood_fill_visits_every_pixel_once():
    topology = Topology([Layer(7, 5)])
    tracker = FrontierTracker(topology)
    rng = np.random.default_rng(0)
    tracker.add_to_frontier(PixelLoc(3, 2))

    filled = []
    while not tracker.is_done():
        loc = tracker.get_frontier_point(int(rng.integers(tracker.frontier_size())))
        tracker.fill(loc)
        filled.append(loc)
        assert_consistent(tracker)

    assert len(filled) == len(set(filled)) == len(topology)
    assert tracker.visited.all()


def test_portal_adds_partner_to_frontier():
    topology = Topology([Layer(3, 3), Layer(3, 3)])
    a, b = PixelLoc(0, 0, 0), PixelLoc(2, 2, 1)
    topology.portals = topology.resolve_portals([(a, b)])

    tracker = FrontierTracker(topology)
    tracker.add_to_frontier(a)
    tracker.fill(a)
    assert b in tracker.frontier

    reverse = FrontierTracker(topology)
    reverse.add_to_frontier(b)
    reverse.fill(b)
    assert a in reverse.frontier


def test_mark_as_used_blocks_growth():
    tracker = FrontierTracker(Topology([Layer(3, 1)]))
    tracker.mark_as_used(PixelLoc(1, 0))
    tracker.add_to_frontier(PixelLoc(0, 0))
    tracker.fill(PixelLoc(0, 0))
    assert tracker.is_done()

    tracker.mark_as_unused(PixelLoc(2, 0))
    tracker.mark_as_unused(PixelLoc(1, 0))
    tracker.add_to_frontier(PixelLoc(1, 0))
    assert tracker.frontier == [PixelLoc(1, 0)]


def test_mark_all_used():
    tracker = FrontierTracker(Topology([Layer(3, 3)]))
    tracker.mark_all_used()
    assert tracker.num_unvisited() == 0
    tracker.mark_as_unused(PixelLoc(1, 1))
    tracker.add_to_frontier(PixelLoc(1, 1))
    tracker.fill(PixelLoc(1, 1))
    assert tracker.is_done()


def test_add_random_to_frontier():
    topology = Topology([Layer(5, 5), Layer(2, 2)])
    tracker = FrontierTracker(topology)
    for i in range(5):
        tracker.mark_as_used(PixelLoc(i, 0))

    rng = np.random.default_rng(1)
    tracker.add_random_to_frontier(6, rng)
    assert tracker.frontier_size() == 6
    assert all(loc.j != 0 or loc.layer == 1 for loc in tracker.frontier)
    assert_consistent(tracker)

    tracker.add_random_to_frontier(100, rng)
    assert tracker.frontier_size() == len(topology) - 5
    assert tracker.num_unvisited() == 0

    tracker.add_random_to_frontier(3, rng)
    assert tracker.frontier_size() == len(topology) - 5


def test_add_random_is_reproducible():
    def picks(seed):
        tracker = FrontierTracker(Topology([Layer(10, 10)]))
        tracker.add_random_to_frontier(4, np.random.default_rng(seed))
        return list(tracker.frontier)

    assert picks(42) == picks(42)
