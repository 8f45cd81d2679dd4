import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from src.omnicolor_sim.topology import Layer, PixelLoc, Topology


def test_index_bounds():
    topology = Topology([Layer(5, 10)])
    assert topology.is_valid(PixelLoc(2, 3))
    assert topology.is_valid(PixelLoc(4, 9))
    assert topology.is_valid(PixelLoc(0, 0))

    assert not topology.is_valid(PixelLoc(5, 3))
    assert not topology.is_valid(PixelLoc(2, 10))
    assert not topology.is_valid(PixelLoc(2, 15))
    assert not topology.is_valid(PixelLoc(-1, 3))
    assert not topology.is_valid(PixelLoc(5, -1))
    assert not topology.is_valid(PixelLoc(-1, -1))
    assert not topology.is_valid(PixelLoc(0, 0, layer=1))
    assert not topology.is_valid(PixelLoc(0, 0, layer=-1))


def test_index_lookup():
    topology = Topology([Layer(5, 10)])

    assert topology.get_index(PixelLoc(0, 0)) == 0
    assert topology.get_index(PixelLoc(1, 0)) == 1
    assert topology.get_index(PixelLoc(0, 1)) == 5
    assert topology.get_index(PixelLoc(1, 1)) == 6
    assert topology.get_index(PixelLoc(4, 9)) == 49

    assert topology.get_index(PixelLoc(-1, 1)) is None
    assert topology.get_index(PixelLoc(4, 10)) is None

    assert topology.get_loc(0) == PixelLoc(0, 0)
    assert topology.get_loc(11) == PixelLoc(1, 2)
    assert topology.get_loc(1) == PixelLoc(1, 0)

    assert topology.get_loc(50) is None
    assert topology.get_loc(500000) is None
    assert topology.get_loc(-1) is None


def test_multi_layer_round_trip():
    topology = Topology([Layer(5, 10), Layer(3, 4), (7, 2)])
    assert len(topology) == 50 + 12 + 14
    assert topology.layer_bounds(1) == range(50, 62)

    for k in range(len(topology)):
        loc = topology.get_loc(k)
        assert loc is not None
        assert topology.get_index(loc) == k

    assert topology.get_loc(62) == PixelLoc(0, 0, layer=2)
    assert topology.get_index(PixelLoc(2, 3, layer=1)) == 50 + 3 * 3 + 2
    assert topology.get_index(PixelLoc(3, 0, layer=1)) is None
    assert topology.get_index(PixelLoc(0, 0, layer=3)) is None


def test_adjacent_within_layer():
    topology = Topology([Layer(4, 4)])

    corner = set(topology.iter_adjacent(PixelLoc(0, 0)))
    assert corner == {PixelLoc(1, 0), PixelLoc(0, 1), PixelLoc(1, 1)}

    interior = list(topology.iter_adjacent(PixelLoc(1, 1)))
    assert len(interior) == 8
    assert PixelLoc(1, 1) not in interior

    assert list(topology.iter_adjacent(PixelLoc(0, 0, layer=5))) == []


def test_adjacent_includes_portal():
    topology = Topology([Layer(4, 4), Layer(2, 2)])
    topology.portals = topology.resolve_portals([(PixelLoc(3, 3), PixelLoc(0, 0, 1))])

    adjacent = list(topology.iter_adjacent(PixelLoc(3, 3)))
    assert adjacent[0] == PixelLoc(0, 0, 1)
    assert len(adjacent) == 4

    back = list(topology.iter_adjacent(PixelLoc(0, 0, 1)))
    assert PixelLoc(3, 3) in back
    assert len(back) == 4


def test_portal_duplicating_grid_neighbour_is_kept():
    topology = Topology([Layer(4, 4)])
    topology.portals = topology.resolve_portals([(PixelLoc(1, 1), PixelLoc(1, 2))])
    adjacent = list(topology.iter_adjacent(PixelLoc(1, 1)))
    assert len(adjacent) == 9
    assert adjacent.count(PixelLoc(1, 2)) == 2


def test_resolve_portals_drops_invalid_pairs():
    topology = Topology([Layer(4, 4)])
    portals = topology.resolve_portals(
        [
            (PixelLoc(0, 0), PixelLoc(3, 3)),
            (PixelLoc(0, 1), PixelLoc(4, 3)),
            ((2, 2, 0), (1, 1, 1)),
        ]
    )
    assert portals == {PixelLoc(0, 0): PixelLoc(3, 3), PixelLoc(3, 3): PixelLoc(0, 0)}


def test_line_to():
    assert PixelLoc(0, 0).line_to(PixelLoc(0, 0)) == [PixelLoc(0, 0)]

    # Vertical line up
    assert PixelLoc(0, 0).line_to(PixelLoc(0, 3)) == [
        PixelLoc(0, 0), PixelLoc(0, 1), PixelLoc(0, 2), PixelLoc(0, 3),
    ]

    # Horizontal line right
    assert PixelLoc(0, 0).line_to(PixelLoc(3, 0)) == [
        PixelLoc(0, 0), PixelLoc(1, 0), PixelLoc(2, 0), PixelLoc(3, 0),
    ]

    # Diagonal 1:1, no diagonal openings
    assert PixelLoc(0, 0).line_to(PixelLoc(3, 3)) == [
        PixelLoc(0, 0), PixelLoc(1, 0), PixelLoc(1, 1), PixelLoc(2, 1),
        PixelLoc(2, 2), PixelLoc(3, 2), PixelLoc(3, 3),
    ]

    # Slope < 1
    assert PixelLoc(0, 0).line_to(PixelLoc(3, 2)) == [
        PixelLoc(0, 0), PixelLoc(1, 0), PixelLoc(2, 0), PixelLoc(2, 1),
        PixelLoc(3, 1), PixelLoc(3, 2),
    ]

    # Slope > 1
    assert PixelLoc(0, 0).line_to(PixelLoc(2, 3)) == [
        PixelLoc(0, 0), PixelLoc(1, 0), PixelLoc(1, 1), PixelLoc(2, 1),
        PixelLoc(2, 2), PixelLoc(2, 3),
    ]

    # Off-origin
    assert PixelLoc(1, -1).line_to(PixelLoc(3, 2)) == [
        PixelLoc(1, -1), PixelLoc(2, -1), PixelLoc(2, 0), PixelLoc(3, 0),
        PixelLoc(3, 1), PixelLoc(3, 2),
    ]


def test_line_keeps_layer():
    line = PixelLoc(0, 0, layer=2).line_to(PixelLoc(2, 1, layer=2))
    assert all(loc.layer == 2 for loc in line)
