from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence


class PixelLoc(NamedTuple):
    """A single cell, addressed by column ``i`` and row ``j`` within ``layer``."""

    i: int
    j: int
    layer: int = 0

    def line_to(self, other: "PixelLoc") -> List["PixelLoc"]:
        """
        Cells along the segment to ``other``, on this location's layer.

        Bresenham-style, but a vertical step is inserted wherever the line
        would otherwise move diagonally, so consecutive cells share an edge
        and the line has no diagonal openings.
        """
        if self.i == other.i:
            jmin, jmax = sorted((self.j, other.j))
            return [PixelLoc(self.i, j, self.layer) for j in range(jmin, jmax + 1)]

        slope = (other.j - self.j) / (other.i - self.i)
        offset = self.j - slope * self.i

        output = []
        prev_j = None
        imin, imax = sorted((self.i, other.i))
        for i in range(imin, imax + 1):
            j1 = math.floor(slope * i + offset)
            j2 = j1 if prev_j is None else prev_j
            for j in range(min(j1, j2), max(j1, j2) + 1):
                output.append(PixelLoc(i, j, self.layer))
            prev_j = j1
        return output


@dataclass(frozen=True)
class Layer:
    width: int
    height: int

    def __len__(self) -> int:
        return self.width * self.height

    def is_valid(self, i: int, j: int) -> bool:
        return 0 <= i < self.width and 0 <= j < self.height


# Same-layer neighbour offsets, in the order they are visited.
_ADJACENT = [(di, dj) for di in (-1, 0, 1) for dj in (-1, 0, 1) if di or dj]


@dataclass
class Topology:
    """
    Geometry of a multi-layer canvas.

    Layers are concatenated in order to form one flat index space. The
    ``portals`` mapping holds extra adjacency edges, stored in both
    directions (see :meth:`resolve_portals`).
    """

    layers: List[Layer]
    portals: Dict[PixelLoc, PixelLoc] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.layers = [
            layer if isinstance(layer, Layer) else Layer(*layer)
            for layer in self.layers
        ]
        self._offsets = [0]
        for layer in self.layers:
            self._offsets.append(self._offsets[-1] + len(layer))

    def __len__(self) -> int:
        return self._offsets[-1]

    @property
    def num_layers(self) -> int:
        return len(self.layers)

    def layer_offset(self, layer: int) -> int:
        return self._offsets[layer]

    def layer_bounds(self, layer: int) -> range:
        """Flat indices belonging to ``layer``."""
        return range(self._offsets[layer], self._offsets[layer + 1])

    def is_valid(self, loc: PixelLoc) -> bool:
        return 0 <= loc.layer < len(self.layers) and self.layers[
            loc.layer
        ].is_valid(loc.i, loc.j)

    def get_index(self, loc: PixelLoc) -> Optional[int]:
        if not self.is_valid(loc):
            return None
        width = self.layers[loc.layer].width
        return self._offsets[loc.layer] + loc.j * width + loc.i

    def get_loc(self, index: int) -> Optional[PixelLoc]:
        if index < 0 or index >= len(self):
            return None
        # Layers are few, a linear walk is fine.
        layer = 0
        while index >= self._offsets[layer + 1]:
            layer += 1
        offset = index - self._offsets[layer]
        width = self.layers[layer].width
        return PixelLoc(offset % width, offset // width, layer)

    def iter_adjacent(self, loc: PixelLoc) -> Iterator[PixelLoc]:
        """Portal partner (if any) followed by the in-bounds grid neighbours."""
        partner = self.portals.get(loc)
        if partner is not None:
            yield partner

        if not 0 <= loc.layer < len(self.layers):
            return
        layer = self.layers[loc.layer]
        for di, dj in _ADJACENT:
            i = loc.i + di
            j = loc.j + dj
            if layer.is_valid(i, j):
                yield PixelLoc(i, j, loc.layer)

    def resolve_portals(self, pairs: Sequence[tuple]) -> Dict[PixelLoc, PixelLoc]:
        """Symmetric portal table for ``pairs``, dropping pairs with an invalid end."""
        portals: Dict[PixelLoc, PixelLoc] = {}
        for a, b in pairs:
            a, b = PixelLoc(*a), PixelLoc(*b)
            if self.is_valid(a) and self.is_valid(b):
                portals[a] = b
                portals[b] = a
        return portals


__all__ = ["PixelLoc", "Layer", "Topology"]
