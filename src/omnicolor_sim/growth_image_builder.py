from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from . import utils
from .color import RGB
from .errors import ConflictingRegions, NoLayersDefined, NoPaletteDefined, NoStagesDefined
from .growth_image import GrowthImage, GrowthStage, Region
from .kd_tree import KDTree
from .palettes import FixedPalette, Palette, SphericalPalette, UniformPalette
from .topology import Layer, PixelLoc, Topology


@dataclass
class StageConfig:
    """User-facing settings of one growth stage. ``None`` means "use the default"."""

    palette: Optional[Palette] = None
    n_colors: Optional[int] = None
    max_iter: Optional[int] = None
    seed_points: Optional[List[PixelLoc]] = None
    num_random_seed_points: Optional[int] = None
    grow_from_previous: Optional[bool] = None
    forbidden_points: Optional[List[PixelLoc]] = None
    allowed_points: Optional[List[PixelLoc]] = None
    connected_points: Optional[List[Tuple[PixelLoc, PixelLoc]]] = None


@dataclass
class GrowthConfig:
    layers: List[Tuple[int, int]] = field(default_factory=list)
    stages: List[StageConfig] = field(default_factory=list)
    epsilon: float = 1.0
    seed: Optional[int] = None
    verbose: bool = False


def resolve_num_random_seeds(
    has_explicit_seeds: bool,
    is_first_stage: bool,
    grow_from_previous: Optional[bool],
    explicit_random_count: Optional[int],
) -> int:
    """Number of random seed points a stage starts with."""
    if explicit_random_count is not None:
        return explicit_random_count
    if has_explicit_seeds:
        return 0
    if is_first_stage or grow_from_previous is False:
        return 1
    return 0


def build_stage(
    config: StageConfig,
    stage_index: int,
    topology: Topology,
    rng: np.random.Generator,
) -> GrowthStage:
    if config.palette is None:
        raise NoPaletteDefined(stage_index)
    if config.forbidden_points is not None and config.allowed_points is not None:
        raise ConflictingRegions(stage_index)

    n_colors = len(topology) if config.n_colors is None else config.n_colors
    colors = config.palette.generate(n_colors, rng)

    seed_points = tuple(PixelLoc(*p) for p in (config.seed_points or []))
    if config.allowed_points is not None:
        region = Region.allowed(config.allowed_points)
    else:
        region = Region.forbidden(config.forbidden_points or [])

    return GrowthStage(
        palette=KDTree(colors, num_dimensions=3),
        max_iter=config.max_iter,
        grow_from_previous=(
            True if config.grow_from_previous is None else config.grow_from_previous
        ),
        seed_points=seed_points,
        num_random_seed_points=resolve_num_random_seeds(
            has_explicit_seeds=bool(seed_points),
            is_first_stage=stage_index == 0,
            grow_from_previous=config.grow_from_previous,
            explicit_random_count=config.num_random_seed_points,
        ),
        region=region,
        portals=topology.resolve_portals(config.connected_points or []),
    )


def build_growth_image(config: GrowthConfig) -> GrowthImage:
    """Validate ``config`` and assemble a ready-to-run :class:`GrowthImage`."""
    if not config.layers:
        raise NoLayersDefined()
    if not config.stages:
        raise NoStagesDefined()

    rng = utils.make_rng(config.seed)
    topology = Topology([Layer(int(w), int(h)) for w, h in config.layers])
    stages = [
        build_stage(stage, k, topology, rng) for k, stage in enumerate(config.stages)
    ]
    return GrowthImage(
        topology,
        stages,
        epsilon=config.epsilon,
        rng=rng,
        verbose=config.verbose,
    )


class StageBuilder:
    """
    Chainable editor for one :class:`StageConfig`.

    >>> stage = GrowthImageBuilder().add_layer(8, 8).new_stage()
    >>> stage.palette(UniformPalette()).max_iter(32).seed_points([PixelLoc(0, 0)])
    """

    def __init__(self, config: StageConfig) -> None:
        self.config = config

    def palette(self, palette: Palette) -> "StageBuilder":
        self.config.palette = palette
        return self

    def n_colors(self, n_colors: int) -> "StageBuilder":
        self.config.n_colors = n_colors
        return self

    def max_iter(self, max_iter: int) -> "StageBuilder":
        self.config.max_iter = max_iter
        return self

    def seed_points(self, points: Sequence[Sequence[int]]) -> "StageBuilder":
        self.config.seed_points = [PixelLoc(*p) for p in points]
        return self

    def num_random_seed_points(self, count: int) -> "StageBuilder":
        self.config.num_random_seed_points = count
        return self

    def grow_from_previous(self, grow: bool = True) -> "StageBuilder":
        self.config.grow_from_previous = grow
        return self

    def forbidden_points(self, points: Sequence[Sequence[int]]) -> "StageBuilder":
        self.config.forbidden_points = [PixelLoc(*p) for p in points]
        return self

    def allowed_points(self, points: Sequence[Sequence[int]]) -> "StageBuilder":
        self.config.allowed_points = [PixelLoc(*p) for p in points]
        return self

    def connected_points(
        self, pairs: Sequence[Tuple[Sequence[int], Sequence[int]]]
    ) -> "StageBuilder":
        self.config.connected_points = [
            (PixelLoc(*a), PixelLoc(*b)) for a, b in pairs
        ]
        return self


class GrowthImageBuilder:
    """
    Incremental front-end over :class:`GrowthConfig`.

    >>> builder = GrowthImageBuilder().add_layer(64, 48).set_epsilon(5.0)
    >>> builder.new_stage().palette(UniformPalette()).max_iter(1000)
    >>> image = builder.build()
    """

    def __init__(self, config: Optional[GrowthConfig] = None) -> None:
        self.config = config or GrowthConfig()

    def add_layer(self, width: int, height: int) -> "GrowthImageBuilder":
        self.config.layers.append((width, height))
        return self

    def set_epsilon(self, epsilon: float) -> "GrowthImageBuilder":
        self.config.epsilon = epsilon
        return self

    def set_seed(self, seed: Optional[int]) -> "GrowthImageBuilder":
        self.config.seed = seed
        return self

    def set_verbose(self, verbose: bool = True) -> "GrowthImageBuilder":
        self.config.verbose = verbose
        return self

    def new_stage(self, **kwargs: Any) -> StageBuilder:
        """Append a stage and return a builder for further edits."""
        stage = StageConfig(**kwargs)
        self.config.stages.append(stage)
        return StageBuilder(stage)

    def palette(self, palette: Palette) -> "GrowthImageBuilder":
        """Shortcut for a single stage using ``palette``."""
        self.new_stage(palette=palette)
        return self

    def build(self) -> GrowthImage:
        return build_growth_image(self.config)


# ---------------------------------------------------------------------------
# Parameter files
# ---------------------------------------------------------------------------


def _loc(value: Sequence[int]) -> PixelLoc:
    return PixelLoc(*(int(v) for v in value))


def _palette_from_params(params: Dict[str, Any]) -> Palette:
    kind = params.get("type", "uniform").lower()
    if kind == "uniform":
        return UniformPalette()
    if kind == "spherical":
        return SphericalPalette(
            central_color=RGB.from_hex(params["central_color"]),
            color_radius=float(params.get("color_radius", 50.0)),
        )
    if kind == "fixed":
        colors = [RGB.from_hex(c) for c in params["colors"]]
        return FixedPalette(np.array(colors, dtype=np.uint8))
    raise ValueError(f"Unknown palette type: {kind}")


def _stage_from_params(params: Dict[str, Any]) -> StageConfig:
    def locs(key: str) -> Optional[List[PixelLoc]]:
        if key not in params:
            return None
        return [_loc(p) for p in params[key]]

    connected = params.get("connected_points")
    return StageConfig(
        palette=_palette_from_params(params.get("palette", {})),
        n_colors=params.get("n_colors"),
        max_iter=params.get("max_iter"),
        seed_points=locs("seed_points"),
        num_random_seed_points=params.get("num_random_seed_points"),
        grow_from_previous=params.get("grow_from_previous"),
        forbidden_points=locs("forbidden_points"),
        allowed_points=locs("allowed_points"),
        connected_points=(
            None if connected is None else [(_loc(a), _loc(b)) for a, b in connected]
        ),
    )


def config_from_params(params: Dict[str, Any]) -> GrowthConfig:
    """Convert a parsed JSON/TOML parameter dict into a :class:`GrowthConfig`."""
    return GrowthConfig(
        layers=[(int(w), int(h)) for w, h in params.get("layers", [])],
        stages=[_stage_from_params(s) for s in params.get("stages", [])],
        epsilon=float(params.get("epsilon", 1.0)),
        seed=params.get("seed"),
        verbose=bool(params.get("verbose", False)),
    )


__all__ = [
    "StageBuilder",
    "StageConfig",
    "GrowthConfig",
    "GrowthImageBuilder",
    "build_growth_image",
    "build_stage",
    "config_from_params",
    "resolve_num_random_seeds",
]
