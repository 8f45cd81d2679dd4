"""
Omnicolor Growth Library

Paints a (possibly multi-layer) canvas by growing outward from seed
pixels, giving every new pixel the closest colour still unused in a
finite palette:
- GrowthImage: the stage-by-stage growth driver
- GrowthImageBuilder / StageBuilder / GrowthConfig / StageConfig: configuration
- KDTree: nearest-colour index with removal
- Topology / PixelLoc: multi-layer grid geometry with portals
"""

from .color import RGB
from .errors import (
    ConflictingRegions,
    GrowthConfigError,
    NoLayersDefined,
    NoPaletteDefined,
    NoStagesDefined,
)
from .growth_image import GrowthImage, GrowthStage, Region
from .growth_image_builder import (
    GrowthConfig,
    GrowthImageBuilder,
    StageBuilder,
    StageConfig,
    build_growth_image,
    config_from_params,
    resolve_num_random_seeds,
)
from .kd_tree import KDTree, PerformanceStats
from .palettes import (
    FixedPalette,
    SphericalPalette,
    UniformPalette,
    generate_spherical_palette,
    generate_uniform_palette,
)
from .point_tracker import FrontierTracker
from .topology import Layer, PixelLoc, Topology
from . import utils

__all__ = [
    # Growth
    "GrowthImage",
    "GrowthStage",
    "Region",
    # Configuration
    "GrowthConfig",
    "GrowthImageBuilder",
    "StageBuilder",
    "StageConfig",
    "build_growth_image",
    "config_from_params",
    "resolve_num_random_seeds",
    # Building blocks
    "KDTree",
    "PerformanceStats",
    "FrontierTracker",
    "Layer",
    "PixelLoc",
    "Topology",
    "RGB",
    # Palettes
    "UniformPalette",
    "SphericalPalette",
    "FixedPalette",
    "generate_uniform_palette",
    "generate_spherical_palette",
    # Errors
    "GrowthConfigError",
    "NoLayersDefined",
    "NoStagesDefined",
    "NoPaletteDefined",
    "ConflictingRegions",
    # Utilities
    "utils",
]
