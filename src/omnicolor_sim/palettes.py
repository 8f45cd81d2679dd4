"""
Palette generators.

A palette strategy is anything with ``generate(n_colors, rng)`` returning
an ``(n_colors, 3)`` uint8 array. Two strategies are provided: an even
sampling of the whole RGB cube and a random ball around a central colour.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np

from .color import RGB


class Palette(Protocol):
    def generate(self, n_colors: int, rng: np.random.Generator) -> np.ndarray:
        ...


def generate_uniform_palette(n_colors: int) -> np.ndarray:
    """Spread ``n_colors`` evenly through the RGB cube."""
    dim_size = float(n_colors) ** (1.0 / 3.0) if n_colors > 0 else 1.0
    val = np.arange(n_colors, dtype=np.float64) / dim_size
    r = 255.0 * np.mod(val, 1.0)
    val = np.floor(val) / dim_size
    g = 255.0 * np.mod(val, 1.0)
    val = np.floor(val) / dim_size
    b = 255.0 * val
    rgb = np.column_stack((r, g, b)).reshape(n_colors, 3)
    return np.clip(rgb, 0.0, 255.0).astype(np.uint8)


def generate_spherical_palette(
    n_colors: int,
    central_color: RGB,
    color_radius: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """Draw ``n_colors`` uniformly from a ball of radius ``color_radius``."""
    u = rng.random((n_colors, 3))
    r = color_radius * np.cbrt(u[:, 0])
    phi = 2.0 * np.pi * u[:, 1]
    costheta = 1.0 - 2.0 * u[:, 2]
    sintheta = np.sqrt(1.0 - costheta * costheta)

    offsets = np.column_stack(
        (r * sintheta * np.cos(phi), r * sintheta * np.sin(phi), r * costheta)
    )
    rgb = np.asarray(central_color, dtype=np.float64) + offsets
    return np.clip(rgb, 0.0, 255.0).astype(np.uint8)


@dataclass
class UniformPalette:
    def generate(self, n_colors: int, rng: np.random.Generator) -> np.ndarray:
        return generate_uniform_palette(n_colors)


@dataclass
class SphericalPalette:
    central_color: RGB
    color_radius: float = 50.0

    def generate(self, n_colors: int, rng: np.random.Generator) -> np.ndarray:
        return generate_spherical_palette(
            n_colors, self.central_color, self.color_radius, rng
        )


@dataclass
class FixedPalette:
    """An explicit list of colours; ``n_colors`` is ignored."""

    colors: np.ndarray

    def generate(self, n_colors: int, rng: np.random.Generator) -> np.ndarray:
        return np.asarray(self.colors, dtype=np.uint8).reshape(-1, 3)


__all__ = [
    "Palette",
    "UniformPalette",
    "SphericalPalette",
    "FixedPalette",
    "generate_uniform_palette",
    "generate_spherical_palette",
]
