import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from src.omnicolor_sim.color import RGB
from src.omnicolor_sim.palettes import (
    FixedPalette,
    SphericalPalette,
    UniformPalette,
    generate_spherical_palette,
    generate_uniform_palette,
)


def test_uniform_palette_shape_and_range():
    colors = generate_uniform_palette(1000)
    assert colors.shape == (1000, 3)
    assert colors.dtype == np.uint8
    assert colors[0].tolist() == [0, 0, 0]
    # Every channel sweeps most of its range.
    assert colors.max(axis=0).min() > 200


def test_uniform_palette_is_mostly_distinct():
    colors = generate_uniform_palette(4096)
    assert len(np.unique(colors, axis=0)) > 0.9 * 4096


def test_uniform_palette_ignores_rng():
    a = UniformPalette().generate(100, np.random.default_rng(1))
    b = UniformPalette().generate(100, np.random.default_rng(2))
    assert np.array_equal(a, b)


def test_uniform_palette_empty():
    assert generate_uniform_palette(0).shape == (0, 3)


def test_spherical_palette_stays_near_center():
    center = RGB(120, 130, 140)
    colors = generate_spherical_palette(2000, center, 30.0, np.random.default_rng(0))
    assert colors.shape == (2000, 3)
    dist = np.linalg.norm(colors.astype(float) - np.array(center, dtype=float), axis=1)
    # Truncation to integers can move a point by up to one unit per channel.
    assert dist.max() <= 30.0 + np.sqrt(3.0)
    assert dist.mean() > 10.0


def test_spherical_palette_clamps_to_valid_range():
    colors = generate_spherical_palette(500, RGB(250, 5, 128), 40.0, np.random.default_rng(2))
    assert colors[:, 0].max() == 255
    assert colors[:, 1].min() == 0


def test_spherical_palette_reproducible():
    palette = SphericalPalette(RGB.from_hex("ff6680"), 50.0)
    a = palette.generate(50, np.random.default_rng(9))
    b = palette.generate(50, np.random.default_rng(9))
    assert np.array_equal(a, b)


def test_fixed_palette():
    colors = np.array([[1, 2, 3], [4, 5, 6]], dtype=np.uint8)
    out = FixedPalette(colors).generate(999, np.random.default_rng())
    assert np.array_equal(out, colors)


def test_rgb_from_hex():
    assert RGB.from_hex("ff6680") == RGB(255, 102, 128)
    assert RGB.from_hex("#80FF66") == RGB(128, 255, 102)
    assert RGB(1, 2, 255).to_hex() == "0102ff"

    with pytest.raises(ValueError):
        RGB.from_hex("ff66")
    with pytest.raises(ValueError):
        RGB.from_hex("gg6680")
