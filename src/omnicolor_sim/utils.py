# src/omnicolor_sim/utils.py
from __future__ import annotations

import json
import os
import time
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import matplotlib.image as mpimg
import numpy as np

if TYPE_CHECKING:  # pragma: no cover
    from .growth_image import GrowthImage


@dataclass
class GrowthResult:
    """Per-layer outputs of a finished (or partial) growth run."""

    pixels: List[np.ndarray] = field(default_factory=list)
    stage_maps: List[np.ndarray] = field(default_factory=list)
    points_checked: List[np.ndarray] = field(default_factory=list)
    meta: Optional[Dict[str, Any]] = None


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Random source threaded through palette generation and every fill step."""
    return np.random.default_rng(seed)


def now_str() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


def collect_result(image: "GrowthImage", meta: Optional[Dict[str, Any]] = None) -> GrowthResult:
    num_layers = image.topology.num_layers
    base_meta = {
        "layers": [[layer.width, layer.height] for layer in image.topology.layers],
        "num_stages": len(image.stages),
        "num_filled": int(image.num_filled),
        "num_steps": int(image.num_steps),
        "epsilon": float(image.epsilon),
    }
    base_meta.update(meta or {})
    return GrowthResult(
        pixels=[image.layer_pixels(k) for k in range(num_layers)],
        stage_maps=[image.layer_stage_map(k) for k in range(num_layers)],
        points_checked=[image.layer_stats(k) for k in range(num_layers)],
        meta=base_meta,
    )


def save_growth_result(
    path: str | os.PathLike[str],
    result: GrowthResult,
    *,
    overwrite: bool = True,
) -> None:
    """Serialize a GrowthResult to a compressed .npz."""
    out_dir = Path(path).parent
    out_dir.mkdir(parents=True, exist_ok=True)
    if not overwrite and Path(path).exists():
        raise FileExistsError(f"{path} already exists")

    out: Dict[str, Any] = {}
    for k, pixels in enumerate(result.pixels):
        out[f"pixels_{k}"] = pixels.astype(np.uint8)
    for k, stage_map in enumerate(result.stage_maps):
        out[f"stage_{k}"] = stage_map.astype(np.int64)
    for k, checked in enumerate(result.points_checked):
        out[f"points_checked_{k}"] = checked.astype(np.int64)
    out["meta"] = np.array(result.meta or {}, dtype=object)
    np.savez_compressed(path, **out)


def load_growth_result(path: str | os.PathLike[str]) -> GrowthResult:
    data = np.load(path, allow_pickle=True)

    def layered(prefix: str) -> List[np.ndarray]:
        arrays = []
        k = 0
        while f"{prefix}_{k}" in data:
            arrays.append(data[f"{prefix}_{k}"])
            k += 1
        return arrays

    meta = None
    if "meta" in data:
        meta = data["meta"].item()
    return GrowthResult(
        pixels=layered("pixels"),
        stage_maps=layered("stage"),
        points_checked=layered("points_checked"),
        meta=meta,
    )


def stack_layers(arrays: List[np.ndarray], fill_value: float = 0) -> np.ndarray:
    """Stack per-layer arrays vertically, padding narrower layers on the right."""
    width = max(a.shape[1] for a in arrays)
    padded = []
    for a in arrays:
        pad = [(0, 0), (0, width - a.shape[1])] + [(0, 0)] * (a.ndim - 2)
        padded.append(np.pad(a, pad, constant_values=fill_value))
    return np.concatenate(padded, axis=0)


def write_png(path: str | os.PathLike[str], image: "GrowthImage") -> None:
    """Write all layers, stacked vertically, as an RGBA PNG."""
    layers = [image.layer_pixels(k) for k in range(image.topology.num_layers)]
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    mpimg.imsave(path, stack_layers(layers))


def write_stats_png(
    path: str | os.PathLike[str],
    image: "GrowthImage",
    attr: str = "points_checked",
    cmap: str = "viridis",
) -> None:
    """False-colour map of the per-pixel palette search cost."""
    layers = [
        image.layer_stats(k, attr).astype(np.float64)
        for k in range(image.topology.num_layers)
    ]
    stacked = stack_layers(layers, fill_value=-1)
    masked = np.ma.masked_less(stacked, 0)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    mpimg.imsave(path, masked, cmap=cmap)


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load run parameters from JSON or TOML.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")
