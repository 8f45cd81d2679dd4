# src/scripts/plot_growth.py
import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from src.omnicolor_sim import utils  # type: ignore[import]


def plot_result(result, layer=0, out=None, show=False):
    """Image, stage provenance and search cost of one layer, side by side."""
    pixels = result.pixels[layer]
    stage_map = np.ma.masked_less(result.stage_maps[layer], 0)
    cost = np.ma.masked_less(result.points_checked[layer], 0)

    fig, axes = plt.subplots(1, 3, figsize=(15, 5))

    axes[0].imshow(pixels)
    axes[0].set_title("Image")

    num_stages = int(stage_map.max()) + 1 if stage_map.count() else 1
    im = axes[1].imshow(stage_map, cmap=plt.get_cmap("tab10", max(num_stages, 1)))
    axes[1].set_title("Stage")
    fig.colorbar(im, ax=axes[1], fraction=0.046)

    im = axes[2].imshow(cost, cmap="viridis")
    axes[2].set_title("Points checked")
    fig.colorbar(im, ax=axes[2], fraction=0.046)

    for ax in axes:
        ax.set_xticks([])
        ax.set_yticks([])

    meta = result.meta or {}
    fig.suptitle(
        f"layer {layer}: filled {meta.get('num_filled', '?')}, "
        f"epsilon {meta.get('epsilon', '?')}"
    )
    fig.tight_layout()

    if out:
        Path(out).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out, dpi=150)
        print(f"Saved plot to {out}")
    if show:
        plt.show()
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description="Plot a saved growth result (.npz)")
    parser.add_argument("path", help="Path to .npz written by run_growth.py --out-npz")
    parser.add_argument("--layer", type=int, default=0)
    parser.add_argument("--out", default=None, help="Output figure path")
    parser.add_argument("--show", action="store_true")
    args = parser.parse_args()

    result = utils.load_growth_result(args.path)
    if args.layer >= len(result.pixels):
        raise ValueError(f"Result has {len(result.pixels)} layer(s), asked for {args.layer}")
    plot_result(result, layer=args.layer, out=args.out, show=args.show)


if __name__ == "__main__":
    main()
