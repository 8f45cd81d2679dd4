#!/usr/bin/env python3
"""
Single Growth Run

Either a flat one-layer image filled from a single palette, or any
multi-layer / multi-stage run described by a JSON or TOML params file.
"""

import argparse
import sys
import time
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.omnicolor_sim import (
    RGB,
    GrowthImageBuilder,
    SphericalPalette,
    UniformPalette,
    build_growth_image,
    config_from_params,
    utils,
)


def build_flat_image(args):
    if args.palette == "spherical":
        palette = SphericalPalette(
            central_color=RGB.from_hex(args.central_color),
            color_radius=args.color_radius,
        )
    else:
        palette = UniformPalette()

    builder = (
        GrowthImageBuilder()
        .add_layer(args.width, args.height)
        .set_epsilon(args.epsilon)
        .set_seed(args.seed)
        .set_verbose(True)
    )
    builder.palette(palette)
    return builder.build()


def main():
    parser = argparse.ArgumentParser(
        description="Grow an image that uses each palette colour at most once",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--params",
        type=str,
        default=None,
        help="JSON/TOML params file describing layers and stages",
    )
    parser.add_argument("--width", type=int, default=1920, help="Image width (default: 1920)")
    parser.add_argument("--height", type=int, default=1080, help="Image height (default: 1080)")
    parser.add_argument("--epsilon", type=float, default=5.0, help="Approximate search epsilon")
    parser.add_argument(
        "--palette",
        choices=["uniform", "spherical"],
        default="uniform",
        help="Palette for the flat image",
    )
    parser.add_argument("--central-color", type=str, default="ff6680")
    parser.add_argument("--color-radius", type=float, default=50.0)
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument("--out", type=str, default=None, help="Output .png path")
    parser.add_argument("--out-stats", type=str, default=None, help="Output search-cost .png")
    parser.add_argument("--out-npz", type=str, default=None, help="Output .npz with all layers")
    parser.add_argument(
        "--frames-dir",
        type=str,
        default=None,
        help="Write a PNG snapshot every --frame-every pixels",
    )
    parser.add_argument("--frame-every", type=int, default=10_000)

    args = parser.parse_args()

    if args.params:
        params = utils.load_params(args.params)
        params.setdefault("seed", args.seed)
        config = config_from_params(params)
        config.verbose = True
        image = build_growth_image(config)
    else:
        image = build_flat_image(args)

    callback = None
    if args.frames_dir:
        frames_dir = Path(args.frames_dir)
        frames_dir.mkdir(parents=True, exist_ok=True)
        frame_counter = [0]

        def callback(img):
            utils.write_png(frames_dir / f"frame_{frame_counter[0]:06d}.png", img)
            frame_counter[0] += 1

    print(f"Growing {len(image.topology)} pixels over {len(image.stages)} stage(s)")
    start_time = time.time()
    image.fill_until_done(callback=callback, callback_every=args.frame_every)
    elapsed_time = time.time() - start_time

    if args.out is None and args.out_stats is None and args.out_npz is None:
        output_dir = Path("results")
        output_dir.mkdir(exist_ok=True)
        args.out = str(output_dir / f"growth_S{args.seed}_{utils.now_str()}.png")

    if args.out:
        utils.write_png(args.out, image)
    if args.out_stats:
        utils.write_stats_png(args.out_stats, image)
    if args.out_npz:
        result = utils.collect_result(image, meta={"seed": args.seed})
        utils.save_growth_result(args.out_npz, result)

    print(f"\nGrowth completed")
    print(f"   Time elapsed: {elapsed_time:.2f} seconds")
    print(f"   Pixels filled: {image.num_filled}/{len(image.topology)}")
    for path in (args.out, args.out_stats, args.out_npz):
        if path:
            print(f"   Output saved to: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
