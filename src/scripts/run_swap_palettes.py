#!/usr/bin/env python3
"""
Two-stage growth: the first palette fills part of the image, the second
palette takes over from wherever the first one stopped.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.omnicolor_sim import RGB, GrowthImageBuilder, PixelLoc, SphericalPalette, utils


def main():
    parser = argparse.ArgumentParser(description="Grow an image in two palette stages")
    parser.add_argument("-o", "--out", required=True, help="Output .png path")
    parser.add_argument("--width", type=int, default=1920)
    parser.add_argument("--height", type=int, default=1080)
    parser.add_argument("--proportion-first-color", type=float, default=0.5)
    parser.add_argument(
        "--proportion-excess-colors",
        type=float,
        default=1.0,
        help="Size of the colour palette relative to the number of pixels in each stage",
    )
    parser.add_argument("--first-color", default="ff6680")
    parser.add_argument("--second-color", default="80ff66")
    parser.add_argument("--color-radius", type=float, default=50.0)
    parser.add_argument("--reset-frontier-for-second", action="store_true")
    parser.add_argument("--num-additional-seeds", type=int, default=None)
    parser.add_argument(
        "--initial-point", type=int, nargs=2, metavar=("X", "Y"),
        help="location of the first point",
    )
    parser.add_argument(
        "--wall-location", type=int, nargs=4, metavar=("X1", "Y1", "X2", "Y2"),
        help="endpoints of a wall during the first stage",
    )
    parser.add_argument(
        "--portal-location", type=int, nargs=4, metavar=("X1", "Y1", "X2", "Y2"),
        help="endpoints of a portal during the first stage",
    )
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    num_pixels = args.width * args.height
    num_pixels_first = int(num_pixels * args.proportion_first_color)
    num_pixels_second = num_pixels - num_pixels_first

    builder = (
        GrowthImageBuilder()
        .add_layer(args.width, args.height)
        .set_epsilon(5.0)
        .set_seed(args.seed)
        .set_verbose(True)
    )

    first = builder.new_stage(
        palette=SphericalPalette(RGB.from_hex(args.first_color), args.color_radius),
        n_colors=int(num_pixels_first * args.proportion_excess_colors),
        max_iter=num_pixels_first,
    )
    if args.initial_point:
        first.seed_points([PixelLoc(*args.initial_point)])
    if args.wall_location:
        x1, y1, x2, y2 = args.wall_location
        first.forbidden_points(PixelLoc(x1, y1).line_to(PixelLoc(x2, y2)))
    if args.portal_location:
        x1, y1, x2, y2 = args.portal_location
        first.connected_points([(PixelLoc(x1, y1), PixelLoc(x2, y2))])

    builder.new_stage(
        palette=SphericalPalette(RGB.from_hex(args.second_color), args.color_radius),
        n_colors=int(num_pixels_second * args.proportion_excess_colors),
        grow_from_previous=not args.reset_frontier_for_second,
        num_random_seed_points=args.num_additional_seeds,
    )

    image = builder.build()
    image.fill_until_done()
    utils.write_png(args.out, image)
    print(f"Output saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
