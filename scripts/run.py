"""
Run AD + SGM on a rectified pair.

Usage:
    python -m scripts.run --left left.png --right right.png --out disp.txt
    python -m scripts.run --stereo frame.png --vis disp.png
    python -m scripts.run --left left_pixels.txt --right right_pixels.txt \
        --config config/sgm.yaml --pixels --out results/disparity.txt
"""
import argparse
import sys

import cv2

from pipeline.dense_disparity import estimate_disparity_global
from sgm.config import SGMConfig, load_config
from sgm.input import save_pixel_stream
from sgm.viz import disp_stats, disp_to_vis_linear


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Semi-global matching disparity')
    parser.add_argument('--left', help='left image, or left pixel stream with --pixels')
    parser.add_argument('--right', help='right image, or right pixel stream with --pixels')
    parser.add_argument('--stereo', help='side-by-side (left | right) frame')
    parser.add_argument('--pixels', action='store_true',
                        help='inputs are flat text pixel streams (needs height/width)')
    parser.add_argument('--config', type=str, default=None, help='YAML configuration file')
    parser.add_argument('--height', type=int, default=None)
    parser.add_argument('--width', type=int, default=None)
    parser.add_argument('--max-disp', type=int, default=None, dest='max_disparity')
    parser.add_argument('--p1', type=float, default=None)
    parser.add_argument('--p2', type=float, default=None)
    parser.add_argument('--sequential', action='store_true',
                        help='aggregate the four directions one after another')
    parser.add_argument('--out', help='write the disparity map as a text stream')
    parser.add_argument('--vis', help='write a PNG visualisation')
    parser.add_argument('--show', action='store_true', help='display the disparity map')
    parser.add_argument('--stats', action='store_true', help='print disparity statistics')
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.stereo is None and (args.left is None or args.right is None):
        parser.error('give --stereo, or both --left and --right')
    if args.stereo is not None and (args.pixels or args.left or args.right):
        parser.error('--stereo takes a side-by-side image; do not combine it with --left/--right/--pixels')

    overrides = dict(
        height=args.height,
        width=args.width,
        max_disparity=args.max_disparity,
        P1=args.p1,
        P2=args.p2,
        parallel=False if args.sequential else None,
    )
    try:
        if args.config:
            config = load_config(args.config, **overrides)
        else:
            config = SGMConfig().with_overrides(**overrides)

        if args.stereo is not None:
            disp = estimate_disparity_global(args.stereo, None, config, show_vis=args.show)
        else:
            disp = estimate_disparity_global(args.left, args.right, config,
                                             pixel_stream=args.pixels, show_vis=args.show)
    except (ValueError, FileNotFoundError) as e:
        print(f"[run] error: {e}", file=sys.stderr)
        return 2

    if args.stats:
        disp_stats(disp, config.max_disparity)
    if args.out:
        save_pixel_stream(disp, args.out)
        print(f"[run] disparity saved to: {args.out}")
    if args.vis:
        cv2.imwrite(args.vis, disp_to_vis_linear(disp, config.max_disparity))
        print(f"[run] visualisation saved to: {args.vis}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
