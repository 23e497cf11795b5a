import argparse
import sys
from HF.config import (
    VALID_CONNECTIVITY, VALID_METHODS, DEFAULT_METHOD, DEFAULT_ON_DEGENERATE,
    DEFAULT_SAVE_DIR, DEFAULT_HOLE_SIZE,
)
from HF.exceptions import HoleException, InvalidArgumentException
from HF.inference import check_options, inference

FLOAT_POINT = '.'


def is_numeric(arg):
    """
    True if arg is digits with at most one float point, e.g. '2', '0.01', '.5'
    """
    digits = arg.replace(FLOAT_POINT, '', 1)
    return len(digits) > 0 and digits.isdigit() and digits.isascii()


def numeric_argument(name):
    def parse(arg):
        if not is_numeric(arg):
            raise argparse.ArgumentTypeError(f"{name} should be float, got {arg!r}")
        return float(arg)
    return parse


def connectivity_argument(arg):
    if arg not in [str(value) for value in VALID_CONNECTIVITY]:
        raise argparse.ArgumentTypeError(f"pixel connectivity value should be 4 or 8, got {arg!r}")
    return int(arg)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='hole-filling',
        description='Find the hole of a grayscale image and fill it by weighted interpolation.'
    )
    parser.add_argument('image_path', type=str, help='Path to the image.')
    parser.add_argument('epsilon', type=numeric_argument('epsilon'), help='Weighting epsilon, a positive float.')
    parser.add_argument('z', type=numeric_argument('z'), help='Weighting exponent, a float.')
    parser.add_argument('connectivity', type=connectivity_argument, help='Pixel connectivity, 4 or 8.')
    parser.add_argument('--mask', type=str, default=None, help='Mask image, non-zero pixels are missing.')
    parser.add_argument('--hole', type=str, default='none', choices=['none', 'square', 'random'],
                        help='Synthetic hole to carve in the middle of the image.')
    parser.add_argument('--hole-size', type=int, default=DEFAULT_HOLE_SIZE, help='Synthetic hole size.')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for the synthetic hole.')
    parser.add_argument('--method', type=str, default=DEFAULT_METHOD, choices=list(VALID_METHODS),
                        help='`boundary` interpolates from the whole boundary, `neighbours` from the direct neighbours.')
    parser.add_argument('--on-degenerate', type=str, default=DEFAULT_ON_DEGENERATE,
                        choices=['raise', 'skip', 'boundary'],
                        help='What to do with a pixel whose weights sum to zero. `boundary` only applies to `neighbours`.')
    parser.add_argument('--device', type=str, default='numpy', choices=['numpy', 'auto', 'cpu', 'cuda'],
                        help='Run the boundary method with numpy or with torch on the given device.')
    parser.add_argument('--save-dir', type=str, default=DEFAULT_SAVE_DIR, help='Output directory.')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.epsilon <= 0:
        parser.error("epsilon should be a positive float")
    try:
        check_options(args.method, args.on_degenerate, args.device)
    except InvalidArgumentException as exception:
        parser.error(str(exception))

    try:
        inference(
            image_path=args.image_path,
            save_dir=args.save_dir,
            epsilon=args.epsilon,
            z=args.z,
            connectivity=args.connectivity,
            method=args.method,
            on_degenerate=args.on_degenerate,
            mask_path=args.mask,
            hole=args.hole,
            hole_size=args.hole_size,
            seed=args.seed,
            device=args.device,
        )
    except (HoleException, OSError, ValueError) as exception:
        print(f"Error: {exception}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
