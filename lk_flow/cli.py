"""
Command line entry point.

    lk-flow frames_input/ frames_output/
    lk-flow frames_input/ frames_output/ --window-size 7 --stride 8 --save-flo
"""
import argparse
import logging
import sys

from lk_flow.io.frames import FrameSequence, check_pattern, INPUT_PATTERN, JPEG_QUALITY
from lk_flow.pipeline import FlowPipeline, OUTPUT_PATTERN, MAX_FRAMES
from lk_flow.viz.overlay import ARROW_STRIDE


def _color(text):
    parts = text.split(',')
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected R,G,B, got '{text}'")
    try:
        rgb = tuple(int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected integers in R,G,B, got '{text}'")
    if not all(0 <= c <= 255 for c in rgb):
        raise argparse.ArgumentTypeError(f"colour components must be 0-255, got '{text}'")
    return rgb


def build_parser():
    parser = argparse.ArgumentParser(
        prog='lk-flow',
        description='Estimate Lucas-Kanade optical flow between consecutive '
                    'frames and draw it as arrows on the frames.',
    )
    parser.add_argument('input_dir', help='directory holding the input frames')
    parser.add_argument('output_dir', help='directory receiving the flow images')
    parser.add_argument('--pattern', default=INPUT_PATTERN,
                        help='input file name pattern (default: %(default)s)')
    parser.add_argument('--output-pattern', default=OUTPUT_PATTERN,
                        help='output file name pattern (default: %(default)s)')
    parser.add_argument('--start', type=int, default=1,
                        help='index of the first frame (default: %(default)s)')
    parser.add_argument('--max-frames', type=int, default=MAX_FRAMES,
                        help='stop after this many frames (default: %(default)s)')
    parser.add_argument('--method', default='lk', choices=['lk', 'lk-wide'],
                        help='flow method preset (default: %(default)s)')
    parser.add_argument('--window-size', type=int, default=None,
                        help='odd Lucas-Kanade window size, overrides the preset')
    parser.add_argument('--det-threshold', type=float, default=None,
                        help='structure tensor determinant cutoff, overrides the preset')
    parser.add_argument('--stride', type=int, default=ARROW_STRIDE,
                        help='arrow sampling step in pixels (default: %(default)s)')
    parser.add_argument('--color', type=_color, default=None,
                        help='arrow colour as R,G,B (default: 0,255,0)')
    parser.add_argument('--quality', type=int, default=JPEG_QUALITY,
                        help='JPEG quality of the outputs (default: %(default)s)')
    parser.add_argument('--save-flo', action='store_true',
                        help='also write each flow field as a .flo file')
    parser.add_argument('--quiver', action='store_true',
                        help='also write a matplotlib quiver plot per frame pair')
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    verbosity.add_argument('-q', '--quiet', action='store_true', help='warnings only')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    if args.max_frames < 1:
        parser.error('--max-frames must be at least 1')
    if args.stride < 1:
        parser.error('--stride must be at least 1')
    if args.window_size is not None and (args.window_size < 1 or args.window_size % 2 == 0):
        parser.error('--window-size must be a positive odd integer')
    for option, pattern in (('--pattern', args.pattern),
                            ('--output-pattern', args.output_pattern)):
        try:
            check_pattern(pattern)
        except ValueError as e:
            parser.error(f'{option}: {e}')

    pipeline = FlowPipeline(method=args.method)
    params = {
        'max_frames': args.max_frames,
        'stride': args.stride,
        'quality': args.quality,
        'output_pattern': args.output_pattern,
        'save_flo': args.save_flo,
        'save_quiver': args.quiver,
    }
    if args.color is not None:
        params['arrow_color'] = args.color
    if args.window_size is not None:
        params['window_size'] = args.window_size
    if args.det_threshold is not None:
        params['det_threshold'] = args.det_threshold
    pipeline.parse_input_parameter(params)

    frames = FrameSequence(args.input_dir, pattern=args.pattern, start=args.start)
    result = pipeline.run(frames, args.output_dir)
    return 0 if result.ok else 1


if __name__ == '__main__':
    sys.exit(main())
