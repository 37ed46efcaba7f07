import os
import sys
import argparse
import logging

import numpy as np
import cv2

from constants import TABLE_SIZE_SOURCES, TABLE_SIZE_FROM_SIZE
from errors import GIFError
from gifdecoder import load
from compositor import Playback

logger = logging.getLogger(__name__)

# browsers show frames without a delay for about this long
DEFAULT_MIN_DELAY = 100


def to_bgr(pixels: np.ndarray, scale=1.0):
    image = cv2.cvtColor(pixels, cv2.COLOR_RGBA2BGR)
    if scale != 1.0:
        image = cv2.resize(image, None, fx=scale, fy=scale, interpolation=cv2.INTER_NEAREST)
    return image


def frame_wait(delay: int, min_delay=DEFAULT_MIN_DELAY):
    # cv2.waitKey(0) blocks forever, so never hand it a zero delay
    return max(delay if delay > 0 else min_delay, 1)


def loop_count_arg(value: str):
    loops = int(value)
    if loops < 0:
        raise argparse.ArgumentTypeError(f'loop count must not be negative, got {loops}')
    return loops


def resolve_loops(requested=None, stored=None):
    """Number of passes to play, or None to play forever.

    A requested count wins over the one stored in the file. As in the NETSCAPE
    extension, 0 means forever, and a stored count of N means N repetitions
    after the first showing.
    """
    if requested is not None:
        return requested or None
    if stored:
        return stored + 1
    return None


def main():
    parser = argparse.ArgumentParser(
        description='GIF player',
    )

    parser.add_argument(
        'in_file',
        type=str,
        help='the path of GIF file',
    )

    parser.add_argument(
        '--loop',
        type=loop_count_arg,
        default=None,
        help='number of times to play the animation, 0 plays it forever (default: the loop count stored in the file, otherwise forever)',
    )

    parser.add_argument(
        '--min-delay',
        type=int,
        default=DEFAULT_MIN_DELAY,
        help='delay in milliseconds used for frames that do not specify one',
    )

    parser.add_argument(
        '--scale',
        type=float,
        default=1.0,
        help='window scale factor',
    )

    parser.add_argument(
        '--table-size',
        choices=TABLE_SIZE_SOURCES,
        default=TABLE_SIZE_FROM_SIZE,
        help='screen descriptor field that gives the global color table length (default: size)',
    )

    parser.add_argument('-v', '--verbose', action='store_true')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    in_file = args.in_file
    if not os.path.exists(in_file):
        print(f'{in_file} does not exist!')
        return 1

    try:
        gif = load(in_file, table_size_from=args.table_size)
    except GIFError as e:
        print(f'{in_file}: {e.__class__.__name__}: {e}')
        return 1

    loops = resolve_loops(args.loop, gif.loop_count)

    logger.info(f'canvas: {gif.width}x{gif.height}, images: {len(gif.images)}, loops: {"forever" if loops is None else loops}')

    playback = Playback(gif, loops=loops)

    for frame in playback.frames():
        cv2.imshow('frame', to_bgr(frame.pixels, args.scale))

        k = cv2.waitKey(frame_wait(frame.delay, args.min_delay)) & 0xff
        if k == ord('q'):
            break

    cv2.destroyAllWindows()
    return 0


if __name__ == '__main__':
    sys.exit(main())
