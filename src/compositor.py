import logging

import numpy as np

from constants import (
    SUPPORTED_VERSIONS,
    TABLE_SIZE_FROM_RESOLUTION,
    DEFAULT_BACKGROUND,
    DISPOSAL_UNSPECIFIED,
    DISPOSAL_RESTORE_BACKGROUND,
    DISPOSAL_RESTORE_PREVIOUS,
    STATE_IDLE,
    STATE_DECODING,
    STATE_READY,
)
from errors import GIFError
from gifdecoder import GIF
from imageblock import ImageDescriptorBlock
from graphicblock import GraphicControlExtension

logger = logging.getLogger(__name__)

# (first row, step) of the four interlace passes
INTERLACE_PASSES = ((0, 8), (4, 8), (2, 4), (1, 2))


def interlace_order(height: int):
    """Output rows in the order an interlaced image stores them."""
    rows = []
    for start, step in INTERLACE_PASSES:
        rows.extend(range(start, height, step))
    return rows


def row_mapping(height: int, interlace=True):
    """For each output row, the stored row it is read from."""
    if not interlace:
        return list(range(height))

    mapping = [0] * height
    for source_row, output_row in enumerate(interlace_order(height)):
        mapping[output_row] = source_row
    return mapping


class Frame:
    """One displayable frame: an RGBA copy of the canvas and how long to show it."""

    def __init__(self, pixels: np.ndarray, delay: int, image=None):
        self.pixels = pixels
        self.delay = delay
        self.image = image

    @property
    def width(self):
        return self.pixels.shape[1]

    @property
    def height(self):
        return self.pixels.shape[0]

    def pixel(self, x: int, y: int):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f'Pixel ({x}, {y}) is outside the {self.width}x{self.height} frame')
        return tuple(int(c) for c in self.pixels[y, x])


class Canvas:
    def __init__(self, width: int, height: int, background=DEFAULT_BACKGROUND):
        self.width = width
        self.height = height
        self.background = np.array(background, dtype=np.uint8)
        self.pixels = np.empty((height, width, 4), dtype=np.uint8)
        self.pixels[:] = self.background
        # the canvas as it was right before the most recent image was drawn
        self.previous = self.pixels.copy()

    def snapshot(self):
        np.copyto(self.previous, self.pixels)

    def _clip(self, image: ImageDescriptorBlock):
        # parts of the image rectangle that fall outside the logical screen are dropped
        x0 = min(image.x, self.width)
        y0 = min(image.y, self.height)
        x1 = min(image.x + image.width, self.width)
        y1 = min(image.y + image.height, self.height)
        target = (slice(y0, y1), slice(x0, x1))
        source = (slice(0, y1 - y0), slice(0, x1 - x0))
        return target, source

    def draw(self, image: ImageDescriptorBlock, control: GraphicControlExtension = None):
        indices = np.frombuffer(image.index_stream, dtype=np.uint8).reshape(image.height, image.width)
        if image.interlace_flag:
            indices = indices[row_mapping(image.height)]

        target, source = self._clip(image)
        indices = indices[source]

        palette = np.array(image.palette, dtype=np.uint8).reshape(-1, 3)
        colors = np.empty(indices.shape + (4,), dtype=np.uint8)
        colors[..., :3] = palette[indices]
        colors[..., 3] = 255

        region = self.pixels[target]
        if control is not None and control.transparent_color_flag:
            opaque = indices != control.transparent_color
            region[opaque] = colors[opaque]
        else:
            region[...] = colors

    def dispose(self, image: ImageDescriptorBlock, control: GraphicControlExtension = None):
        method = control.disposal_method if control is not None else DISPOSAL_UNSPECIFIED

        if method == DISPOSAL_RESTORE_BACKGROUND:
            target, _ = self._clip(image)
            self.pixels[target] = self.background
        elif method == DISPOSAL_RESTORE_PREVIOUS:
            np.copyto(self.pixels, self.previous)

    def render(self, image: ImageDescriptorBlock, control: GraphicControlExtension = None):
        """Draw one image and return it as a frame, leaving the canvas disposed for the next one."""
        self.snapshot()
        self.draw(image, control)
        frame = Frame(self.pixels.copy(), control.delay if control is not None else 0, image)
        self.dispose(image, control)
        return frame


class Playback:
    """Walks the block list of a decoded GIF and turns its images into frames.

    Args:
        gif: An already decoded GIF. If omitted, call `load` before stepping.
        loops: How many times to play the block list. None plays it forever.
    """

    def __init__(self, gif: GIF = None, loops=None):
        self.loops = loops
        self.state = STATE_IDLE
        self.gif = None
        self.canvas = None
        self.control = None
        self.position = 0
        self.passes = 0

        if gif is not None:
            self._ready(gif)

    def load(self, data: bytes, accepted_versions=SUPPORTED_VERSIONS, table_size_from=TABLE_SIZE_FROM_RESOLUTION):
        self.state = STATE_DECODING
        try:
            gif = GIF(data, accepted_versions, table_size_from)
        except GIFError:
            self.state = STATE_IDLE
            raise
        self._ready(gif)
        return gif

    def _ready(self, gif: GIF):
        self.gif = gif
        self.canvas = Canvas(gif.width, gif.height, gif.background_color)
        self.control = None
        self.position = 0
        self.passes = 0
        self.state = STATE_READY

    @property
    def finished(self):
        if self.state != STATE_READY or not self.gif.blocks:
            return True
        return self.loops is not None and self.passes >= self.loops

    def step(self):
        """Consume one block and return it together with the frame it produced, if any."""
        if self.state != STATE_READY:
            raise RuntimeError('No GIF has been loaded')
        if self.finished:
            raise RuntimeError('Playback is finished')

        block = self.gif.blocks[self.position]
        self.position += 1
        if self.position == len(self.gif.blocks):
            self.position = 0
            self.passes += 1

        frame = None
        if isinstance(block, GraphicControlExtension):
            self.control = block
        elif isinstance(block, ImageDescriptorBlock):
            frame = self.canvas.render(block, self.control)

        return block, frame

    def frames(self):
        if self.state != STATE_READY or not self.gif.images:
            return

        while not self.finished:
            _, frame = self.step()
            if frame is not None:
                yield frame
