import numpy as np
import pytest

from constants import STATE_IDLE, STATE_READY
from compositor import Canvas, Frame, Playback, interlace_order, row_mapping
from errors import MalformedBlockIntroducer, UnsupportedSignature
from gifdecoder import GIF
from imageblock import ImageDescriptorBlock
from graphicblock import GraphicControlExtension
from commentblock import CommentExtensionBlock
import gifbuilder as gb

BLACK, RED, GREEN, BLUE = (0, 0, 0), (255, 0, 0), (0, 255, 0), (0, 0, 255)
PALETTE = [BLACK, RED, GREEN, BLUE]


def opaque(color):
    return (*color, 255)


def decode(*blocks, width=4, height=4, palette=PALETTE, background=0):
    return GIF(gb.gif(width, height, *blocks, palette=palette, background=background))


def test_interlace_order():
    assert interlace_order(8) == [0, 4, 2, 6, 1, 3, 5, 7]
    assert interlace_order(3) == [0, 2, 1]
    assert interlace_order(1) == [0]
    assert interlace_order(0) == []


def test_row_mapping():
    assert row_mapping(8) == [0, 4, 2, 5, 1, 6, 3, 7]
    assert row_mapping(8, interlace=False) == list(range(8))
    for height in range(20):
        mapping = row_mapping(height)
        assert sorted(mapping) == list(range(height))
        # output row interlace_order[i] is read from stored row i
        for i, row in enumerate(interlace_order(height)):
            assert mapping[row] == i


def test_interlaced_image_is_drawn_in_display_order():
    rows = [0, 1, 2, 3, 0, 1, 2, 3, 0, 1]
    gif = decode(gb.image(rows, 1, 10, interlace=True), width=1, height=10)
    frame = next(Playback(gif).frames())

    assert [frame.pixel(0, y) for y in range(10)] == [opaque(PALETTE[i]) for i in rows]


def test_single_color_image_fills_canvas():
    palette = [(10, 20, 30), (40, 50, 60)]
    gif = decode(gb.image([0, 0, 0, 0], 2, 2), width=2, height=2, palette=palette, background=1)
    frame = next(Playback(gif).frames())

    assert (frame.width, frame.height) == (2, 2)
    assert all(frame.pixel(x, y) == (10, 20, 30, 255) for x in range(2) for y in range(2))


@pytest.mark.parametrize('x, y', [(-1, 0), (0, -1), (3, 0), (0, 2), (3, 2)])
def test_frame_pixel_out_of_bounds(x, y):
    frame = Frame(np.zeros((2, 3, 4), dtype=np.uint8), 0)
    assert frame.pixel(2, 1) == (0, 0, 0, 0)
    with pytest.raises(IndexError):
        frame.pixel(x, y)


def test_sample_gif_frame():
    frame = next(Playback(GIF(gb.SAMPLE_GIF)).frames())
    expected = [opaque(gb.SAMPLE_PALETTE[i]) for i in gb.SAMPLE_INDICES]

    assert [frame.pixel(x, y) for y in range(10) for x in range(10)] == expected
    assert frame.delay == 0


def test_image_is_placed_at_its_offset():
    gif = decode(gb.image([1, 2], 2, 1, left=1, top=2))
    frame = next(Playback(gif).frames())

    assert frame.pixel(1, 2) == opaque(RED)
    assert frame.pixel(2, 2) == opaque(GREEN)
    assert frame.pixel(0, 2) == opaque(BLACK)
    assert frame.pixel(1, 1) == opaque(BLACK)


def test_image_outside_canvas_is_clipped():
    gif = decode(gb.image([1, 2, 3, 1], 2, 2, left=3, top=3))
    frame = next(Playback(gif).frames())

    assert frame.pixel(3, 3) == opaque(RED)
    assert frame.pixels.shape == (4, 4, 4)


def test_transparent_pixels_keep_canvas():
    gif = decode(
        gb.image([1] * 4, 2, 2),
        gb.graphic_control(transparent=2),
        gb.image([2, 3, 3, 2], 2, 2),
        width=2, height=2,
    )
    frames = Playback(gif).frames()
    next(frames)
    frame = next(frames)

    assert frame.pixel(0, 0) == opaque(RED)
    assert frame.pixel(1, 0) == opaque(BLUE)
    assert frame.pixel(0, 1) == opaque(BLUE)
    assert frame.pixel(1, 1) == opaque(RED)


def test_transparency_flag_off_draws_every_index():
    gif = decode(gb.image([1] * 4, 2, 2), gb.graphic_control(), gb.image([2] * 4, 2, 2), width=2, height=2)
    frames = list(Playback(gif, loops=1).frames())

    assert frames[1].pixel(0, 0) == opaque(GREEN)


def test_disposal_restore_background():
    gif = decode(
        gb.image([3] * 16, 4, 4),
        gb.graphic_control(disposal=2),
        gb.image([1] * 4, 2, 2, left=1, top=1),
        palette=PALETTE, background=2,
    )
    playback = Playback(gif, loops=1)
    frames = list(playback.frames())

    # the frame shows the image, the canvas is cleared afterwards
    assert frames[1].pixel(1, 1) == opaque(RED)
    pixels = playback.canvas.pixels
    assert (pixels[1:3, 1:3] == opaque(GREEN)).all()
    assert (pixels[0, :] == opaque(BLUE)).all()
    assert (pixels[3, :] == opaque(BLUE)).all()
    assert (pixels[:, 0] == opaque(BLUE)).all()


def test_disposal_restore_previous():
    gif = decode(
        gb.image(list(range(4)) * 4, 4, 4),
        gb.graphic_control(disposal=3),
        gb.image([1] * 4, 2, 2, left=2, top=0),
    )
    playback = Playback(gif, loops=1)
    playback.step()
    before = playback.canvas.pixels.copy()
    playback.step()
    _, frame = playback.step()

    assert frame.pixel(2, 0) == opaque(RED)
    assert np.array_equal(playback.canvas.pixels, before)
    assert np.array_equal(playback.canvas.previous, before)


@pytest.mark.parametrize('disposal', [0, 1])
def test_no_disposal_keeps_image(disposal):
    gif = decode(gb.graphic_control(disposal=disposal), gb.image([1] * 4, 2, 2), width=2, height=2)
    playback = Playback(gif, loops=1)
    list(playback.frames())

    assert (playback.canvas.pixels == opaque(RED)).all()


def test_canvas_without_global_table_is_white():
    data = gb.gif(1, 1, gb.image([1], 1, 1, palette=[BLACK, RED]))
    playback = Playback(GIF(data))

    assert (playback.canvas.pixels == (255, 255, 255, 255)).all()


def test_canvas_render_returns_copy():
    canvas = Canvas(2, 2, opaque(GREEN))
    image = decode(gb.image([1] * 4, 2, 2), width=2, height=2).images[0]
    control = decode(gb.graphic_control(disposal=2, delay=3), width=2, height=2).blocks[0]
    frame = canvas.render(image, control)

    assert isinstance(frame, Frame)
    assert frame.delay == 30
    assert frame.image is image
    assert (frame.pixels == opaque(RED)).all()
    assert (canvas.pixels == opaque(GREEN)).all()


def test_step_walks_blocks_and_wraps():
    gif = decode(
        gb.comment(b'hi'),
        gb.graphic_control(delay=2),
        gb.image([1] * 16, 4, 4),
        gb.graphic_control(delay=3),
        gb.image([2] * 16, 4, 4),
    )
    playback = Playback(gif)

    results = [playback.step() for _ in range(6)]
    kinds = [type(block) for block, _ in results]
    assert kinds == [
        CommentExtensionBlock,
        GraphicControlExtension,
        ImageDescriptorBlock,
        GraphicControlExtension,
        ImageDescriptorBlock,
        CommentExtensionBlock,
    ]
    assert [frame.delay for _, frame in results if frame is not None] == [20, 30]
    assert results[0][1] is None
    assert results[5][0] is gif.blocks[0]
    assert playback.passes == 1


def test_control_applies_to_following_images():
    gif = decode(gb.graphic_control(delay=5), gb.image([1] * 16, 4, 4), gb.image([2] * 16, 4, 4))
    frames = list(Playback(gif, loops=1).frames())

    assert [frame.delay for frame in frames] == [50, 50]


def test_frames_loop_forever_by_default():
    gif = decode(gb.graphic_control(delay=1), gb.image([1] * 16, 4, 4))
    frames = Playback(gif).frames()

    assert len([next(frames) for _ in range(5)]) == 5


def test_frames_honour_loop_count():
    gif = decode(gb.image([1] * 16, 4, 4), gb.image([2] * 16, 4, 4))
    assert len(list(Playback(gif, loops=3).frames())) == 6


def test_frames_without_images():
    gif = decode(gb.comment(b'nothing to see'))
    assert list(Playback(gif).frames()) == []


def test_playback_states():
    playback = Playback()
    assert playback.state == STATE_IDLE
    with pytest.raises(RuntimeError):
        playback.step()

    with pytest.raises(UnsupportedSignature):
        playback.load(b'JPEG')
    assert playback.state == STATE_IDLE

    gif = playback.load(gb.SAMPLE_GIF)
    assert playback.state == STATE_READY
    assert playback.gif is gif
    assert playback.canvas.pixels.shape == (10, 10, 4)


def test_playback_load_table_size_from():
    # resolution 0 next to a 4 color table, as Pillow writes it
    data = gb.gif(1, 1, gb.image([3], 1, 1), palette=PALETTE, fields=0x81)
    playback = Playback()

    with pytest.raises(MalformedBlockIntroducer):
        playback.load(data)

    playback.load(data, table_size_from='size')
    assert next(playback.frames()).pixel(0, 0) == opaque(BLUE)


def test_finished_playback_refuses_to_step():
    gif = decode(gb.image([1] * 16, 4, 4))
    playback = Playback(gif, loops=1)
    playback.step()

    assert playback.finished
    with pytest.raises(RuntimeError):
        playback.step()
