from __future__ import annotations

import threading

import numpy as np
import pytest
from PySide6.QtGui import QColor, QImage

from turtleworld.controller.world import World
from turtleworld.model.color import Color, BLACK, BLUE, GREEN, RED, WHITE
from turtleworld.view.canvas import RasterSurface


def _solid(width: int, height: int, color: Color) -> QImage:
    image = QImage(width, height, QImage.Format.Format_ARGB32)
    image.fill(QColor(color.r, color.g, color.b))
    return image


def _frame_color(image: QImage, x: int, y: int) -> Color:
    qc = image.pixelColor(x, y)
    return Color(qc.red(), qc.green(), qc.blue())


@pytest.fixture()
def canvas(qapp) -> RasterSurface:
    return RasterSurface(100, 80)


class TestPrimitives:
    def test_starts_white(self, canvas: RasterSurface) -> None:
        assert canvas.size == (100, 80)
        assert canvas.pixel_color(0, 0) == WHITE
        assert canvas.pixel_color(99, 79) == WHITE

    def test_line(self, canvas: RasterSurface) -> None:
        canvas.draw_line((10, 40), (90, 40), RED, 3)
        assert canvas.pixel_color(50, 40) == RED
        assert canvas.pixel_color(50, 60) == WHITE

    def test_attributes_do_not_leak(self, canvas: RasterSurface) -> None:
        canvas.draw_line((10, 20), (90, 20), RED, 9)
        canvas.draw_line((10, 60), (90, 60), BLUE, 1)
        assert canvas.pixel_color(50, 60) == BLUE
        # a leaked 9px stroke would reach this row
        assert canvas.pixel_color(50, 63) == WHITE

    def test_filled_polygon(self, canvas: RasterSurface) -> None:
        canvas.draw_filled_polygon([(10, 10), (60, 10), (60, 60), (10, 60)], GREEN)
        assert canvas.pixel_color(35, 35) == GREEN
        assert canvas.pixel_color(80, 35) == WHITE

    def test_polygon_outline_leaves_interior(self, canvas: RasterSurface) -> None:
        canvas.draw_polygon_outline([(10, 10), (60, 10), (60, 60), (10, 60)], BLACK)
        assert canvas.pixel_color(35, 10) == BLACK
        assert canvas.pixel_color(35, 35) == WHITE

    def test_empty_polygon_is_noop(self, canvas: RasterSurface) -> None:
        before = canvas.to_array()
        canvas.draw_filled_polygon([], RED)
        canvas.draw_polygon_outline([], RED)
        assert np.array_equal(canvas.to_array(), before)

    def test_circle(self, canvas: RasterSurface) -> None:
        canvas.draw_circle((50, 40), 10, BLUE)
        assert canvas.pixel_color(50, 40) == BLUE
        assert canvas.pixel_color(55, 40) == BLUE
        assert canvas.pixel_color(70, 40) == WHITE

    def test_fill(self, canvas: RasterSurface) -> None:
        canvas.fill(RED)
        assert canvas.pixel_color(0, 0) == RED
        assert canvas.pixel_color(99, 79) == RED

    def test_to_array(self, canvas: RasterSurface) -> None:
        canvas.fill(RED)
        arr = canvas.to_array()
        assert arr.shape == (80, 100, 4)
        assert arr.dtype == np.uint8
        assert arr[5, 7].tolist() == [255, 0, 0, 255]


class TestResize:
    def test_grow_keeps_pixels(self, canvas: RasterSurface) -> None:
        canvas.draw_circle((50, 40), 5, RED)
        canvas.resize(300, 200)
        assert canvas.size == (300, 200)
        assert canvas.pixel_color(50, 40) == RED
        assert canvas.pixel_color(250, 150) == WHITE
        frame = canvas.present()
        assert (frame.width(), frame.height()) == (300, 200)

    def test_shrink_clips(self, canvas: RasterSurface) -> None:
        canvas.draw_circle((10, 10), 3, RED)
        canvas.draw_circle((90, 70), 3, BLUE)
        canvas.resize(50, 40)
        assert canvas.size == (50, 40)
        assert canvas.pixel_color(10, 10) == RED
        canvas.present()
        canvas.resize(100, 80)
        # clipped content does not come back
        assert canvas.pixel_color(90, 70) == WHITE


class TestSnapshots:
    def test_get_image_is_a_copy(self, canvas: RasterSurface) -> None:
        snapshot = canvas.get_image()
        canvas.fill(RED)
        assert _frame_color(snapshot, 0, 0) == WHITE

    def test_set_image_normalizes_size(self, canvas: RasterSurface) -> None:
        canvas.set_image(_solid(30, 20, RED))
        assert canvas.size == (100, 80)
        assert canvas.pixel_color(10, 10) == RED
        assert canvas.pixel_color(50, 50) == WHITE

    def test_set_image_clips_larger_source(self, canvas: RasterSurface) -> None:
        canvas.set_image(_solid(500, 500, BLUE))
        assert canvas.size == (100, 80)
        assert canvas.pixel_color(99, 79) == BLUE

    def test_restore_round_trip(self, canvas: RasterSurface) -> None:
        canvas.draw_line((0, 0), (99, 79), BLACK, 2)
        saved = canvas.get_image()
        before = canvas.to_array()
        canvas.fill(GREEN)
        canvas.set_image(saved)
        assert np.array_equal(canvas.to_array(), before)


class TestPresent:
    def test_present_does_not_touch_buffer(self, world: World) -> None:
        world.canvas.default_sprite = _solid(9, 9, RED)
        world.turtle()
        before = world.canvas.to_array()
        frame = world.canvas.present()
        assert _frame_color(frame, 100, 100) == RED
        assert np.array_equal(world.canvas.to_array(), before)

    def test_own_sprite_wins(self, world: World) -> None:
        world.canvas.default_sprite = _solid(9, 9, RED)
        t = world.turtle()
        t.set_sprite(_solid(9, 9, BLUE))
        assert _frame_color(world.canvas.present(), 100, 100) == BLUE
        t.set_sprite(None)
        assert _frame_color(world.canvas.present(), 100, 100) == RED

    def test_no_sprite_draws_nothing(self, world: World) -> None:
        world.canvas.default_sprite = None
        world.turtle()
        frame = world.canvas.present()
        assert _frame_color(frame, 100, 100) == WHITE

    def test_sprite_follows_turtle(self, world: World) -> None:
        world.canvas.default_sprite = _solid(5, 5, RED)
        t = world.turtle()
        t.delay = 0
        t.penup()
        t.teleport(30.4, 160.6)
        frame = world.canvas.present()
        assert _frame_color(frame, 30, 161) == RED
        assert _frame_color(frame, 100, 100) == WHITE

    def test_sprite_rotation(self, world: World) -> None:
        # 3 wide, 11 tall: nose-up art. Heading 0 (East) turns it sideways.
        world.canvas.default_sprite = _solid(3, 11, RED)
        t = world.turtle()
        frame = world.canvas.present()
        assert _frame_color(frame, 104, 100) == RED
        assert _frame_color(frame, 100, 104) == WHITE

        t.right(90)
        frame = world.canvas.present()
        assert _frame_color(frame, 100, 104) == RED
        assert _frame_color(frame, 104, 100) == WHITE

    def test_present_after_drawing_shows_drawing(self, world: World) -> None:
        world.canvas.default_sprite = None
        world.canvas.draw_circle((20, 20), 4, GREEN)
        assert _frame_color(world.canvas.present(), 20, 20) == GREEN


class TestBufferSwaps:
    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
    def test_rejects_non_positive_size(self, canvas: RasterSurface, size: tuple[int, int]) -> None:
        with pytest.raises(ValueError):
            canvas.resize(*size)
        assert canvas.size == (100, 80)
        with pytest.raises(ValueError):
            RasterSurface(*size)

    def test_present_during_resize_and_set_image(self, canvas: RasterSurface) -> None:
        sizes = {(100, 80), (60, 40)}
        red = _solid(100, 80, RED)
        stop = threading.Event()
        errors: list[BaseException] = []

        def swap() -> None:
            try:
                while not stop.is_set():
                    canvas.resize(60, 40)
                    canvas.set_image(red)
                    canvas.resize(100, 80)
                    canvas.set_image(red)
            except BaseException as e:  # reported below
                errors.append(e)

        writer = threading.Thread(target=swap)
        writer.start()
        try:
            for _ in range(300):
                frame = canvas.present()
                assert not frame.isNull()
                assert (frame.width(), frame.height()) in sizes
                # every swapped-in buffer is either all red or red over white
                assert _frame_color(frame, 0, 0) in (RED, WHITE)
        finally:
            stop.set()
            writer.join(timeout=5)
        assert errors == []
