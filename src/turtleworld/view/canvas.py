"""
Raster Surface (Canvas)
=======================
The persistent pixel buffer every turtle draws on, plus the per-frame
composite of rotated turtle sprites.

Why is this file needed?
------------------------
1. Persistence: Lines, dots and polygons are painted once into a QImage and
   stay there. Nothing is re-rendered from history.
2. Overlay: Sprites are composited onto a copy of the buffer for every frame,
   so moving a turtle never leaves sprite trails in the drawing.
3. Threading: The buffer is only ever replaced by swapping the reference under
   a lock, so a frame being composed on the GUI thread never sees a
   half-replaced image while a script resizes or restores it.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, Optional, Sequence, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import Qt, QPoint
from PySide6.QtGui import QBrush, QColor, QImage, QPainter, QPen, QPolygon

from turtleworld.config import SPRITE_HEADING_OFFSET
from turtleworld.model.color import Color, WHITE

if TYPE_CHECKING:
    import numpy.typing as npt
    from turtleworld.controller.turtle import Turtle

logger = logging.getLogger(__name__)

Point = tuple[int, int]


def _qcolor(color: Color) -> QColor:
    return QColor(color.r, color.g, color.b)


class RasterSurface:
    """
    Owns the persistent RGBA buffer of a world.

    Args:
        width: Buffer width in pixels.
        height: Buffer height in pixels.
        turtles: Callable returning the turtles to overlay, in draw order.
        default_sprite: Sprite used for turtles without their own.
    """

    def __init__(
        self,
        width: int,
        height: int,
        turtles: Callable[[], Sequence[Turtle]] = lambda: (),
        default_sprite: Optional[QImage] = None,
    ) -> None:
        self._check_size(width, height)
        self._lock = threading.RLock()
        self._image: QImage = self._blank(width, height)
        self._turtles = turtles
        self.default_sprite: Optional[QImage] = default_sprite

    # ------------------------------------------------------------------------------
    # Public API: geometry
    # ------------------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._image.width()

    @property
    def height(self) -> int:
        return self._image.height()

    @property
    def size(self) -> tuple[int, int]:
        with self._lock:
            return self._image.width(), self._image.height()

    def resize(self, width: int, height: int) -> None:
        """
        Replace the buffer with a white one of the new size, keeping the old
        content at the origin. Content is clipped, never scaled.

        Raises:
            ValueError: If width or height is not positive.
        """
        self._check_size(width, height)
        with self._lock:
            self._image = self._composited_on_blank(self._image, width, height)
        logger.debug(f"Canvas resized to {width}x{height}.")

    # ------------------------------------------------------------------------------
    # Public API: drawing primitives
    # ------------------------------------------------------------------------------

    def draw_line(self, p0: Point, p1: Point, color: Color, width: float = 1.0) -> None:
        pen = QPen(_qcolor(color))
        pen.setWidthF(width)
        with self._painter() as painter:
            painter.setPen(pen)
            painter.drawLine(QPoint(int(p0[0]), int(p0[1])), QPoint(int(p1[0]), int(p1[1])))

    def draw_filled_polygon(self, points: Iterable[Point], color: Color) -> None:
        points = list(points)
        if not points:
            return
        polygon = self._polygon(points)
        with self._painter() as painter:
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(_qcolor(color)))
            painter.drawPolygon(polygon)

    def draw_polygon_outline(self, points: Iterable[Point], color: Color) -> None:
        points = list(points)
        if not points:
            return
        polygon = self._polygon(points)
        with self._painter() as painter:
            painter.setPen(QPen(_qcolor(color), 1))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawPolygon(polygon)

    def draw_circle(self, center: Point, radius: int, color: Color) -> None:
        """Filled disc of the given radius centred on `center`."""
        with self._painter() as painter:
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(_qcolor(color)))
            painter.drawEllipse(QPoint(int(center[0]), int(center[1])), radius, radius)

    def fill(self, color: Color) -> None:
        with self._lock:
            self._image.fill(_qcolor(color))

    # ------------------------------------------------------------------------------
    # Public API: snapshots
    # ------------------------------------------------------------------------------

    def get_image(self) -> QImage:
        """A deep copy of the persistent buffer."""
        with self._lock:
            return self._image.copy()

    def set_image(self, image: QImage) -> None:
        """
        Replace the buffer wholesale. The image is placed at the origin of a
        white buffer of the current size.
        """
        with self._lock:
            self._image = self._composited_on_blank(image, self._image.width(), self._image.height())

    def pixel_color(self, x: int, y: int) -> Color:
        with self._lock:
            qc = self._image.pixelColor(x, y)
        return Color(qc.red(), qc.green(), qc.blue())

    def to_array(self) -> npt.NDArray[np.uint8]:
        """Export the buffer as an (H, W, 4) RGBA array."""
        with self._lock:
            rgba = self._image.convertToFormat(QImage.Format.Format_RGBA8888)

        h, w = rgba.height(), rgba.width()
        raw = np.frombuffer(rgba.constBits(), dtype=np.uint8, count=rgba.sizeInBytes())
        # Scanlines may be padded past w * 4 bytes
        rows = raw.reshape(h, rgba.bytesPerLine())
        return rows[:, :w * 4].reshape(h, w, 4).copy()

    # ------------------------------------------------------------------------------
    # Public API: frame composition
    # ------------------------------------------------------------------------------

    def present(self) -> QImage:
        """
        Compose one display frame: a copy of the buffer with every turtle's
        sprite drawn on top, in registry order. The buffer itself is untouched.
        """
        with self._lock:
            frame = self._image.copy()

        painter = QPainter(frame)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
            for turtle in tuple(self._turtles()):
                state = turtle.state
                sprite = state.sprite if state.sprite is not None else self.default_sprite
                if sprite is None or sprite.isNull():
                    continue
                x, y = state.pixel
                self._draw_sprite(painter, sprite, x, y, state.theta)
        finally:
            painter.end()
        return frame

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    @contextmanager
    def _painter(self) -> Iterator[QPainter]:
        """
        Scoped painter on the persistent buffer. Pen and brush live only as
        long as the painter, so nothing carries over between primitives.
        """
        with self._lock:
            painter = QPainter(self._image)
            try:
                painter.setRenderHint(QPainter.RenderHint.Antialiasing, False)
                yield painter
            finally:
                painter.end()

    @staticmethod
    def _check_size(width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}.")

    @staticmethod
    def _blank(width: int, height: int) -> QImage:
        image = QImage(width, height, QImage.Format.Format_ARGB32)
        image.fill(_qcolor(WHITE))
        return image

    @classmethod
    def _composited_on_blank(cls, source: QImage, width: int, height: int) -> QImage:
        image = cls._blank(width, height)
        painter = QPainter(image)
        try:
            painter.drawImage(0, 0, source)
        finally:
            painter.end()
        return image

    @staticmethod
    def _polygon(points: Iterable[Point]) -> QPolygon:
        return QPolygon([QPoint(int(x), int(y)) for x, y in points])

    @staticmethod
    def _draw_sprite(painter: QPainter, sprite: QImage, x: int, y: int, heading: float) -> None:
        """Draw `sprite` centred on (x, y), nose pointing along `heading`."""
        painter.save()
        try:
            painter.translate(x, y)
            painter.rotate(heading + SPRITE_HEADING_OFFSET)
            painter.drawImage(QPoint(-(sprite.width() // 2), -(sprite.height() // 2)), sprite)
        finally:
            painter.restore()
