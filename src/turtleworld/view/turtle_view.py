"""
Turtle View (Display Host)
==========================
The widget that shows a World and feeds it raw input.

Why is this file needed?
------------------------
1. Repaint: The world's frame scheduler calls `update()`; Qt then calls
   `paintEvent`, which pulls a freshly composited frame from the canvas.
2. Input: Key and mouse events arrive here on the GUI thread and are written
   into the world's polled devices. Scripts read them after `poll()`.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QEvent, Qt, Signal, Slot
from PySide6.QtGui import QCursor, QEnterEvent, QKeyEvent, QMouseEvent, QPainter, QPaintEvent
from PySide6.QtWidgets import QWidget

from turtleworld.controller.world import World

# Qt button -> polled mouse button number
MOUSE_BUTTONS: dict[Qt.MouseButton, int] = {
    Qt.MouseButton.LeftButton: 1,
    Qt.MouseButton.MiddleButton: 2,
    Qt.MouseButton.RightButton: 3,
}


class TurtleView(QWidget):
    # Emitted by the world from any thread, applied on the GUI thread
    resize_requested = Signal(int, int)

    def __init__(self, world: World, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.world = world

        self.setFixedSize(world.width, world.height)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent, True)

        self.resize_requested.connect(self._apply_size)

        world.attach_display(self)

    # ------------------------------------------------------------------------------
    # World callbacks
    # ------------------------------------------------------------------------------

    def on_world_resized(self, width: int, height: int) -> None:
        """Called by `World.set_size`, possibly from a script thread."""
        self.resize_requested.emit(width, height)

    @Slot(int, int)
    def _apply_size(self, width: int, height: int) -> None:
        self.setFixedSize(width, height)
        self.update()

    # ------------------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------------------

    def paintEvent(self, event: QPaintEvent) -> None:  # type: ignore[override]
        del event
        frame = self.world.canvas.present()
        painter = QPainter(self)
        try:
            painter.drawImage(0, 0, frame)
        finally:
            painter.end()

    def keyPressEvent(self, event: QKeyEvent) -> None:  # type: ignore[override]
        if not event.isAutoRepeat():
            self.world.keyboard.press(event.key())
        event.accept()

    def keyReleaseEvent(self, event: QKeyEvent) -> None:  # type: ignore[override]
        if not event.isAutoRepeat():
            self.world.keyboard.release(event.key())
        event.accept()

    def mousePressEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        self._track(event)
        button = MOUSE_BUTTONS.get(event.button())
        if button is not None:
            self.world.mouse.press(button)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        self._track(event)
        button = MOUSE_BUTTONS.get(event.button())
        if button is not None:
            self.world.mouse.release(button)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        self._track(event)

    def enterEvent(self, event: QEnterEvent) -> None:  # type: ignore[override]
        pos = event.position()
        self.world.mouse.move(int(pos.x()), int(pos.y()))
        super().enterEvent(event)

    def leaveEvent(self, event: QEvent) -> None:  # type: ignore[override]
        # Last known position, possibly outside the widget
        pos = self.mapFromGlobal(QCursor.pos())
        self.world.mouse.move(pos.x(), pos.y())
        super().leaveEvent(event)

    def _track(self, event: QMouseEvent) -> None:
        pos = event.position()
        self.world.mouse.move(int(pos.x()), int(pos.y()))
