"""
Main Application Window
=======================
A bare window around a single TurtleView.
"""
from typing import Optional

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QMainWindow, QWidget

from turtleworld.controller.world import World
from turtleworld.view.turtle_view import TurtleView

VISIBLE_APP_NAME = "Turtle World"


class TurtleWindow(QMainWindow):
    def __init__(self, world: World, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.world = world
        self.setWindowTitle(VISIBLE_APP_NAME)

        self.view = TurtleView(world, self)
        self.setCentralWidget(self.view)
        self.view.setFocus()

    def closeEvent(self, event: QCloseEvent) -> None:  # type: ignore[override]
        self.world.close()
        super().closeEvent(event)
