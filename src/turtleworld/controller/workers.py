"""
Background Workers (Threading)
==============================
This module contains the QThread subclass that runs turtle scripts.

Why is this file needed?
------------------------
1. Responsiveness: Turtle commands block for their animation delay. Running a
   script on the main thread would freeze the event loop, and with it the frame
   scheduler and input delivery. The worker pushes the script to a background
   thread.
2. Signals: It reports completion or failure to the GUI through Qt Signals.

Classes:
    ScriptWorker: Runs a `script(world)` callable.
"""
import logging
from typing import Callable

from PySide6.QtCore import QThread, Signal

from turtleworld.controller.world import World

logger = logging.getLogger(__name__)

Script = Callable[[World], None]


class ScriptWorker(QThread):
    finished_ok = Signal()
    error_occurred = Signal(str)

    def __init__(self, world: World, script: Script) -> None:
        super().__init__()
        self.world = world
        self.script = script

    def run(self) -> None:
        name = getattr(self.script, "__name__", repr(self.script))
        try:
            logger.info(f"Running turtle script '{name}'...")
            self.script(self.world)
            logger.info(f"Turtle script '{name}' finished.")
            self.finished_ok.emit()
        except Exception as e:
            logger.error(f"Error in turtle script '{name}': {e}")
            self.error_occurred.emit(str(e))

    def stop(self) -> None:
        """Wake every turtle of the world out of its current pause."""
        for turtle in self.world.turtles:
            turtle.interrupt()
