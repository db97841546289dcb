"""
Application Initialization
==========================
This module builds a World, its window and a background script worker, then
starts the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Instantiates the World (canvas, turtles, input, frame scheduler).
2. Instantiates the Main Window (View) around it.
3. Runs the drawing script on a worker thread so the GUI stays live.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from PySide6.QtCore import Qt, QThread
from PySide6.QtWidgets import QApplication

from turtleworld.config import DEFAULT_SPRITE_LOCATIONS, FRAME_INTERVAL_MS
from turtleworld.controller.workers import ScriptWorker
from turtleworld.controller.world import World
from turtleworld.logging_config import setup_logging
from turtleworld.model.color import Color, RED, BLUE
from turtleworld.view.main_window import TurtleWindow, VISIBLE_APP_NAME

logger = logging.getLogger(__name__)


def demo(world: World) -> None:
    """Draw a filled square, a star and a ring of dots, then steer with the arrows."""
    t = world.turtle()
    t.delay = 5

    # Filled square
    t.penup()
    t.teleport(60, 60)
    t.pendown()
    t.color(BLUE)
    t.fill_color(Color(160, 196, 255))
    t.begin_fill()
    for _ in range(4):
        t.forward(120)
        t.right()
    t.end_fill()

    # Star
    t.penup()
    t.teleport(world.width / 2, world.height / 2)
    t.pendown()
    t.color(RED)
    t.set_width(2)
    for _ in range(5):
        t.forward(150)
        t.right(144)

    # Dots
    t.penup()
    t.color(0.2, 0.6, 0.2)
    for _ in range(12):
        t.forward(40)
        t.dot(4)
        t.backward(40)
        t.right(30)

    # Arrow keys drive the turtle until Escape
    t.pendown()
    t.set_width(1)
    t.color(0, 0, 0)
    kb = world.keyboard
    while world.scheduler.is_active():
        kb.poll()
        if kb.is_down_once(Qt.Key.Key_Escape):
            break
        if kb.is_down(Qt.Key.Key_Left):
            t.left(5)
        if kb.is_down(Qt.Key.Key_Right):
            t.right(5)
        if kb.is_down(Qt.Key.Key_Up):
            t.forward(2)
        elif kb.is_down(Qt.Key.Key_Down):
            t.backward(2)
        else:
            QThread.msleep(10)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="turtleworld",
        description="Open a turtle world and run the demo drawing in it.",
    )
    p.add_argument(
        "--size", nargs=2, type=int, default=(600, 600), metavar=("WIDTH", "HEIGHT"),
        help="World size in pixels (default: 600 600).",
    )
    p.add_argument(
        "--interval", type=int, default=FRAME_INTERVAL_MS,
        help=f"Repaint interval in milliseconds (default: {FRAME_INTERVAL_MS}).",
    )
    p.add_argument(
        "--sprite", action="append", default=[], metavar="PATH",
        help="Sprite file to try before the bundled one. May be repeated.",
    )
    p.add_argument(
        "--log-level", type=str.upper, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO).",
    )
    p.add_argument("--log-file", default=None, help="Also write the log to this file.")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=args.log_level, log_file=args.log_file)

    # 2. Create the Qt Application
    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName(VISIBLE_APP_NAME)

    # 3. Initialize the World
    width, height = args.size
    locations = (*args.sprite, *DEFAULT_SPRITE_LOCATIONS)
    try:
        world = World(width, height, *locations, interval_ms=args.interval)
    except ValueError as e:
        logger.error(f"Cannot create world: {e}")
        return 2

    # 4. Initialize the Main Window, passing the world
    window = TurtleWindow(world)
    window.show()

    # 5. Run the drawing script off the GUI thread
    worker = ScriptWorker(world, demo)
    worker.error_occurred.connect(lambda msg: logger.error(f"Demo failed: {msg}"))
    app.aboutToQuit.connect(worker.stop)
    app.aboutToQuit.connect(lambda: worker.wait(2000))
    worker.start()

    # 6. Start Event Loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
