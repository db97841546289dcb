"""
Turtle World (Composition Root)
===============================
Ties together the raster surface, the turtle registry, the input devices and
the frame scheduler.

Why is this file needed?
------------------------
1. Ownership: The world owns every turtle through its registry. Turtles only
   hold a weak link back, so dropping a world never leaks through its turtles.
2. Consistency: `add_turtle`/`remove_turtle` are the only places membership
   changes, keeping the registry and the turtles' world links in agreement.
3. Display: The scheduler asks an attached display to repaint; the display pulls
   `canvas.present()` and feeds raw input into `keyboard` and `mouse`.

Classes:
    World: The composition root.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol

from turtleworld.config import DEFAULT_SPRITE_LOCATIONS, FRAME_INTERVAL_MS
from turtleworld.controller.input import Keyboard, Mouse
from turtleworld.controller.scheduler import FrameScheduler
from turtleworld.controller.turtle import Turtle
from turtleworld.model.color import Color, WHITE
from turtleworld.view.canvas import RasterSurface
from turtleworld.view.sprites import load_sprite

logger = logging.getLogger(__name__)


class Display(Protocol):
    """
    What the world needs from a display host.

    `on_world_resized` is called on whichever thread resized the world and must
    hand the work over to the GUI thread itself.
    """
    def update(self) -> None: ...
    def on_world_resized(self, width: int, height: int) -> None: ...


class World:
    """
    A drawing world of a fixed pixel size.

    Args:
        width: Width of the world in pixels, must be > 0.
        height: Height of the world in pixels, must be > 0.
        *locations: Paths searched in order for the default turtle sprite.
            Defaults to DEFAULT_SPRITE_LOCATIONS.
        interval_ms: Repaint interval of the frame scheduler.
        autostart: Start the frame scheduler immediately.

    Raises:
        ValueError: If width or height is not positive.

    Example:
        world = World(600, 600)
        t = world.turtle()
        t.forward(100)
    """

    def __init__(
        self,
        width: int,
        height: int,
        *locations: str,
        interval_ms: int = FRAME_INTERVAL_MS,
        autostart: bool = True,
    ) -> None:
        self._check_size(width, height)

        self._registry_lock = threading.Lock()
        self._turtles: dict[int, Turtle] = {}
        self._display: Optional[Display] = None

        self.default_sprite = load_sprite(locations or DEFAULT_SPRITE_LOCATIONS)
        self.canvas = RasterSurface(width, height, lambda: self.turtles, self.default_sprite)

        self.keyboard = Keyboard()
        self.mouse = Mouse()

        self.scheduler = FrameScheduler(self.repaint, interval_ms)
        if autostart:
            self.scheduler.start()

        logger.info(f"World created ({width}x{height}).")

    # ------------------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.canvas.width

    @property
    def height(self) -> int:
        return self.canvas.height

    def set_size(self, width: int, height: int) -> None:
        """Resize the world and its canvas, keeping the drawing at the origin."""
        self._check_size(width, height)
        self.canvas.resize(width, height)
        if self._display is not None:
            self._display.on_world_resized(width, height)
        logger.info(f"World resized to {width}x{height}.")

    @staticmethod
    def _check_size(width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"width and height must be greater than 0, got {width}x{height}.")

    # ------------------------------------------------------------------------------
    # Turtle registry
    # ------------------------------------------------------------------------------

    def turtle(self) -> Turtle:
        """Create a new default turtle registered to this world."""
        return Turtle(self)

    def add_turtle(self, turtle: Turtle) -> None:
        """
        Register `turtle` here, removing it from any other world first.
        Registering twice keeps a single entry, moved to the end of the draw order.
        """
        old = turtle.world
        if old is not None and old is not self:
            old.remove_turtle(turtle)

        with self._registry_lock:
            self._turtles.pop(turtle.handle, None)
            self._turtles[turtle.handle] = turtle
        turtle._bind_world(self)
        logger.debug(f"Registered {turtle!r}.")

    def remove_turtle(self, turtle: Turtle) -> None:
        with self._registry_lock:
            self._turtles.pop(turtle.handle, None)
        if turtle.world is self:
            turtle._unbind_world()
        logger.debug(f"Removed {turtle!r}.")

    @property
    def turtles(self) -> tuple[Turtle, ...]:
        """Snapshot of the registry in draw order."""
        with self._registry_lock:
            return tuple(self._turtles.values())

    def __contains__(self, turtle: object) -> bool:
        with self._registry_lock:
            return isinstance(turtle, Turtle) and self._turtles.get(turtle.handle) is turtle

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._turtles)

    # ------------------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------------------

    def clear(self, color: Color = WHITE) -> None:
        """Fill the canvas with `color`. Turtles keep their state."""
        self.canvas.fill(color)
        logger.debug(f"Canvas cleared to {color.as_tuple()}.")

    # ------------------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------------------

    def attach_display(self, display: Display) -> None:
        self._display = display

    def detach_display(self) -> None:
        self._display = None

    def repaint(self) -> None:
        """Scheduler callback: ask the display to pull a new frame."""
        display = self._display
        if display is not None:
            display.update()

    def close(self) -> None:
        """Stop the frame scheduler and drop the display."""
        self.scheduler.stop()
        self.detach_display()
        logger.info("World closed.")
