"""
Turtle (Command Interpreter)
============================
A headed drawing cursor registered to a World.

Why is this file needed?
------------------------
1. State machine: Every command swaps the current TurtleState into `previous`
   and builds a new `current`. Position-changing commands then run the flush
   step, which draws the segment between the two snapshots.
2. Pacing: After each drawn segment the calling thread pauses for `delay`
   milliseconds so motion is visible at the frame scheduler's cadence.
3. Polygons: Between `begin_fill()` and `end_fill()` visited positions are
   collected and rasterised as one filled polygon.

Classes:
    Turtle: The command interpreter.
"""
from __future__ import annotations

import itertools
import logging
import math
import threading
import weakref
from dataclasses import replace
from typing import Any, Optional, TYPE_CHECKING

import numpy as np

from turtleworld.config import DEFAULT_DELAY_MS, DEFAULT_STEP, DEFAULT_TURN
from turtleworld.model.color import Color
from turtleworld.model.state import TurtleState

if TYPE_CHECKING:
    from PySide6.QtGui import QImage
    from turtleworld.controller.world import World

logger = logging.getLogger(__name__)


class Turtle:
    """
    A turtle drawing on the raster surface of its world.

    A turtle is created registered to `world`. The world's registry owns it; the
    turtle only keeps a weak reference back, plus its `handle` which is its key
    in the registry.
    """
    _handles = itertools.count(1)

    def __init__(self, world: World) -> None:
        self.handle: int = next(Turtle._handles)
        self._world_ref: Optional[weakref.ref[World]] = None

        # Milliseconds to pause after each drawn segment
        self.delay: int = DEFAULT_DELAY_MS

        self._current: TurtleState
        self._previous: TurtleState

        self._polygon_mode: bool = False
        self._vertices: list[tuple[float, float]] = []
        self._wake = threading.Event()

        self.reset(world)

    def __repr__(self) -> str:
        s = self._current
        return f"Turtle(handle={self.handle}, x={s.x:g}, y={s.y:g}, heading={s.theta:g})"

    # ------------------------------------------------------------------------------
    # World membership
    # ------------------------------------------------------------------------------

    @property
    def world(self) -> Optional[World]:
        """The world this turtle is registered to, or None."""
        if self._world_ref is None:
            return None
        return self._world_ref()

    def reset(self, world: Optional[World] = None) -> None:
        """
        Reinitialise the turtle, optionally moving it to another world.
        Draws nothing; the old world's drawing is left as is.

        Raises:
            ValueError: If no world is given and the turtle has none.
        """
        target = world if world is not None else self.world
        if target is None:
            raise ValueError("Turtle is not registered to a world; pass one to reset().")

        self._current = TurtleState.default_for(target.width, target.height)
        self._previous = self._current
        self.delay = DEFAULT_DELAY_MS
        self._polygon_mode = False
        self._vertices.clear()

        target.add_turtle(self)

    def _bind_world(self, world: World) -> None:
        self._world_ref = weakref.ref(world)

    def _unbind_world(self) -> None:
        self._world_ref = None

    # ------------------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------------------

    @property
    def state(self) -> TurtleState:
        return self._current

    @property
    def previous_state(self) -> TurtleState:
        return self._previous

    def set_state(self, state: TurtleState) -> None:
        """Push a new state without drawing between the two."""
        self._previous = self._current
        self._current = state

    @property
    def heading(self) -> float:
        return self._current.theta

    @property
    def position(self) -> tuple[float, float]:
        return self._current.position

    @property
    def x(self) -> float:
        return self._current.x

    @property
    def y(self) -> float:
        return self._current.y

    def get_color(self) -> Color:
        return self._current.color

    def get_fill_color(self) -> Color:
        return self._current.fill_color

    def get_width(self) -> float:
        return self._current.width

    def is_down(self) -> bool:
        return self._current.pen_down

    def is_filling(self) -> bool:
        return self._polygon_mode

    @property
    def vertices(self) -> list[tuple[float, float]]:
        """Polygon points recorded since `begin_fill()`."""
        return list(self._vertices)

    # ------------------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------------------

    def forward(self, dist: float = DEFAULT_STEP) -> None:
        rad = math.radians(self._current.theta)
        self._push(
            x=self._current.x + dist * math.cos(rad),
            y=self._current.y + dist * math.sin(rad),
        )
        self._flush()

    def backward(self, dist: float = DEFAULT_STEP) -> None:
        self.forward(-dist)

    def right(self, angle: float = DEFAULT_TURN) -> None:
        """Rotate clockwise by `angle` degrees. Draws nothing."""
        self._push(theta=self._current.theta + angle)

    def left(self, angle: float = DEFAULT_TURN) -> None:
        """Rotate counter-clockwise by `angle` degrees. Draws nothing."""
        self.right(-angle)

    def strafe_right(self, dist: float = DEFAULT_STEP) -> None:
        """Move sideways, 90 degrees clockwise from the heading."""
        rad = math.radians(self._current.theta + 90)
        self._push(
            x=self._current.x + dist * math.cos(rad),
            y=self._current.y + dist * math.sin(rad),
        )
        self._flush()

    def strafe_left(self, dist: float = DEFAULT_STEP) -> None:
        self.strafe_right(-dist)

    def slide(self, forward: float, sideways: float) -> None:
        """Move forward and sideways in a single segment."""
        rad = math.radians(self._current.theta)
        side = math.radians(self._current.theta + 90)
        self._push(
            x=self._current.x + forward * math.cos(rad) + sideways * math.cos(side),
            y=self._current.y + forward * math.sin(rad) + sideways * math.sin(side),
        )
        self._flush()

    def teleport(self, x: float, y: float) -> None:
        """Go to an absolute position, drawing a line there if the pen is down."""
        self._push(x=float(x), y=float(y))
        self._flush()

    def move(self, dx: float, dy: float) -> None:
        """Shift by (dx, dy), drawing a line if the pen is down."""
        self._push(x=self._current.x + dx, y=self._current.y + dy)
        self._flush()

    # ------------------------------------------------------------------------------
    # Pen attributes
    # ------------------------------------------------------------------------------

    def penup(self) -> None:
        """Stop drawing lines. Polygon points are still recorded."""
        self._push(pen_down=False)

    def pendown(self) -> None:
        self._push(pen_down=True)

    def color(self, *args: Any) -> None:
        """
        Set the line colour.

        Examples:
            - turtle.color(RED)
            - turtle.color(255, 128, 0)
            - turtle.color(1.0, 0.5, 0.0)
        """
        self._push(color=Color.coerce(*args))

    def fill_color(self, *args: Any) -> None:
        """Set the polygon fill colour. Accepts the same forms as `color()`."""
        self._push(fill_color=Color.coerce(*args))

    def set_width(self, width: float) -> None:
        self._push(width=float(width))

    def set_dot_radius(self, radius: int) -> None:
        self._push(dot_radius=int(radius))

    def set_sprite(self, sprite: Optional[QImage]) -> None:
        """Use `sprite` for this turtle only; None falls back to the world's."""
        self._push(sprite=sprite)

    # ------------------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------------------

    def dot(self, radius: Optional[int] = None) -> None:
        """Draw a filled disc in the line colour, whether or not the pen is down."""
        world = self.world
        if world is None:
            return
        r = self._current.dot_radius if radius is None else radius
        world.canvas.draw_circle(self._current.pixel, r, self._current.color)

    def begin_fill(self) -> None:
        self._polygon_mode = True
        self._vertices.clear()

    def end_fill(self) -> None:
        """
        Fill the recorded polygon with the fill colour, then outline it in the
        same colour on top. An empty recording draws nothing.
        """
        self._polygon_mode = False
        points = self._pixel_vertices()
        self._vertices.clear()

        world = self.world
        if world is None:
            logger.debug(f"{self!r} has no world, dropping {len(points)} polygon points.")
            return

        fill = self._current.fill_color
        world.canvas.draw_filled_polygon(points, fill)
        world.canvas.draw_polygon_outline(points, fill)

    def interrupt(self) -> None:
        """Cut short the pause of a command currently running on another thread."""
        self._wake.set()

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _push(self, **changes: Any) -> None:
        self._previous = self._current
        self._current = replace(self._current, **changes)

    def _flush(self) -> None:
        """Record the polygon point, draw the last segment and pause."""
        current, previous = self._current, self._previous

        if self._polygon_mode and (current.x != previous.x or current.y != previous.y):
            self._vertices.append((current.x, current.y))

        world = self.world
        if current.pen_down and world is not None:
            world.canvas.draw_line(previous.pixel, current.pixel, current.color, current.width)
            self._pause()

    def _pause(self) -> None:
        if self.delay <= 0:
            return
        if self._wake.wait(self.delay / 1000.0):
            # Interrupted: the command still completes normally
            self._wake.clear()
            logger.debug(f"Pause of {self!r} interrupted.")

    def _pixel_vertices(self) -> list[tuple[int, int]]:
        if not self._vertices:
            return []
        pts = np.asarray(self._vertices, dtype=np.float64).reshape(-1, 2)
        pixels = np.floor(pts + 0.5).astype(np.int64)
        return [(x, y) for x, y in pixels.tolist()]
