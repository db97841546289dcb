"""
Turtle State (Data Model)
=========================
This module defines the snapshot of one turtle's drawing attributes.

Why is this file needed?
------------------------
1. Buffering: A turtle keeps two snapshots (current and previous) so the flush
   step knows where the last segment started.
2. Immutability: Snapshots are frozen dataclasses. Commands build the next
   state with `dataclasses.replace`, so copying a snapshot is a plain
   assignment and a reader never sees a half-updated state.

Classes:
    TurtleState: Position, heading and pen attributes of a turtle.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from turtleworld.config import DEFAULT_DOT_RADIUS, DEFAULT_PEN_WIDTH
from turtleworld.model.color import Color, BLACK, WHITE

if TYPE_CHECKING:
    from PySide6.QtGui import QImage


def normalize_heading(theta: float) -> float:
    """Wrap an angle in degrees into [0, 360)."""
    theta = theta % 360.0
    # -1e-20 % 360.0 rounds up to 360.0
    if theta >= 360.0:
        theta -= 360.0
    return theta


def to_pixel(value: float) -> int:
    """Round a world coordinate to the nearest pixel (halves round up)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class TurtleState:
    """
    Drawing attributes of a turtle at one point in time.

    Coordinates are pixels from the top-left corner of the world, y growing
    downward. `theta` is in degrees, clockwise from East, always in [0, 360).
    """
    x: float
    y: float
    theta: float = 0.0
    color: Color = BLACK
    width: float = DEFAULT_PEN_WIDTH
    pen_down: bool = True
    fill_color: Color = WHITE
    dot_radius: int = DEFAULT_DOT_RADIUS
    sprite: Optional[QImage] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "theta", normalize_heading(self.theta))

    @classmethod
    def default_for(cls, width: int, height: int) -> TurtleState:
        """A fresh state centred in a world of the given size."""
        return cls(x=width / 2, y=height / 2)

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y

    @property
    def pixel(self) -> tuple[int, int]:
        return to_pixel(self.x), to_pixel(self.y)
