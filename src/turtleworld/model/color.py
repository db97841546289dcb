"""
8-bit RGB colour value used by turtles and the raster surface.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple, Union

ColorLike = Union["Color", Tuple[int, int, int], Tuple[float, float, float]]


def _clamp(value: int) -> int:
    return min(max(int(value), 0), 255)


@dataclass(frozen=True)
class Color:
    """An opaque 8-bit RGB colour. Components are always within [0, 255]."""
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"Color component '{name}' out of range: {value}")

    @classmethod
    def from_ints(cls, r: int, g: int, b: int) -> Color:
        """Build a colour from 0-255 components, clamping out-of-range values."""
        return cls(_clamp(r), _clamp(g), _clamp(b))

    @classmethod
    def from_floats(cls, r: float, g: float, b: float) -> Color:
        """Build a colour from 0.0-1.0 components, clamping after scaling."""
        return cls.from_ints(int(r * 255), int(g * 255), int(b * 255))

    @classmethod
    def coerce(cls, *args: Any) -> Color:
        """
        Normalize the accepted colour call forms into a Color.

        Accepted forms:
            - coerce(Color(...))
            - coerce((r, g, b))
            - coerce(r, g, b) with ints (0-255) or floats (0.0-1.0)

        Raises:
            TypeError: If the arguments do not describe three components.
        """
        if len(args) == 1:
            value = args[0]
            if isinstance(value, Color):
                return value
            if isinstance(value, (tuple, list)):
                args = tuple(value)

        if len(args) != 3:
            raise TypeError(f"Expected a Color or three components, got {args!r}.")

        # Any float switches the whole triple to the 0.0-1.0 scale
        if any(isinstance(c, float) for c in args):
            return cls.from_floats(*args)
        return cls.from_ints(*args)

    def as_tuple(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)
BLUE = Color(0, 0, 255)
