"""
The MODEL layer contains pure value types describing a turtle's drawing state.
It has NO knowledge of the GUI (Qt) beyond carrying an opaque sprite reference.
"""
from turtleworld.model.color import Color, BLACK, WHITE, RED, GREEN, BLUE
from turtleworld.model.state import TurtleState, normalize_heading, to_pixel

__all__ = [
    "Color",
    "BLACK",
    "WHITE",
    "RED",
    "GREEN",
    "BLUE",
    "TurtleState",
    "normalize_heading",
    "to_pixel",
]
