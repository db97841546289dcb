"""
Turtle graphics on a persistent raster surface, with polled keyboard/mouse
input and a fixed-interval frame scheduler.

Usage:
    world = World(600, 600)
    t = world.turtle()
    t.forward(100)
"""
from turtleworld.controller.input import Keyboard, KeyState, Mouse
from turtleworld.controller.scheduler import FrameScheduler
from turtleworld.controller.turtle import Turtle
from turtleworld.controller.world import World
from turtleworld.model.color import Color
from turtleworld.model.state import TurtleState
from turtleworld.view.canvas import RasterSurface

__all__ = [
    "Color",
    "FrameScheduler",
    "Keyboard",
    "KeyState",
    "Mouse",
    "RasterSurface",
    "Turtle",
    "TurtleState",
    "World",
]
