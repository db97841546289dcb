"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It keeps the sprite search path and the timing defaults in one
   place instead of scattering magic numbers through the turtle and canvas code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find the default sprite when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_SPRITE_LOCATIONS (tuple[str, ...]): Ordered sprite search path.
"""
import sys
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/turtleworld/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Paths
ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_SPRITE_PATH: str = os.path.join(ASSETS_PATH, "turtle.xpm")
DEFAULT_SPRITE_LOCATIONS: tuple[str, ...] = (
    DEFAULT_SPRITE_PATH,
    "turtle.xpm",
    "turtle.png",
)

# Frame timing (milliseconds)
FRAME_INTERVAL_MS: int = 10
DEFAULT_DELAY_MS: int = 1

# Turtle defaults
DEFAULT_DOT_RADIUS: int = 5
DEFAULT_PEN_WIDTH: float = 1.0
DEFAULT_STEP: float = 100.0
DEFAULT_TURN: float = 90.0

# Sprites are drawn nose-up, headings are measured from +x
SPRITE_HEADING_OFFSET: float = 90.0
PLACEHOLDER_SPRITE_SIZE: int = 19

MOUSE_BUTTON_COUNT: int = 3

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")
