"""
Sprite loading with an ordered search path and a blank fallback.
"""
from __future__ import annotations

import logging
import os
from typing import Iterable

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage

from turtleworld.config import PLACEHOLDER_SPRITE_SIZE

logger = logging.getLogger(__name__)


def placeholder_sprite(size: int = PLACEHOLDER_SPRITE_SIZE) -> QImage:
    """A fully transparent square image."""
    image = QImage(size, size, QImage.Format.Format_ARGB32)
    image.fill(Qt.GlobalColor.transparent)
    return image


def load_sprite(locations: Iterable[str]) -> QImage:
    """
    Return the first location that exists and decodes as an image.

    Missing files are skipped silently, files that exist but fail to decode are
    logged. If nothing loads, a blank placeholder is returned instead of raising.
    """
    for location in locations:
        if not os.path.exists(location):
            continue
        image = QImage(location)
        if image.isNull():
            logger.warning(
                f"Sprite failed to load. Path: {location} "
                f"(absolute: {os.path.abspath(location)})"
            )
            continue
        logger.debug(f"Loaded sprite from {location}")
        return image.convertToFormat(QImage.Format.Format_ARGB32)

    logger.info("No sprite found, using blank placeholder.")
    return placeholder_sprite()
