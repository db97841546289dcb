"""
Logging Configuration
Routes every 'turtleworld.*' logger to the console and, optionally, a file.
"""
import logging
import sys
from typing import Optional, TextIO, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%H:%M:%S'


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the 'turtleworld' namespace logger.

    Args:
        level: Level as a number (logging.DEBUG) or a name ("debug").
        log_file: Optional path; the file is truncated on every start.
        stream: Console stream, stdout by default.

    Returns:
        The configured package logger.
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger("turtleworld")
    logger.setLevel(resolved)

    # Calling this again (tests, a second main()) must not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setLevel(resolved)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(resolved)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info(f"Logging initialized ({logging.getLevelName(resolved)}).")
    return logger
