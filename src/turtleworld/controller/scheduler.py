"""
Frame Scheduler
===============
Fires a single repaint callback at a fixed interval.

The timer lives on the Qt event loop of the thread that created it (normally
the GUI thread). The callback must only read drawing state; turtle commands
keep running on their own thread in the meantime.

Qt timers may only be started and stopped from their own thread. `start()`,
`stop()` and `set_interval()` therefore emit a signal: called from the timer's
thread it is delivered at once, called from a script thread it is queued onto
the timer's event loop.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from turtleworld.config import FRAME_INTERVAL_MS

logger = logging.getLogger(__name__)


class FrameScheduler(QObject):
    """Periodic timer invoking `callback` every `interval_ms` milliseconds."""

    _start_requested = Signal()
    _stop_requested = Signal()
    _interval_requested = Signal(int)

    def __init__(
        self,
        callback: Callable[[], None],
        interval_ms: int = FRAME_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._callback = callback

        self._timer = QTimer(self)
        self._timer.setSingleShot(False)
        self._timer.setInterval(max(int(interval_ms), 0))
        self._timer.timeout.connect(self.tick)

        self._start_requested.connect(self._start_timer)
        self._stop_requested.connect(self._stop_timer)
        self._interval_requested.connect(self._timer.setInterval)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def set_interval(self, interval_ms: int) -> None:
        self._interval_requested.emit(max(int(interval_ms), 0))

    def start(self) -> None:
        """Start ticking. Safe to call from any thread."""
        self._start_requested.emit()

    def stop(self) -> None:
        """Stop ticking. Safe to call from any thread."""
        self._stop_requested.emit()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def tick(self) -> None:
        """Run the callback once."""
        self._callback()

    # ------------------------------------------------------------------------------
    # Slots (timer thread)
    # ------------------------------------------------------------------------------

    @Slot()
    def _start_timer(self) -> None:
        if self._timer.isActive():
            return
        self._timer.start()
        logger.debug(f"Frame scheduler started ({self.interval_ms} ms).")

    @Slot()
    def _stop_timer(self) -> None:
        if not self._timer.isActive():
            return
        self._timer.stop()
        logger.debug("Frame scheduler stopped.")
