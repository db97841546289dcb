"""
Polled Input Devices
====================
Edge-triggered keyboard and mouse state for frame-based turtle programs.

Why is this file needed?
------------------------
1. Threading: Qt delivers key and mouse events on the GUI thread while turtle
   scripts run on a worker thread. Raw state written by events is guarded by
   one lock per device, and the script only reads a snapshot taken by `poll()`.
2. Edge detection: Each key/button runs a small state machine
   (RELEASED -> ONCE -> PRESSED -> RELEASED) so a script can tell the first
   frame of a press apart from a held key.

Classes:
    KeyState: Polled tri-state of a key or button.
    InputDevice: Shared raw/polled bookkeeping.
    Keyboard: Keys addressed by Qt key code.
    Mouse: Buttons 1-3 plus a frozen cursor position.
"""
from __future__ import annotations

import threading
from enum import IntEnum
from typing import Any, Dict

from turtleworld.config import MOUSE_BUTTON_COUNT


class KeyState(IntEnum):
    RELEASED = 0  # Not down
    PRESSED = 1  # Down, but not the first poll
    ONCE = 2  # Down for the first poll since release


class InputDevice:
    """
    Raw boolean state per code, written asynchronously, plus a polled
    tri-state snapshot updated only by `poll()`.

    Readers and writers take the same lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._raw: Dict[int, bool] = {}
        self._polled: Dict[int, KeyState] = {}

    # ------------------------------------------------------------------------------
    # Event side (input thread)
    # ------------------------------------------------------------------------------

    def press(self, code: Any) -> None:
        code = self._normalize(code)
        with self._lock:
            self._raw[code] = True

    def release(self, code: Any) -> None:
        code = self._normalize(code)
        with self._lock:
            self._raw[code] = False

    # ------------------------------------------------------------------------------
    # Caller side
    # ------------------------------------------------------------------------------

    def poll(self) -> None:
        """Advance every known key/button one frame using the latest raw state."""
        with self._lock:
            self._poll_locked()

    def state(self, code: Any) -> KeyState:
        code = self._normalize(code)
        with self._lock:
            return self._polled.get(code, KeyState.RELEASED)

    def is_down(self, code: Any) -> bool:
        return self.state(code) in (KeyState.ONCE, KeyState.PRESSED)

    def is_down_once(self, code: Any) -> bool:
        return self.state(code) == KeyState.ONCE

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _poll_locked(self) -> None:
        for code in set(self._raw) | set(self._polled):
            if self._raw.get(code, False):
                if self._polled.get(code, KeyState.RELEASED) == KeyState.RELEASED:
                    self._polled[code] = KeyState.ONCE
                else:
                    self._polled[code] = KeyState.PRESSED
            else:
                self._polled[code] = KeyState.RELEASED

    @staticmethod
    def _normalize(code: Any) -> int:
        # Qt enum members carry the integer in `.value`
        return int(getattr(code, "value", code))


class Keyboard(InputDevice):
    """Keys are addressed by Qt key code, e.g. `Qt.Key.Key_Space`."""

    def key_down(self, key: Any) -> bool:
        return self.is_down(key)

    def key_down_once(self, key: Any) -> bool:
        return self.is_down_once(key)


class Mouse(InputDevice):
    """
    Buttons are numbered 1 (left), 2 (middle) and 3 (right).

    `position` is the cursor location frozen by the last `poll()`; the live
    location written by motion events is only visible after polling.
    """

    def __init__(self) -> None:
        super().__init__()
        self._current_pos: tuple[int, int] = (0, 0)
        self._polled_pos: tuple[int, int] = (0, 0)
        for button in range(1, MOUSE_BUTTON_COUNT + 1):
            self._raw[button] = False
            self._polled[button] = KeyState.RELEASED

    def move(self, x: int, y: int) -> None:
        with self._lock:
            self._current_pos = (int(x), int(y))

    def poll(self) -> None:
        with self._lock:
            self._polled_pos = self._current_pos
            self._poll_locked()

    @property
    def position(self) -> tuple[int, int]:
        with self._lock:
            return self._polled_pos

    def button_down(self, button: int) -> bool:
        return self.is_down(button)

    def button_down_once(self, button: int) -> bool:
        return self.is_down_once(button)

    @staticmethod
    def _normalize(code: Any) -> int:
        button = InputDevice._normalize(code)
        if not 1 <= button <= MOUSE_BUTTON_COUNT:
            raise ValueError(f"Mouse button must be in 1..{MOUSE_BUTTON_COUNT}, got {button}.")
        return button
