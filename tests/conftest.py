from __future__ import annotations

import os

# Must be set before the first Qt import
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from collections.abc import Generator
from typing import Any, Callable

import pytest
from PySide6.QtWidgets import QApplication

from turtleworld.controller.turtle import Turtle
from turtleworld.controller.world import World


@pytest.fixture(scope="session")
def qapp() -> Generator[QApplication, None, None]:
    """One QApplication for the whole session (timers and widgets need it)."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture()
def world(qapp: QApplication) -> Generator[World, None, None]:
    w = World(200, 200, autostart=False)
    yield w
    w.close()


@pytest.fixture()
def turtle(world: World) -> Turtle:
    t = world.turtle()
    t.delay = 0
    return t


class CallRecorder:
    """Wraps surface methods so tests can see which primitives ran, in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def wrap(self, name: str, fn: Callable[..., Any]) -> Callable[..., Any]:
        def spy(*args: Any, **kwargs: Any) -> Any:
            self.calls.append((name, args))
            return fn(*args, **kwargs)
        return spy

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture()
def draw_calls(world: World, monkeypatch: pytest.MonkeyPatch) -> CallRecorder:
    recorder = CallRecorder()
    for name in ("draw_line", "draw_filled_polygon", "draw_polygon_outline", "draw_circle"):
        monkeypatch.setattr(world.canvas, name, recorder.wrap(name, getattr(world.canvas, name)))
    return recorder
