"""
Pytest configuration and shared fixtures.
"""
import random
import threading

import pytest

from minefield import Minefield
from screen import Color, Key, Surface


class FakeSurface(Surface):
    """In-memory surface: records every write and replays scripted keys."""

    def __init__(self, keys=()):
        self.cells = {}
        self.events = []
        self.flushes = 0
        self.keys = list(keys)
        self.polled = 0

    def set_cell(self, col, row, glyph, fg=Color.DEFAULT, bg=Color.DEFAULT):
        self.cells[(col, row)] = (glyph, fg, bg)
        self.events.append(("set", threading.current_thread().name))

    def flush(self):
        self.flushes += 1
        self.events.append(("flush", threading.current_thread().name))

    def poll_key(self):
        self.polled += 1
        if not self.keys:
            return Key.ESCAPE
        return self.keys.pop(0)

    def text(self, row, start=0, end=80):
        return "".join(self.cells.get((col, row), (" ",))[0] for col in range(start, end)).rstrip()


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def empty_field():
    """3x3 board with no mines."""
    return Minefield.from_rows(["...", "...", "..."])


@pytest.fixture
def corner_field():
    """2x2 board with a mine in the top left corner."""
    return Minefield.from_rows(["*.", ".."])
