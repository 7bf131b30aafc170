"""
Character-grid render surface shared by the game loop and the clock.

All drawing goes through Screen.batch(), which holds one lock for the
whole sequence of cell writes plus the final flush. Input polling never
takes the lock.
"""

import curses
import logging
import threading
from contextlib import contextmanager
from enum import Enum, IntEnum

logger = logging.getLogger(__name__)


class Color(IntEnum):
    DEFAULT = -1
    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


class Key(Enum):
    LEFT = "left"
    DOWN = "down"
    UP = "up"
    RIGHT = "right"
    ESCAPE = "escape"
    MARK = "mark"
    OPEN = "open"
    NONE = "none"


class Surface:
    """What the game needs from a terminal."""

    def set_cell(self, col, row, glyph, fg=Color.DEFAULT, bg=Color.DEFAULT):
        raise NotImplementedError

    def flush(self):
        raise NotImplementedError

    def poll_key(self):
        raise NotImplementedError


class Screen:
    def __init__(self, surface: Surface):
        self._surface = surface
        self._lock = threading.Lock()

    @contextmanager
    def batch(self):
        with self._lock:
            yield self._surface
            self._surface.flush()

    def draw_lines(self, x, y, lines, fg=Color.DEFAULT, bg=Color.DEFAULT):
        with self.batch() as surface:
            for dy, line in enumerate(lines):
                for dx, ch in enumerate(line):
                    surface.set_cell(x + dx, y + dy, ch, fg, bg)

    def poll_key(self):
        return self._surface.poll_key()


KEYMAP = {
    ord("h"): Key.LEFT,
    curses.KEY_LEFT: Key.LEFT,
    ord("j"): Key.DOWN,
    curses.KEY_DOWN: Key.DOWN,
    ord("k"): Key.UP,
    curses.KEY_UP: Key.UP,
    ord("l"): Key.RIGHT,
    curses.KEY_RIGHT: Key.RIGHT,
    27: Key.ESCAPE,  # Esc
    3: Key.ESCAPE,  # Ctrl-C when delivered as a key
    ord("q"): Key.ESCAPE,
    ord("\t"): Key.MARK,
    ord(" "): Key.OPEN,
    10: Key.OPEN,
    13: Key.OPEN,
    curses.KEY_ENTER: Key.OPEN,
}


def translate_key(code):
    return KEYMAP.get(code, Key.NONE)


class CursesSurface(Surface):
    def __init__(self, stdscr):
        self.stdscr = stdscr
        self._pairs = {}
        curses.curs_set(0)
        curses.start_color()
        curses.use_default_colors()
        stdscr.erase()
        stdscr.refresh()
        # Keys are read from a window nothing draws on, so a blocking
        # getch() has nothing of its own to repaint.
        self.keys = curses.newwin(1, 1, 0, 0)
        self.keys.keypad(True)
        self.keys.timeout(-1)
        self.keys.noutrefresh()

    def _attr(self, fg, bg):
        if fg == Color.DEFAULT and bg == Color.DEFAULT:
            return curses.A_NORMAL
        pair = self._pairs.get((fg, bg))
        if pair is None:
            pair = len(self._pairs) + 1
            curses.init_pair(pair, int(fg), int(bg))
            self._pairs[(fg, bg)] = pair
        return curses.color_pair(pair)

    def set_cell(self, col, row, glyph, fg=Color.DEFAULT, bg=Color.DEFAULT):
        h, w = self.stdscr.getmaxyx()
        if not (0 <= row < h and 0 <= col < w):
            return
        try:
            self.stdscr.addstr(row, col, glyph, self._attr(fg, bg))
        except curses.error:
            # addstr fails after writing the last cell because the cursor
            # cannot advance past it.
            if (row, col) != (h - 1, w - 1):
                raise

    def flush(self):
        self.stdscr.refresh()

    def poll_key(self):
        try:
            code = self.keys.getch()
        except KeyboardInterrupt:
            return Key.ESCAPE
        key = translate_key(code)
        logger.debug("key %r -> %s", code, key.name)
        return key
