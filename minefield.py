"""
Minefield model: mine layout, cascading open, marks and the win check.

Visible cell values are plain ints: 0..8 for an opened cell showing its
neighbor mine count, then the closed states and the exploded mine.
"""

import logging
import random

logger = logging.getLogger(__name__)

HIDDEN = 9
FLAGGED = 10
QUESTIONED = 11
EXPLODED = 12

CLOSED = (HIDDEN, FLAGGED, QUESTIONED)


def is_open(value):
    return 0 <= value <= 8


def place_mines(size, level, rng=None):
    """Sample size*size*level // 20 coordinates with replacement.

    Repeated draws land on the same square, so the realized mine count can
    fall short of the target.
    """
    rng = rng or random.Random()
    grid = [[False] * size for _ in range(size)]
    for _ in range(size * size * level // 20):
        x, y = rng.randrange(size), rng.randrange(size)
        grid[y][x] = True
    return tuple(tuple(row) for row in grid)


class Minefield:
    def __init__(self, mines):
        self.mines = tuple(tuple(bool(m) for m in row) for row in mines)
        self.size = len(self.mines)
        if any(len(row) != self.size for row in self.mines):
            raise ValueError("mine layout must be square")
        self.field = [[HIDDEN] * self.size for _ in range(self.size)]
        self.mine_target = self.mine_count

    @classmethod
    def create(cls, size, level, rng=None):
        mines = place_mines(size, level, rng)
        field = cls(mines)
        field.mine_target = max(0, size * size * level // 20)
        logger.debug("placed %d mines on %dx%d (target %d)", field.mine_count, size, size, field.mine_target)
        return field

    @classmethod
    def from_rows(cls, rows):
        """Build from strings such as ["*..", "...", "..*"]."""
        return cls([[ch == "*" for ch in row] for row in rows])

    @property
    def mine_count(self):
        return sum(1 for row in self.mines for m in row if m)

    def in_bounds(self, x, y):
        return 0 <= x < self.size and 0 <= y < self.size

    def neighbors(self, x, y):
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                nx, ny = x + dx, y + dy
                if self.in_bounds(nx, ny):
                    yield nx, ny

    def is_mine(self, x, y):
        return self.mines[y][x]

    def cell(self, x, y):
        return self.field[y][x]

    def rows(self):
        return tuple(tuple(row) for row in self.field)

    def mines_around(self, x, y):
        return sum(1 for nx, ny in self.neighbors(x, y) if self.mines[ny][nx])

    def open(self, x, y, on_reveal=None):
        """Open (x, y); False means a mine went off.

        A zero count spreads to every neighbor. Opened cells are skipped on
        re-entry, so the field itself serves as the visited set.
        """
        if is_open(self.field[y][x]):
            return True
        if self.mines[y][x]:
            self.field[y][x] = EXPLODED
            return False

        stack = [(x, y)]
        opened = 0
        while stack:
            cx, cy = stack.pop()
            if is_open(self.field[cy][cx]):
                continue
            count = self.mines_around(cx, cy)
            self.field[cy][cx] = count
            opened += 1
            if on_reveal is not None:
                on_reveal()
            if count == 0:
                stack.extend(self.neighbors(cx, cy))
        logger.debug("open (%d, %d) revealed %d cells", x, y, opened)
        return True

    def cycle_mark(self, x, y):
        value = self.field[y][x]
        if value not in CLOSED:
            return
        self.field[y][x] = CLOSED[(CLOSED.index(value) + 1) % len(CLOSED)]

    def check_win(self):
        for y in range(self.size):
            for x in range(self.size):
                value = self.field[y][x]
                if value in (HIDDEN, QUESTIONED, EXPLODED):
                    return False
                if value == FLAGGED and not self.mines[y][x]:
                    return False
        return True
