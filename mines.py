#!/usr/bin/env python3
"""
Terminal Minesweeper (curses)

Controls:
  h/j/k/l or arrow keys : move cursor
  Tab                   : cycle mark (flag, question, none)
  Space or Enter        : open cell
  Esc / q               : quit

Options:
  -s/--size N     board side length (default 10)
  -l/--level N    mine density, N*N*level/20 mines (default 2, usually 1-3)
  --seed N        seed the mine layout
  --log-file PATH write debug logs to PATH
"""

import argparse
import curses
import logging
import os
import random
import sys
from enum import Enum

from clock import Clock
from minefield import EXPLODED, FLAGGED, HIDDEN, QUESTIONED, Minefield
from screen import Color, CursesSurface, Key, Screen

logger = logging.getLogger(__name__)

ORIGIN_X, ORIGIN_Y = 0, 1

GLYPHS = {
    0: " ",
    1: "1", 2: "2", 3: "3", 4: "4",
    5: "5", 6: "6", 7: "7", 8: "8",
    HIDDEN: "·",
    FLAGGED: "F",
    QUESTIONED: "?",
    EXPLODED: "*",
}

NUMBER_COLORS = {
    1: Color.BLUE, 2: Color.GREEN, 3: Color.RED, 4: Color.MAGENTA,
    5: Color.YELLOW, 6: Color.CYAN, 7: Color.WHITE, 8: Color.WHITE,
    FLAGGED: Color.YELLOW, EXPLODED: Color.RED,
}

MOVES = {
    Key.LEFT: (-1, 0),
    Key.DOWN: (0, 1),
    Key.UP: (0, -1),
    Key.RIGHT: (1, 0),
}

HELP = [
    "Move: [h][j][k][l], Mark: [Tab]",
    "Open: [SPACE], Quit: [ESC]",
]


class State(Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"
    QUIT = "quit"


class Game:
    def __init__(self, field: Minefield, on_reveal=None):
        self.field = field
        self.on_reveal = on_reveal
        self.cursor_x = 0
        self.cursor_y = 0
        self.state = State.PLAYING

    def move(self, dx, dy):
        last = self.field.size - 1
        self.cursor_x = max(0, min(last, self.cursor_x + dx))
        self.cursor_y = max(0, min(last, self.cursor_y + dy))

    def handle(self, key):
        if self.state is not State.PLAYING:
            return self.state

        x, y = self.cursor_x, self.cursor_y
        if key is Key.ESCAPE:
            self.state = State.QUIT
        elif key in MOVES:
            self.move(*MOVES[key])
        elif key is Key.MARK:
            self.field.cycle_mark(x, y)
            if self.field.check_win():
                self.state = State.WON
        elif key is Key.OPEN:
            if not self.field.open(x, y, self.on_reveal):
                self.state = State.LOST
            elif self.field.check_win():
                self.state = State.WON
        return self.state


def draw_field(screen, g: Game, show_cursor=True):
    size = g.field.size
    with screen.batch() as surface:
        for x in range(size + 2):
            surface.set_cell(ORIGIN_X + x * 2, ORIGIN_Y, "#")
            surface.set_cell(ORIGIN_X + x * 2, ORIGIN_Y + size + 1, "#")
        for y in range(size):
            surface.set_cell(ORIGIN_X, ORIGIN_Y + y + 1, "#")
            surface.set_cell(ORIGIN_X + size * 2 + 2, ORIGIN_Y + y + 1, "#")
            for x in range(size):
                value = g.field.cell(x, y)
                fg, bg = NUMBER_COLORS.get(value, Color.DEFAULT), Color.DEFAULT
                if show_cursor and x == g.cursor_x and y == g.cursor_y:
                    fg, bg = Color.WHITE, Color.MAGENTA
                surface.set_cell(ORIGIN_X + x * 2 + 2, ORIGIN_Y + y + 1, GLYPHS[value], fg, bg)


def finish(screen, g: Game, message):
    draw_field(screen, g, show_cursor=False)
    screen.draw_lines(0, g.field.size + 5, [message])
    screen.poll_key()


def play(surface, size, level, rng=None, tick=1.0):
    screen = Screen(surface)
    field = Minefield.create(size, level, rng)
    g = Game(field, on_reveal=lambda: draw_field(screen, g, show_cursor=False))
    logger.info("new game: size=%d level=%d mines=%d", size, level, field.mine_count)

    clock = Clock(screen, 0, 0, interval=tick)
    clock.start()
    screen.draw_lines(0, size + 3, HELP)

    try:
        while g.state is State.PLAYING:
            try:
                draw_field(screen, g, show_cursor=True)
                g.handle(screen.poll_key())
            except KeyboardInterrupt:
                g.state = State.QUIT
    finally:
        clock.stop()

    logger.info("game over: %s after %dsec", g.state.value, clock.elapsed)
    if g.state is State.WON:
        finish(screen, g, "Congratulations! (Hit any key)")
    elif g.state is State.LOST:
        finish(screen, g, "Bomb! (Hit any key)")
    return g.state


def positive_int(value):
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return n


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Terminal Minesweeper")
    p.add_argument("-s", "--size", type=positive_int, default=10, help="board size (default: 10)")
    p.add_argument("-l", "--level", type=int, default=2, help="game level, 1-3 (default: 2)")
    p.add_argument("--seed", type=int, default=None, help="random seed for the mine layout")
    p.add_argument("--log-file", default=None, help="write debug logs to this file")
    return p.parse_args(argv)


def configure_logging(path):
    if path:
        logging.basicConfig(
            filename=path,
            level=logging.DEBUG,
            format="%(asctime)s %(threadName)s %(name)s %(levelname)s %(message)s",
        )
    else:
        # the terminal belongs to curses
        logging.basicConfig(handlers=[logging.NullHandler()])


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_file)
    os.environ.setdefault("ESCDELAY", "25")
    rng = random.Random(args.seed)
    try:
        curses.wrapper(lambda stdscr: play(CursesSurface(stdscr), args.size, args.level, rng))
    except curses.error as exc:
        logger.error("terminal failure: %s", exc)
        sys.exit(f"mines: terminal failure: {exc}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
