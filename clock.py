"""Elapsed-time status line, redrawn from its own thread."""

import curses
import logging
import threading

logger = logging.getLogger(__name__)


class Clock:
    def __init__(self, screen, x=0, y=0, interval=1.0):
        self.screen = screen
        self.x = x
        self.y = y
        self.interval = interval
        self.elapsed = 0
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="clock", daemon=True)

    def start(self):
        logger.info("clock started")
        self._thread.start()

    def stop(self):
        """Stop ticking and wait for the thread; safe to call more than once."""
        self._stop.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join()
        logger.info("clock stopped at %dsec", self.elapsed)

    @property
    def running(self):
        return self._thread.is_alive()

    def _run(self):
        while True:
            try:
                self.screen.draw_lines(self.x, self.y, [f"Time: {self.elapsed}sec"])
            except curses.error as exc:
                logger.error("clock cannot draw: %s", exc)
                return
            if self._stop.wait(self.interval):
                return
            self.elapsed += 1
