import curses

import pytest

from quecto import logger
from quecto.__main__ import EditorContext
from quecto.buffer import TextBuffer


@pytest.fixture(autouse=True)
def log_to_tmp(tmp_path, monkeypatch):
    # keep the debug log out of the working directory
    monkeypatch.setattr(logger, "LOG_FILE_PATH", str(tmp_path / "quecto.log"))


def _make_buffer(*lines, filename=None):
    return TextBuffer(filename, [line.encode("utf-8") if isinstance(line, str) else line
                                 for line in lines])


@pytest.fixture
def make_buffer():
    return _make_buffer


@pytest.fixture
def context():
    return EditorContext(size=(24, 80))


class FakeWindow:
    """Minimal curses window recording what is drawn."""
    def __init__(self, height=5, width=20, keys=()):
        self.height = height
        self.width = width
        self.cells = {}
        self.reversed = []
        self.cursor = None
        self.keys = list(keys)
        self.refreshed = 0

    def getmaxyx(self):
        return self.height, self.width

    def erase(self):
        self.cells.clear()

    def addstr(self, y, x, text, attr=0):
        if y == self.height - 1 and x + len(text) >= self.width:
            for i, ch in enumerate(text):
                self.cells[(y, x + i)] = ch
            raise curses.error("bottom-right corner")
        for i, ch in enumerate(text):
            self.cells[(y, x + i)] = ch

    def addch(self, y, x, ch, attr=0):
        self.cells[(y, x)] = ch

    def chgat(self, y, x, num, attr):
        self.reversed.append((y, x))

    def move(self, y, x):
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise curses.error("move")
        self.cursor = (y, x)

    def clrtoeol(self):
        y = self.cursor[0]
        for key in [k for k in self.cells if k[0] == y]:
            del self.cells[key]

    def refresh(self):
        self.refreshed += 1

    def getch(self):
        return self.keys.pop(0)

    def row(self, y):
        return "".join(self.cells.get((y, x), " ") for x in range(self.width)).rstrip()


@pytest.fixture
def fake_window():
    return FakeWindow
