"""
Coordinate mapping between byte offsets and render columns.

A row is a run of raw bytes; on screen every tab expands to the next tab stop and
every multi-byte UTF-8 sequence occupies one or two cells depending on its length
(2-byte sequences are narrow, 3- and 4-byte sequences are treated as wide). This
module is the single place that knows those widths: cursor placement, horizontal
scrolling, soft wrapping and row rendering all go through it.
"""
from typing import Iterator, NamedTuple

from wcwidth import wcwidth

TAB_STOP = 4
REPLACEMENT_CHAR = "�"


class Glyph(NamedTuple):
    start: int  # first byte
    end: int    # one past the last byte
    rx: int     # first render column
    width: int  # render columns occupied
    text: str   # what to draw, `width` cells wide
    control: bool = False


def classify(byte: int) -> tuple:
    """Return (byte count, render width) for the glyph starting with `byte`."""
    if (byte & 0xE0) == 0xC0:
        return 2, 1
    if (byte & 0xF0) == 0xE0:
        return 3, 2
    if (byte & 0xF8) == 0xF0:
        return 4, 2
    return 1, 1


def tab_width(rx: int, tab_stop: int = TAB_STOP) -> int:
    return tab_stop - (rx % tab_stop)


def cx_to_rx(chars, cx: int, tab_stop: int = TAB_STOP) -> int:
    """Render column of byte offset `cx` within `chars`."""
    rx = 0
    j = 0
    size = len(chars)
    while j < cx:
        c = chars[j]
        if c == 0x09:
            rx += tab_width(rx, tab_stop)
            j += 1
        else:
            count, width = classify(c)
            rx += width
            j += count
        # Malformed UTF-8 can claim more bytes than the row holds
        if j > size:
            break
    return rx


def rx_to_cx(chars, rx: int, tab_stop: int = TAB_STOP) -> int:
    """
    Byte offset of the glyph covering render column `rx`.

    A column inside a tab or a wide glyph maps to that glyph's first byte; a column
    past the end of the row maps to the row length.
    """
    cur_rx = 0
    j = 0
    size = len(chars)
    while j < size:
        c = chars[j]
        if c == 0x09:
            count, width = 1, tab_width(cur_rx, tab_stop)
        else:
            count, width = classify(c)
        if cur_rx + width > rx:
            return j
        cur_rx += width
        j += count
    return size


def render_width(chars, tab_stop: int = TAB_STOP) -> int:
    """Total render columns of a whole row."""
    return cx_to_rx(chars, len(chars), tab_stop)


def _control_symbol(byte: int) -> str:
    return chr(0x40 + byte) if byte <= 26 else "?"


def glyph_cells(chars, tab_stop: int = TAB_STOP) -> Iterator[Glyph]:
    """Walk a row glyph by glyph, yielding what each one draws and where."""
    rx = 0
    j = 0
    size = len(chars)
    while j < size:
        c = chars[j]
        if c == 0x09:
            width = tab_width(rx, tab_stop)
            yield Glyph(j, j + 1, rx, width, " " * width)
            j += 1
        elif c < 0x20 or c == 0x7F:
            yield Glyph(j, j + 1, rx, 1, _control_symbol(c), control=True)
            j += 1
        else:
            count, width = classify(c)
            end = min(j + count, size)
            if count == 1:
                text = chr(c) if c < 0x80 else REPLACEMENT_CHAR
            else:
                text = bytes(chars[j:end]).decode("utf-8", errors="replace")
                if len(text) != 1:
                    text = REPLACEMENT_CHAR
            # Fill the cells the width heuristic reserves beyond what the terminal draws
            drawn = wcwidth(text)
            if drawn < 0:
                text, drawn = REPLACEMENT_CHAR, 1
            if drawn < width:
                text += " " * (width - drawn)
            yield Glyph(j, end, rx, width, text)
            j += count
        rx += width


def clip_to_width(text: str, width: int) -> str:
    """Trim a string to at most `width` terminal cells."""
    used = 0
    for i, ch in enumerate(text):
        w = wcwidth(ch)
        used += w if w > 0 else 0
        if used > width:
            return text[:i]
    return text
