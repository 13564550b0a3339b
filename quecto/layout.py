"""
Viewport layout for the Quecto text editor.

Turns the buffer, the cursor and the screen size into a RenderFrame: the text lines
to draw, the status line and the on-screen cursor cell. Two layout modes are
supported by the same ViewportLayout:

  SCROLL  rows keep their full width; row_offset and col_offset follow the cursor
          so it is always inside the visible window, moving as little as possible.
  WRAP    no horizontal scrolling; rows break between glyphs onto lines of W
          cells, W being the text width, so an ASCII row of width L takes
          max(1, ceil(L / W)) lines and a wide glyph that would straddle the
          edge moves to the next line. col_offset counts the leading
          wrapped lines of row row_offset hidden above the screen, which is only
          non-zero when a single row is taller than the whole text area.

Every text line starts with one gutter column; lines past the end of the buffer
show a filler glyph instead.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field

from wcwidth import wcswidth

from quecto.coords import TAB_STOP, clip_to_width, cx_to_rx, glyph_cells

GUTTER = 1
FILLER = "~"
STATUS_NAME_WIDTH = 20


class LayoutMode(enum.Enum):
    SCROLL = "scroll"
    WRAP = "wrap"


@dataclass
class Viewport:
    screen_rows: int      # text lines, status line excluded
    screen_cols: int
    row_offset: int = 0
    col_offset: int = 0

    @property
    def text_cols(self) -> int:
        return max(1, self.screen_cols - GUTTER)


@dataclass
class ScreenLine:
    text: str
    reverse: list[int] = field(default_factory=list)  # screen columns drawn in reverse video


@dataclass
class RenderFrame:
    lines: list[ScreenLine]
    status: str
    message: str | None
    cursor: tuple[int, int]  # (screen row, screen column)

    @property
    def bottom_line(self) -> str:
        """The transient message when there is one, the status line otherwise."""
        return self.message if self.message else self.status


def _fragment(glyphs, start: int, width: int) -> ScreenLine:
    """Cut render columns [start, start + width) out of a row, behind the gutter."""
    end = start + width
    parts = [" " * GUTTER]
    reverse = []
    for g in glyphs:
        g_end = g.rx + g.width
        if g_end <= start:
            continue
        if g.rx >= end:
            break
        if g.rx < start or g_end > end:
            # A glyph cut by either edge keeps its visible cells blank
            parts.append(" " * (min(g_end, end) - max(g.rx, start)))
            continue
        if g.control:
            reverse.append(GUTTER + g.rx - start)
        parts.append(g.text)
    return ScreenLine("".join(parts), reverse)


def status_line(buffer, cursor, width: int) -> str:
    """Filename and dirty marker on the left, "row,col" flush right."""
    name = buffer.filename or "[New]"
    left = clip_to_width(name, STATUS_NAME_WIDTH) + ("*" if buffer.dirty else "")
    right = f"{cursor.row + 1},{cursor.col + 1}"
    left_width = wcswidth(left)
    if left_width < 0:
        left_width = len(left)
    if left_width >= width:
        return clip_to_width(left, width)
    gap = width - left_width - len(right)
    if gap < 0:
        return left + " " * (width - left_width)
    return left + " " * gap + right


class ViewportLayout:
    """Scroll-to-cursor and frame building for either LayoutMode."""
    def __init__(self, mode: LayoutMode = LayoutMode.SCROLL, tab_stop: int = TAB_STOP):
        self.mode = mode
        self.tab_stop = tab_stop

    def cursor_rx(self, buffer, cursor) -> int:
        if cursor.row < buffer.numrows:
            return cx_to_rx(buffer.rows[cursor.row].chars, cursor.col, self.tab_stop)
        return 0

    def wrap_row(self, buffer, index: int, wrap_width: int):
        """
        Lay row `index` out on visual lines of `wrap_width` cells, breaking only
        between glyphs. Returns the (glyph, line, column) placements and the
        (line, column) just past the last glyph.
        """
        placed = []
        line = col = 0
        if index < buffer.numrows:
            for g in glyph_cells(buffer.rows[index].chars, self.tab_stop):
                if col and col + g.width > wrap_width:
                    line += 1
                    col = 0
                placed.append((g, line, col))
                col += g.width
        return placed, (line, col)

    def wrapped_lines(self, buffer, index: int, wrap_width: int, cursor=None) -> int:
        """
        Number of screen lines row `index` takes in WRAP mode. A cursor parked after
        a row that exactly fills its last line gets one more, empty, line.
        """
        _, (line, _) = self.wrap_row(buffer, index, wrap_width)
        if cursor is not None and cursor.row == index:
            return max(line, self.cursor_wrap_position(buffer, cursor, wrap_width)[0]) + 1
        return line + 1

    def cursor_wrap_position(self, buffer, cursor, wrap_width: int) -> tuple[int, int]:
        """(visual line, column) of the cursor inside its wrapped row."""
        placed, (line, col) = self.wrap_row(buffer, cursor.row, wrap_width)
        rx = self.cursor_rx(buffer, cursor)
        for g, g_line, g_col in placed:
            if g.rx >= rx:
                return g_line, g_col
        if placed and col >= wrap_width:
            return line + 1, 0
        return line, col

    ##########################################
    # SCROLL TO CURSOR
    ##########################################
    def scroll(self, buffer, cursor, viewport: Viewport) -> tuple[int, int]:
        """
        Adjust the viewport offsets so the cursor is visible and return the cursor's
        screen cell (row, column), gutter included.
        """
        if self.mode is LayoutMode.WRAP:
            return self._scroll_wrapped(buffer, cursor, viewport)
        return self._scroll_plain(buffer, cursor, viewport)

    def _scroll_plain(self, buffer, cursor, vp: Viewport) -> tuple[int, int]:
        rx = self.cursor_rx(buffer, cursor)
        if cursor.row < vp.row_offset:
            vp.row_offset = cursor.row
        if cursor.row >= vp.row_offset + vp.screen_rows:
            vp.row_offset = cursor.row - vp.screen_rows + 1
        if rx < vp.col_offset:
            vp.col_offset = rx
        if rx >= vp.col_offset + vp.text_cols:
            vp.col_offset = rx - vp.text_cols + 1
        return cursor.row - vp.row_offset, rx - vp.col_offset + GUTTER

    def _scroll_wrapped(self, buffer, cursor, vp: Viewport) -> tuple[int, int]:
        width = vp.text_cols
        cursor_line, cursor_col = self.cursor_wrap_position(buffer, cursor, width)

        if cursor.row < vp.row_offset:
            vp.row_offset = cursor.row
            vp.col_offset = 0
        # Rows may have shrunk since the last frame
        vp.col_offset = min(vp.col_offset,
                            self.wrapped_lines(buffer, vp.row_offset, width, cursor) - 1)
        if cursor.row == vp.row_offset and cursor_line < vp.col_offset:
            vp.col_offset = cursor_line

        visual_row = cursor_line - vp.col_offset
        for index in range(vp.row_offset, cursor.row):
            visual_row += self.wrapped_lines(buffer, index, width)

        while visual_row >= vp.screen_rows:
            if vp.row_offset < cursor.row:
                visual_row -= self.wrapped_lines(buffer, vp.row_offset, width, cursor) - vp.col_offset
                vp.row_offset += 1
                vp.col_offset = 0
            else:
                vp.col_offset += visual_row - vp.screen_rows + 1
                visual_row = vp.screen_rows - 1
        return visual_row, cursor_col + GUTTER

    ##########################################
    # FRAME
    ##########################################
    def render(self, buffer, cursor, viewport: Viewport, message: str | None = None) -> RenderFrame:
        cursor_cell = self.scroll(buffer, cursor, viewport)
        if self.mode is LayoutMode.WRAP:
            lines = self._wrapped_lines(buffer, cursor, viewport)
        else:
            lines = self._plain_lines(buffer, viewport)
        return RenderFrame(
            lines=lines,
            status=status_line(buffer, cursor, viewport.screen_cols),
            message=message or None,
            cursor=cursor_cell,
        )

    def _plain_lines(self, buffer, vp: Viewport) -> list[ScreenLine]:
        lines = []
        for y in range(vp.screen_rows):
            filerow = vp.row_offset + y
            if filerow < buffer.numrows:
                glyphs = glyph_cells(buffer.rows[filerow].chars, self.tab_stop)
                lines.append(_fragment(glyphs, vp.col_offset, vp.text_cols))
            else:
                lines.append(ScreenLine(FILLER))
        return lines

    def _wrapped_lines(self, buffer, cursor, vp: Viewport) -> list[ScreenLine]:
        width = vp.text_cols
        lines = []
        filerow = vp.row_offset
        skip = vp.col_offset
        while len(lines) < vp.screen_rows:
            if filerow >= buffer.numrows:
                lines.append(ScreenLine(FILLER))
                continue
            placed, _ = self.wrap_row(buffer, filerow, width)
            visual = [ScreenLine(" " * GUTTER)
                      for _ in range(self.wrapped_lines(buffer, filerow, width, cursor))]
            for g, line, col in placed:
                screen_line = visual[line]
                if col + g.width > width:
                    # Only a glyph wider than the whole line gets here
                    screen_line.text += " " * (width - col)
                    continue
                if g.control:
                    screen_line.reverse.append(GUTTER + col)
                screen_line.text += g.text
            for screen_line in visual[skip:]:
                if len(lines) >= vp.screen_rows:
                    break
                lines.append(screen_line)
            skip = 0
            filerow += 1
        return lines
