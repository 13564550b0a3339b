"""
Buffer module for Quecto text editor.

Defines the Row, Cursor and TextBuffer classes that hold the file content as raw bytes
and implement every structural edit (insert, delete, split, merge) and file load/save.
Rows are byte-oriented: UTF-8 is never validated, but deletes and cursor motion step
over continuation bytes so one keystroke acts on one whole character.
"""
from dataclasses import dataclass

from quecto import logger


def is_continuation(byte: int) -> bool:
    """True for a UTF-8 continuation byte (0b10xxxxxx)."""
    return (byte & 0xC0) == 0x80


class Row:
    """A single line of the buffer, stored without its line terminator."""
    def __init__(self, content: bytes = b""):
        self.chars = bytearray(content)

    def __len__(self):
        return len(self.chars)

    def __repr__(self):
        return f"Row({bytes(self.chars)!r})"

    def insert_byte(self, at: int, byte: int):
        if at < 0 or at > len(self.chars):
            at = len(self.chars)
        self.chars.insert(at, byte)

    def append(self, content: bytes):
        self.chars.extend(content)

    def delete_bytes(self, at: int, count: int):
        if at < 0 or at >= len(self.chars):
            return
        del self.chars[at:at + count]

    def truncate(self, size: int):
        del self.chars[size:]


@dataclass
class Cursor:
    """Editing position: row index and byte offset within that row."""
    row: int = 0
    col: int = 0


class TextBuffer:
    """Ordered sequence of Rows plus the dirty flag and the bound filename."""
    def __init__(self, filename: str = None, lines=None):
        self.filename = filename  # Path to file or None for new/unsaved
        self.rows = [Row(line) for line in lines] if lines else []
        self.dirty = False

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def lines(self) -> list:
        """Row contents as a list of bytes objects."""
        return [bytes(row.chars) for row in self.rows]

    def row_length(self, index: int) -> int:
        """Length of row `index`, 0 for the virtual row past the end."""
        if 0 <= index < len(self.rows):
            return len(self.rows[index])
        return 0

    ##########################################
    # ROW OPERATIONS
    ##########################################
    def insert_row(self, at: int, content: bytes = b""):
        """Insert a new row at `at` (clamped to [0, numrows])."""
        at = max(0, min(at, len(self.rows)))
        self.rows.insert(at, Row(content))
        self.dirty = True

    def delete_row(self, at: int):
        """Remove row `at`; out-of-range indices are ignored."""
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.dirty = True

    ##########################################
    # EDITOR OPERATIONS
    ##########################################
    def insert_char(self, cursor: Cursor, byte: int):
        """Insert one raw byte at the cursor and advance past it."""
        if cursor.row == len(self.rows):
            self.insert_row(len(self.rows))
        self.rows[cursor.row].insert_byte(cursor.col, byte)
        cursor.col += 1
        self.dirty = True

    def insert_newline(self, cursor: Cursor):
        """Split the current row at the cursor, or open a row above it at column 0."""
        if cursor.col == 0:
            self.insert_row(cursor.row)
        else:
            row = self.rows[cursor.row]
            self.insert_row(cursor.row + 1, bytes(row.chars[cursor.col:]))
            row.truncate(cursor.col)
        cursor.row += 1
        cursor.col = 0

    def delete_backward(self, cursor: Cursor):
        """
        Backspace. Removes the whole character before the cursor, or joins the current
        row onto the previous one when the cursor sits at column 0.
        """
        if cursor.row >= len(self.rows):
            return
        if cursor.col == 0 and cursor.row == 0:
            return
        if cursor.col > 0:
            chars = self.rows[cursor.row].chars
            count = 1
            # Walk back to the leading byte of the character
            while cursor.col - count > 0 and is_continuation(chars[cursor.col - count]):
                count += 1
            self.rows[cursor.row].delete_bytes(cursor.col - count, count)
            cursor.col -= count
            self.dirty = True
        else:
            previous = self.rows[cursor.row - 1]
            cursor.col = len(previous)
            previous.append(self.rows[cursor.row].chars)
            self.delete_row(cursor.row)
            cursor.row -= 1

    def delete_forward(self, cursor: Cursor):
        """
        Delete key. Removes the whole character under the cursor, or pulls the next row
        up onto the current one when the cursor sits at the end of the row.
        """
        if cursor.row >= len(self.rows):
            return
        row = self.rows[cursor.row]
        if cursor.col < len(row):
            count = 1
            while cursor.col + count < len(row) and is_continuation(row.chars[cursor.col + count]):
                count += 1
            row.delete_bytes(cursor.col, count)
            self.dirty = True
        elif cursor.row < len(self.rows) - 1:
            row.append(self.rows[cursor.row + 1].chars)
            self.delete_row(cursor.row + 1)

    ##########################################
    # CURSOR MOTION
    ##########################################
    def clamp_cursor(self, cursor: Cursor):
        """Pull the cursor back inside the buffer and onto a character boundary."""
        cursor.row = max(0, min(cursor.row, len(self.rows)))
        length = self.row_length(cursor.row)
        cursor.col = max(0, min(cursor.col, length))
        if cursor.row < len(self.rows):
            chars = self.rows[cursor.row].chars
            while 0 < cursor.col < length and is_continuation(chars[cursor.col]):
                cursor.col -= 1

    def move_left(self, cursor: Cursor):
        if cursor.col == 0 or cursor.row >= len(self.rows):
            return
        chars = self.rows[cursor.row].chars
        cursor.col -= 1
        while cursor.col > 0 and is_continuation(chars[cursor.col]):
            cursor.col -= 1

    def move_right(self, cursor: Cursor):
        """Step over one character; at the end of a row continue on the next row."""
        if cursor.row < len(self.rows) and cursor.col < len(self.rows[cursor.row]):
            chars = self.rows[cursor.row].chars
            cursor.col += 1
            while cursor.col < len(chars) and is_continuation(chars[cursor.col]):
                cursor.col += 1
        elif cursor.row < len(self.rows) - 1:
            cursor.row += 1
            cursor.col = 0

    def move_up(self, cursor: Cursor):
        if cursor.row > 0:
            cursor.row -= 1
            self.clamp_cursor(cursor)

    def move_down(self, cursor: Cursor):
        if cursor.row < len(self.rows) - 1:
            cursor.row += 1
            self.clamp_cursor(cursor)

    def move_home(self, cursor: Cursor):
        cursor.col = 0

    def move_end(self, cursor: Cursor):
        cursor.col = self.row_length(cursor.row)

    def page(self, cursor: Cursor, rows: int, forward: bool):
        """Move the cursor a screenful of rows up or down."""
        for _ in range(max(1, rows)):
            if forward:
                self.move_down(cursor)
            else:
                self.move_up(cursor)

    ##########################################
    # FILE I/O
    ##########################################
    def serialize(self) -> bytes:
        """Every row followed by a newline, in row order."""
        return b"".join(bytes(row.chars) + b"\n" for row in self.rows)

    def load(self, filename: str):
        """
        Replace the buffer content with the file at `filename`, one row per line.
        Both "\\n" and "\\r\\n" terminators are stripped. A missing file leaves an empty
        buffer bound to the name so it can be created on save.
        """
        self.filename = filename
        self.rows = []
        try:
            with open(filename, 'rb') as f:
                for line in f:
                    self.rows.append(Row(line.rstrip(b"\r\n")))
        except FileNotFoundError:
            logger.log(f"open: {filename} does not exist, starting empty")
        self.dirty = False

    @classmethod
    def from_file(cls, filename: str) -> "TextBuffer":
        buf = cls()
        buf.load(filename)
        return buf

    def save_to_file(self) -> bool:
        """
        Write the serialized buffer to self.filename, truncating it to the exact length.
        Returns True on success, False on error or if no filename is set.
        """
        if not self.filename:
            return False
        data = self.serialize()
        try:
            with open(self.filename, 'wb') as f:
                f.write(data)
                f.truncate(len(data))
        except OSError as e:
            logger.log_error(f"save {self.filename}", e)
            return False
        self.dirty = False
        logger.log(f"saved {len(data)} bytes to {self.filename}")
        return True
