"""
Input handling for Quecto text editor.

Decodes curses getch() codes into KeyEvents and applies them to the editor context.
Raw bytes arrive one per keystroke, so a multi-byte UTF-8 character is inserted as a
sequence of BYTE events.
"""
from __future__ import annotations

import curses
import enum
from dataclasses import dataclass

from quecto import commands

def ctrl(ch: str) -> int:
    return ord(ch) & 0x1f

CTRL_Q = ctrl('q')
CTRL_S = ctrl('s')
CTRL_X = ctrl('x')
CTRL_H = ctrl('h')
TAB = 9
ESC = 27

class Key(enum.Enum):
    BYTE = "byte"
    CTRL = "ctrl"
    ENTER = "enter"
    BACKSPACE = "backspace"
    DELETE = "delete"
    ESCAPE = "escape"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    RESIZE = "resize"
    UNKNOWN = "unknown"

@dataclass(frozen=True)
class KeyEvent:
    key: Key
    byte: int | None = None

_NAMED_KEYS = {
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    curses.KEY_HOME: Key.HOME,
    curses.KEY_END: Key.END,
    curses.KEY_PPAGE: Key.PAGE_UP,
    curses.KEY_NPAGE: Key.PAGE_DOWN,
    curses.KEY_DC: Key.DELETE,
    curses.KEY_BACKSPACE: Key.BACKSPACE,
    curses.KEY_ENTER: Key.ENTER,
    curses.KEY_RESIZE: Key.RESIZE,
    10: Key.ENTER,
    13: Key.ENTER,
    127: Key.BACKSPACE,
    ESC: Key.ESCAPE,
}

def decode_key(code: int) -> KeyEvent | None:
    """Turn a getch() code into a KeyEvent; -1 (no key before the timeout) gives None."""
    if code == -1:
        return None
    if code in _NAMED_KEYS:
        return KeyEvent(_NAMED_KEYS[code])
    if 0 <= code < 256:
        if code < 0x20 and code != TAB:
            return KeyEvent(Key.CTRL, code)
        return KeyEvent(Key.BYTE, code)
    return KeyEvent(Key.UNKNOWN)

def handle_quit(context):
    """Ctrl-Q: quit, asking for a second press while there are unsaved changes."""
    if context.buffer.dirty and not context.quit_armed:
        context.quit_armed = True
        context.set_status("Unsaved changes! Press Ctrl+Q again.")
        context.log_command("^Q: unsaved changes, waiting for confirmation")
        return
    context.log_command("^Q: quit")
    context.graceful_exit()

def handle_command_prompt(context):
    """Ctrl-X: read a command on the bottom line and run it."""
    cmd = context.ui.prompt_input(context, ">")
    if cmd:
        commands.process_command(context, cmd)

def handle_key(context, event: KeyEvent | None):
    """Apply one key event to the buffer and cursor of `context`."""
    if event is None:
        return
    buf = context.buffer
    cursor = context.cursor

    if event.key is Key.CTRL and event.byte == CTRL_Q:
        handle_quit(context)
        return
    context.quit_armed = False

    if event.key is Key.CTRL:
        if event.byte == CTRL_S:
            context.save_buffer()
        elif event.byte == CTRL_X:
            handle_command_prompt(context)
        elif event.byte == CTRL_H:
            buf.delete_backward(cursor)
        # Any other control byte is dropped
    elif event.key is Key.BYTE:
        buf.insert_char(cursor, event.byte)
    elif event.key is Key.ENTER:
        buf.insert_newline(cursor)
    elif event.key is Key.BACKSPACE:
        buf.delete_backward(cursor)
    elif event.key is Key.DELETE:
        buf.delete_forward(cursor)
    elif event.key is Key.UP:
        buf.move_up(cursor)
    elif event.key is Key.DOWN:
        buf.move_down(cursor)
    elif event.key is Key.LEFT:
        buf.move_left(cursor)
    elif event.key is Key.RIGHT:
        buf.move_right(cursor)
    elif event.key is Key.HOME:
        buf.move_home(cursor)
    elif event.key is Key.END:
        buf.move_end(cursor)
    elif event.key is Key.PAGE_UP:
        buf.page(cursor, context.viewport.screen_rows, forward=False)
    elif event.key is Key.PAGE_DOWN:
        buf.page(cursor, context.viewport.screen_rows, forward=True)
    elif event.key is Key.RESIZE:
        context.resize()

    buf.clamp_cursor(cursor)
