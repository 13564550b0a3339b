"""
quecto/ui/screen.py

Paints a RenderFrame onto a curses window and reads command lines on the bottom
screen line. Everything about what goes on screen is decided by quecto.layout;
this module only writes it out.
"""
from __future__ import annotations

import curses

from quecto import logger
from quecto.coords import clip_to_width

ENTER_KEYS = (curses.KEY_ENTER, 10, 13)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)


def reverse_cell(window, y: int, x: int) -> None:
    try:
        window.chgat(y, x, 1, curses.A_REVERSE)
    except curses.error:
        logger.log(f"curses.error in chgat at ({y},{x})")


def draw_frame(window, frame) -> None:
    """Write a RenderFrame: text lines, bottom line, then the cursor."""
    height, width = window.getmaxyx()
    window.erase()
    for y, line in enumerate(frame.lines):
        if y >= height - 1:
            break
        logger.safe_addstr(window, y, 0, clip_to_width(line.text, width))
        for x in line.reverse:
            if x < width:
                reverse_cell(window, y, x)
    bottom = min(len(frame.lines), height - 1)
    logger.safe_addstr(window, bottom, 0, clip_to_width(frame.bottom_line, width))
    try:
        window.move(*frame.cursor)
    except curses.error:
        logger.log(f"cursor outside window at {frame.cursor}")


def display(context) -> None:
    """Re-draw the entire screen from the current editor state."""
    draw_frame(context.stdscr, context.render())
    context.stdscr.refresh()


def prompt_input(context, prompt: str) -> str | None:
    """
    Read a line on the bottom screen line.
    Returns the entered string, or None if canceled with Escape.
    """
    stdscr = context.stdscr
    bottom = context.viewport.screen_rows
    typed = ""
    while True:
        try:
            stdscr.move(bottom, 0)
            stdscr.clrtoeol()
        except curses.error:
            logger.log(f"curses.error clearing prompt line {bottom}")
        line = clip_to_width(prompt + typed, context.width - 1)
        logger.safe_addstr(stdscr, bottom, 0, line)
        stdscr.refresh()

        key = stdscr.getch()
        if key == -1:
            continue
        if key in BACKSPACE_KEYS:
            typed = typed[:-1]
        elif key == 27:
            context.set_status("")
            return None
        elif key in ENTER_KEYS:
            if typed:
                context.set_status("")
                return typed
        elif 32 <= key < 127:
            typed += chr(key)
