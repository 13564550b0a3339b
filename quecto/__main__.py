"""
Main entry point and editor context for the Quecto text editor.
"""
from __future__ import annotations

import curses
import sys
import time

from quecto import buffer, logger
from quecto.config import EditorConfig, load_config
from quecto.layout import RenderFrame, Viewport, ViewportLayout
from quecto.ui import input as ui_input
from quecto.ui import screen as ui_screen

# getch() timeout in milliseconds; lets expired status messages disappear
POLL_TIMEOUT_MS = 100
MIN_ROWS = 2

class EditorContext:
    """
    Holds the state of the editor: the buffer, the cursor, the viewport and the
    status message. Every key handler and command works through this object.
    """
    def __init__(self, stdscr=None, size=None, config: EditorConfig = None):
        self.stdscr = stdscr
        self.config = config or EditorConfig()
        if size is None:
            size = stdscr.getmaxyx()
        self.height, self.width = size

        self.buffer = buffer.TextBuffer()
        self.cursor = buffer.Cursor()
        # The last screen line holds the status bar or the message
        self.viewport = Viewport(self.height - 1, self.width)
        self.layout = ViewportLayout(self.config.layout, self.config.tab_stop)

        self.status_message = ""
        self.status_time = 0.0
        self.quit_armed = False

        # "ui" interface (screen drawing and the command prompt)
        self.ui = ui_screen

        # Running flag
        self.exit_flag = False

    def open_file(self, filename: str):
        """Load `filename` into the buffer; a missing file starts an empty buffer."""
        try:
            self.buffer = buffer.TextBuffer.from_file(filename)
        except OSError as e:
            logger.log_error(f"open {filename}", e)
            self.set_status(f"error opening file: {e}")
            # Keep the name so a later save can still create or fix the file
            self.buffer = buffer.TextBuffer(filename)
            return
        self.cursor = buffer.Cursor()
        self.viewport.row_offset = self.viewport.col_offset = 0
        self.log_command(f"opened {filename} ({self.buffer.numrows} rows)")

    def set_status(self, message: str):
        self.status_message = message
        self.status_time = time.time()

    def current_message(self) -> str | None:
        """The status message, until it is older than the configured timeout."""
        if not self.status_message:
            return None
        if time.time() - self.status_time > self.config.message_timeout:
            return None
        return self.status_message

    def save_buffer(self) -> bool:
        """Write the buffer to its file and report the outcome on the status line."""
        if not self.buffer.filename:
            self.set_status("Error: no filename")
            return False
        if self.buffer.save_to_file():
            self.set_status(f"Saved to {self.buffer.filename}")
            return True
        self.set_status("Error: I/O error")
        return False

    def log_command(self, msg: str):
        """Log a command or action to the debug log file."""
        logger.log(msg)

    def graceful_exit(self):
        """
        Stop the main loop. curses.wrapper(main) restores the terminal afterwards.
        """
        logger.log("Editor exited.")
        self.exit_flag = True

    def resize(self):
        """Re-read the terminal size after a KEY_RESIZE."""
        self.height, self.width = self.stdscr.getmaxyx()
        self.viewport.screen_rows = max(1, self.height - 1)
        self.viewport.screen_cols = self.width

    def render(self) -> RenderFrame:
        return self.layout.render(self.buffer, self.cursor, self.viewport,
                                  self.current_message())

def setup_terminal(stdscr):
    """Raw keyboard input so Ctrl-S, Ctrl-Q and Ctrl-X reach the editor."""
    curses.raw()
    curses.nonl()
    stdscr.keypad(True)
    stdscr.timeout(POLL_TIMEOUT_MS)
    if hasattr(curses, "set_escdelay"):
        curses.set_escdelay(25)

def main(stdscr, filename: str = None):
    config = load_config()
    logger.set_log_file(config.log_file)

    height, width = stdscr.getmaxyx()
    if height < MIN_ROWS or width < 1:
        logger.log(f"fatal: unusable terminal size {height}x{width}")
        raise SystemExit(f"quecto: cannot determine terminal size ({height}x{width})")

    setup_terminal(stdscr)
    context = EditorContext(stdscr, config=config)
    if filename:
        context.open_file(filename)

    # Main loop
    while not context.exit_flag:
        context.ui.display(context)
        event = ui_input.decode_key(stdscr.getch())
        ui_input.handle_key(context, event)

def run():
    """
    Simple convenience function to start the curses wrapper with main().
    """
    filename = sys.argv[1] if len(sys.argv) > 1 else None
    curses.wrapper(main, filename)

if __name__ == "__main__":
    run()
