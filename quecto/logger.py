"""
Logger module for the Quecto text editor.

Timestamped append-only debug log, plus the clipped curses write used by the
screen module.
"""
import curses
import datetime

# Log file path, replaced at startup by the "log_file" config key
LOG_FILE_PATH = "quecto.log"

def set_log_file(path: str) -> None:
    """Redirect every later log() call to `path`."""
    global LOG_FILE_PATH
    LOG_FILE_PATH = path

def log(message: str) -> None:
    """Append a timestamped message to the log file."""
    try:
        with open(LOG_FILE_PATH, 'a', encoding='utf-8') as f:
            timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            f.write(f"[{timestamp}] {message}\n")
    except OSError:
        # an unwritable log file must not take the editor down
        pass

def log_error(action: str, exc: BaseException) -> None:
    """Log a failed action together with the exception type and text."""
    log(f"{action} failed: {type(exc).__name__}: {exc}")

def safe_addstr(window, y: int, x: int, text: str, attr: int = 0) -> None:
    """
    Add a string to the curses window, clipped to the window width.

    curses raises after writing the bottom-right cell because the cursor cannot
    advance past it; that case is expected and not logged. Any other curses.error
    (e.g., writing off-screen) is logged.
    """
    height, width = window.getmaxyx()
    if y < 0 or y >= height or x < 0 or x >= width:
        log(f"addstr outside window at ({y},{x}): '{text}'")
        return
    text = text[:width - x]
    try:
        window.addstr(y, x, text, attr)
    except curses.error:
        if y == height - 1 and x + len(text) >= width:
            return
        log(f"curses.error in addstr at ({y},{x}): '{text}'")
