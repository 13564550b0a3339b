"""
Command parsing and execution for Quecto text editor.

This module handles the line typed at the command prompt (Ctrl-X) and dispatches
to the appropriate actions on the editor context:

    q           quit, refused while there are unsaved changes
    q!          quit, discarding changes
    w           write the buffer to its file
    wq          write, then quit if the write succeeded
    N           jump to line N (1-based, clamped to the buffer)
    r/pat/rep/flags
                regex replace; flag 'g' replaces every match instead of the first

Anything else is ignored.
"""
from quecto import substitute

def split_substitute(command: str):
    """
    Split "r/pattern/replacement/flags" into (pattern, replacement, flags).

    "\\/" stands for a literal slash; every other backslash sequence is kept as typed.
    Returns None if the replacement or its closing delimiter is missing.
    """
    if not command.startswith("r/"):
        return None
    fields = []
    current = []
    i = 2
    while i < len(command):
        ch = command[i]
        if ch == "\\" and i + 1 < len(command) and command[i + 1] == "/":
            current.append("/")
            i += 2
            continue
        if ch == "/" and len(fields) < 2:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    if len(fields) < 2:
        return None
    pattern, replacement = fields
    return pattern, replacement, "".join(current)

def jump_to_line(context, number: int):
    """Move the cursor to 1-based line `number`, clamped to [1, numrows]."""
    buf = context.buffer
    if buf.numrows == 0:
        return
    number = max(1, min(number, buf.numrows))
    context.cursor.row = number - 1
    buf.clamp_cursor(context.cursor)

def run_substitute(context, pattern: str, replacement: str, flags: str):
    global_ = "g" in flags
    try:
        count = substitute.regex_replace(context.buffer, pattern, replacement, global_)
    except substitute.InvalidPatternError as e:
        context.log_command(str(e))
        context.set_status("Error: Invalid Regex")
        return
    context.buffer.clamp_cursor(context.cursor)
    context.log_command(f"r: {count} replaced ('{pattern}' -> '{replacement}', flags '{flags}')")
    context.set_status(f"Replaced {count} occurrences")

def process_command(context, command: str):
    """Parse and execute a command-line (Ctrl-X prompt) command string."""
    cmd = command.strip()
    if not cmd:
        return

    if cmd == "q":
        if context.buffer.dirty:
            context.log_command("q: refused, unsaved changes")
            context.set_status("Unsaved changes!")
            return
        context.log_command("q: quit")
        context.graceful_exit()
        return

    if cmd == "q!":
        context.log_command("q!: quit without saving")
        context.graceful_exit()
        return

    if cmd == "w":
        context.save_buffer()
        return

    if cmd == "wq":
        if context.save_buffer():
            context.log_command("wq: write+quit")
            context.graceful_exit()
        return

    if cmd.isascii() and cmd.isdigit():
        jump_to_line(context, int(cmd))
        context.log_command(f"goto: line {context.cursor.row + 1}")
        return

    if cmd.startswith("r/"):
        parts = split_substitute(cmd)
        if parts is None:
            context.log_command(f"r: malformed '{cmd}'")
            return
        run_substitute(context, *parts)
        return

    context.log_command(f"unknown command '{cmd}'")
