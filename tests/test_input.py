import curses

import pytest

from quecto.buffer import Cursor
from quecto.ui.input import (
    CTRL_Q, CTRL_S, CTRL_X, Key, KeyEvent, decode_key, handle_key,
)


class FakePrompt:
    """Stands in for the screen module: answers prompts from a list."""
    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def prompt_input(self, context, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else None


def press(context, *codes):
    for code in codes:
        handle_key(context, decode_key(code))


def type_text(context, text):
    press(context, *text.encode("utf-8"))


@pytest.mark.parametrize("code, event", [
    (-1, None),
    (ord("a"), KeyEvent(Key.BYTE, ord("a"))),
    (9, KeyEvent(Key.BYTE, 9)),
    (0xE6, KeyEvent(Key.BYTE, 0xE6)),
    (CTRL_S, KeyEvent(Key.CTRL, CTRL_S)),
    (8, KeyEvent(Key.CTRL, 8)),
    (10, KeyEvent(Key.ENTER)),
    (13, KeyEvent(Key.ENTER)),
    (127, KeyEvent(Key.BACKSPACE)),
    (27, KeyEvent(Key.ESCAPE)),
    (curses.KEY_UP, KeyEvent(Key.UP)),
    (curses.KEY_DC, KeyEvent(Key.DELETE)),
    (curses.KEY_NPAGE, KeyEvent(Key.PAGE_DOWN)),
    (curses.KEY_F5, KeyEvent(Key.UNKNOWN)),
])
def test_decode_key(code, event):
    assert decode_key(code) == event


def test_typing_multibyte_text_one_byte_at_a_time(context):
    type_text(context, "añ日")
    assert context.buffer.lines() == ["añ日".encode("utf-8")]
    assert context.cursor == Cursor(0, 6)
    assert context.buffer.dirty


def test_enter_backspace_and_delete(context):
    type_text(context, "abc")
    press(context, curses.KEY_LEFT, 13)
    assert context.buffer.lines() == [b"ab", b"c"]
    press(context, 127)
    assert context.buffer.lines() == [b"abc"]
    assert context.cursor == Cursor(0, 2)
    press(context, curses.KEY_DC)
    assert context.buffer.lines() == [b"ab"]
    press(context, 8)
    assert context.buffer.lines() == [b"a"]


def test_control_bytes_and_escape_are_not_inserted(context):
    type_text(context, "a")
    press(context, 27, 1, 2, 0x1f)
    assert context.buffer.lines() == [b"a"]
    press(context, 9)
    assert context.buffer.lines() == [b"a\t"]


def test_navigation_keys(context, make_buffer):
    context.buffer = make_buffer("日本", "x")
    press(context, curses.KEY_RIGHT)
    assert context.cursor == Cursor(0, 3)
    press(context, curses.KEY_END)
    assert context.cursor == Cursor(0, 6)
    press(context, curses.KEY_RIGHT)
    assert context.cursor == Cursor(1, 0)
    press(context, curses.KEY_UP, curses.KEY_END, curses.KEY_LEFT)
    assert context.cursor == Cursor(0, 3)
    press(context, curses.KEY_HOME, curses.KEY_DOWN)
    assert context.cursor == Cursor(1, 0)


def test_page_keys_move_a_screenful(context, make_buffer):
    context.buffer = make_buffer(*[str(i) for i in range(100)])
    press(context, curses.KEY_NPAGE)
    assert context.cursor.row == context.viewport.screen_rows
    press(context, curses.KEY_PPAGE)
    assert context.cursor.row == 0


def test_ctrl_q_quits_clean_buffer(context):
    press(context, CTRL_Q)
    assert context.exit_flag


def test_ctrl_q_needs_second_press_when_dirty(context):
    type_text(context, "x")
    press(context, CTRL_Q)
    assert not context.exit_flag
    assert context.status_message == "Unsaved changes! Press Ctrl+Q again."
    assert context.buffer.dirty
    press(context, CTRL_Q)
    assert context.exit_flag


def test_other_key_disarms_pending_quit(context):
    type_text(context, "x")
    press(context, CTRL_Q, curses.KEY_LEFT, CTRL_Q)
    assert not context.exit_flag


def test_poll_timeout_keeps_pending_quit(context):
    type_text(context, "x")
    press(context, CTRL_Q, -1, CTRL_Q)
    assert context.exit_flag


def test_ctrl_s_saves(context, tmp_path):
    context.buffer.filename = str(tmp_path / "out.txt")
    type_text(context, "hi")
    press(context, CTRL_S)
    assert (tmp_path / "out.txt").read_bytes() == b"hi\n"
    assert not context.buffer.dirty
    assert context.status_message.startswith("Saved to ")


def test_ctrl_x_runs_prompted_command(context, make_buffer):
    context.buffer = make_buffer("aaa", "xaay")
    context.ui = FakePrompt("r/a+/b/g")
    press(context, CTRL_X)
    assert context.ui.prompts == [">"]
    assert context.buffer.lines() == [b"b", b"xby"]


def test_ctrl_x_cancelled_prompt_does_nothing(context, make_buffer):
    context.buffer = make_buffer("aaa")
    context.ui = FakePrompt()
    press(context, CTRL_X)
    assert context.buffer.lines() == [b"aaa"]
    assert not context.exit_flag
