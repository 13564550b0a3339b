"""Curses front end: key decoding, screen painting and the command prompt."""
