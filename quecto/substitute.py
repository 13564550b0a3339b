"""
Regex find/replace over a TextBuffer.

Patterns use extended syntax (unescaped + ? | ( ) { }) and are matched against the
raw row bytes. The replacement is literal: backslashes and group references in it
are inserted as typed.
"""
import re

from quecto.buffer import is_continuation


class InvalidPatternError(ValueError):
    """The pattern given to regex_replace does not compile."""


def compile_pattern(pattern) -> "re.Pattern":
    if isinstance(pattern, str):
        pattern = pattern.encode("utf-8", errors="surrogateescape")
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(f"invalid regex {pattern!r}: {e}") from e


def _next_char(chars, offset: int) -> int:
    """Offset just past the character starting at `offset`."""
    offset += 1
    while offset < len(chars) and is_continuation(chars[offset]):
        offset += 1
    return offset


def regex_replace(buffer, pattern, replacement, global_: bool = False) -> int:
    """
    Replace matches of `pattern` with `replacement` row by row and return the count.

    Without `global_` only the first match in the whole buffer is replaced. Searching
    resumes right after each inserted replacement; after an empty match it also
    skips one character of the original text so the scan always ends.
    """
    regex = compile_pattern(pattern)
    if isinstance(replacement, str):
        replacement = replacement.encode("utf-8", errors="surrogateescape")

    count = 0
    for row in buffer.rows:
        chars = row.chars
        offset = 0
        while offset <= len(chars):
            # pos, not a slice: `^` matches only at the row start, never at a resumed offset
            match = regex.search(chars, offset)
            if match is None:
                break
            start, end = match.span()
            chars[start:end] = replacement
            offset = start + len(replacement)
            if start == end:
                offset = _next_char(chars, offset)
            count += 1
            if not global_:
                break
        if not global_ and count > 0:
            break

    if count:
        buffer.dirty = True
    return count
