"""grammar.py - one line in, one section header or key=value pair out.

every parser either succeeds with a value or fails with the offset of
the first character that broke the rule, counted from the start of the
raw line (leading whitespace included). the driver turns that offset
into a caret under the bad character.

    [ Section Name ]      ; name with single interior spaces
    key = some value      # unquoted, single interior spaces
    key = "any   spaces"  ; quoted

in the world: the proofreader. reads left to right, stops at the first
wrong letter, and tells you exactly where it is.
"""

from dataclasses import dataclass
from typing import Any, Callable

from inidb.config import MAX_STRING_LENGTH
from inidb.lex import (
    WHITESPACE,
    line_end,
    skip_ignored,
    is_blank_line,
    is_section_name_start,
    is_section_name_char,
    is_key_start,
    is_key_char,
    is_value_char,
)
from inidb.storage import Pair

__all__ = [
    "Parsed",
    "is_blank_line",
    "parse_section",
    "parse_key",
    "parse_value",
    "parse_pair",
]


@dataclass
class Parsed:
    """outcome of a line parser. offset is 0 on success."""
    ok: bool
    value: Any = None
    offset: int = 0


def _fail(offset: int) -> Parsed:
    return Parsed(ok=False, value=None, offset=offset)


def _at(line: str, pos: int, end: int) -> str:
    """character at pos, or '' past the end of the line."""
    return line[pos] if pos < end else ""


def _scan(line: str, pos: int, end: int, accept: Callable[[str], bool],
          limit: int, spaced: bool):
    """consume a token of accepted characters.

    with spaced=True a whitespace run inside the token is kept only if it
    is exactly one space; any other run followed by more token is an error
    at the first character after the run. a run followed by anything else
    ends the token.

    returns (text, pos, error_offset). error_offset is None on success.
    """
    out = []
    while True:
        c = _at(line, pos, end)
        if accept(c):
            if len(out) >= limit:
                return None, pos, pos
            out.append(c)
            pos += 1
            continue
        if not spaced or c == "" or c not in WHITESPACE:
            break
        run_end = pos
        while run_end < end and line[run_end] in WHITESPACE:
            run_end += 1
        if not accept(_at(line, run_end, end)):
            break
        if line[pos:run_end] != " ":
            return None, run_end, run_end
        if len(out) >= limit:
            return None, pos, pos
        out.append(" ")
        pos = run_end
    return "".join(out), pos, None


def parse_section(line: str | None, max_string: int = MAX_STRING_LENGTH) -> Parsed:
    """parse `[name]` with optional padding and a trailing comment."""
    if line is None:
        return _fail(0)
    end = line_end(line)

    pos = skip_ignored(line, 0, end)
    if _at(line, pos, end) != "[":
        return _fail(pos)
    pos = skip_ignored(line, pos + 1, end)

    if not is_section_name_start(_at(line, pos, end)):
        return _fail(pos)
    name, pos, bad = _scan(line, pos, end, is_section_name_char, max_string, spaced=True)
    if bad is not None:
        return _fail(bad)

    pos = skip_ignored(line, pos, end)
    if _at(line, pos, end) != "]":
        return _fail(pos)
    pos = skip_ignored(line, pos + 1, end)
    if pos != end:
        return _fail(pos)

    return Parsed(ok=True, value=name)


def parse_key(line: str | None, max_string: int = MAX_STRING_LENGTH) -> Parsed:
    """parse the key of a pair. the `=` is looked at, not consumed."""
    if line is None:
        return _fail(0)
    end = line_end(line)

    pos = skip_ignored(line, 0, end)
    if not is_key_start(_at(line, pos, end)):
        return _fail(pos)
    key, pos, bad = _scan(line, pos, end, is_key_char, max_string, spaced=False)
    if bad is not None:
        return _fail(bad)

    pos = skip_ignored(line, pos, end)
    if _at(line, pos, end) != "=":
        return _fail(pos)
    return Parsed(ok=True, value=key)


def parse_value(line: str | None, max_string: int = MAX_STRING_LENGTH) -> Parsed:
    """parse whatever follows the first `=` on the line."""
    if line is None:
        return _fail(0)
    end = line_end(line)

    eq = line.find("=", 0, end)
    if eq < 0:
        return _fail(end)
    pos = skip_ignored(line, eq + 1, end)

    quoted = _at(line, pos, end) == '"'
    if quoted:
        pos += 1

    def accept(c):
        return is_value_char(c, quoted)

    value, pos, bad = _scan(line, pos, end, accept, max_string, spaced=not quoted)
    if bad is not None:
        return _fail(bad)

    if quoted:
        if _at(line, pos, end) != '"':
            return _fail(pos)
        pos += 1

    pos = skip_ignored(line, pos, end)
    if pos != end:
        return _fail(pos)
    return Parsed(ok=True, value=value)


def parse_pair(line: str | None, max_string: int = MAX_STRING_LENGTH) -> Parsed:
    """parse `key=value`. value on success is a storage.Pair."""
    key = parse_key(line, max_string)
    if not key.ok:
        return key
    value = parse_value(line, max_string)
    if not value.ok:
        return value
    return Parsed(ok=True, value=Pair(key.value, value.value))
