"""lex.py - character classes and the ignore-skipper.

identifiers are ASCII: a letter or underscore to start, digits allowed
after that. values take almost anything: every character except line
breaks, NUL, other control characters, the structural `[ ] ; # "`
and bytes that did not decode.
the space only counts as a value character inside quotes.

a line ends at its last character or at the first NUL, whichever comes
first. positions are indexes into the raw line.
"""

import string

WHITESPACE = " \t\n\v\f\r"
COMMENT_CHARS = ";#"
STRUCTURAL = '[];#"'

_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_CHAR = frozenset(string.ascii_letters + string.digits + "_")


def line_end(line: str) -> int:
    """index where the line stops: first NUL or len(line)."""
    nul = line.find("\0")
    return len(line) if nul < 0 else nul


def is_space(c: str) -> bool:
    return c != "" and c in WHITESPACE


def skip_ignored(line: str, pos: int = 0, end: int | None = None) -> int:
    """skip whitespace from pos. a ; or # there eats the rest of the line."""
    if end is None:
        end = line_end(line)
    while pos < end and line[pos] in WHITESPACE:
        pos += 1
    if pos < end and line[pos] in COMMENT_CHARS:
        return end
    return pos


def is_blank_line(line: str | None) -> bool:
    """true if the line is only whitespace and/or a comment."""
    if line is None:
        return False
    end = line_end(line)
    return skip_ignored(line, 0, end) == end


def is_section_name_start(c: str) -> bool:
    return c in _IDENT_START


def is_section_name_char(c: str) -> bool:
    return c in _IDENT_CHAR


def is_key_start(c: str) -> bool:
    return c in _IDENT_START


def is_key_char(c: str) -> bool:
    return c in _IDENT_CHAR


def is_value_char(c: str, quoted: bool = False) -> bool:
    if c == "":
        return False
    if c == " ":
        return quoted
    code = ord(c)
    if code < 0x20 or code == 0x7F:
        return False
    if 0xD800 <= code <= 0xDFFF:
        return False  # undecoded byte
    return c not in STRUCTURAL
