"""reader.py - the line loop. stream in, dataset out, or one error.

    blank/comment line        skip
    pair, no section yet      PAIR_OUTSIDE_SECTION
    pair                      append to the current section
    not a pair, no `[`        MALFORMED_PAIR
    section, name taken       DUPLICATE_SECTION
    section                   becomes the current section
    anything else             MALFORMED_SECTION

fail-fast: the first problem fills the error record and stops the loop.
a heap dataset is released on failure; fixed storage is left to the
caller, who must not trust it after a failed parse.

in the world: the reader with one finger on the page. line by line,
and the moment something's wrong it stops and points.
"""

import io
import re
from dataclasses import dataclass, field
from pathlib import Path

from inidb.config import Limits
from inidb.errors import (
    ErrorKind,
    IniSyntaxError,
    ParseError,
    StorageExhaustedError,
)
from inidb.grammar import parse_pair, parse_section
from inidb.lex import is_blank_line, skip_ignored
from inidb.log import debug, span
from inidb.storage import Dataset, create_dataset


@dataclass
class ParseResult:
    """what a parse attempt produced. data is None when it failed."""
    data: Dataset | None = None
    error: ParseError = field(default_factory=ParseError)

    @property
    def ok(self) -> bool:
        return self.data is not None and not self.error.encountered


# bytes the encoding could not read, left in place by errors="surrogateescape".
# the grammar rejects them, the error record shows them as U+FFFD.
_UNDECODABLE = re.compile("[\udc80-\udcff]")


def _decode(raw, encoding: str) -> str:
    if isinstance(raw, bytes):
        return raw.decode(encoding, errors="surrogateescape")
    return raw


def read_stream(stream, data: Dataset | None = None, error: ParseError | None = None,
                limits: Limits | None = None, encoding: str = "utf-8") -> ParseResult:
    """parse every line of an open stream into data (a new heap dataset if None)."""
    error = error if error is not None else ParseError()
    error.clear()
    if stream is None:
        return ParseResult(None, error)

    if data is None:
        data = create_dataset(limits=limits)
    limits = limits or data.limits

    with span("read", subsystem="reader", mode="fixed" if data.fixed else "heap") as s:
        try:
            ok = _parse_lines(stream, data, error, limits, encoding)
        except BaseException:
            data.release()
            raise
        s.set_attribute("inidb.ok", ok)
        if not ok:
            s.set_attribute("inidb.error", error.summary())
            debug("reader", error.summary(), kind=error.kind.value,
                  line_no=error.line_no, offset=error.offset)
            data.release()
            return ParseResult(None, error)
        s.set_attribute("inidb.sections", data.count)

    debug("reader", f"parsed {data.count} sections, {data.pair_count} pairs")
    return ParseResult(data, error)


def _parse_lines(stream, data: Dataset, error: ParseError, limits: Limits,
                 encoding: str) -> bool:
    current = None
    for line_no, raw in enumerate(stream, start=1):
        line = _decode(raw, encoding)
        if is_blank_line(line):
            continue
        outcome = _parse_line(line, data, current, limits)
        if isinstance(outcome, tuple):
            kind, offset, message = outcome
            line = _UNDECODABLE.sub("\ufffd", line)
            error.set(kind, line, offset, message, line_no=line_no,
                      max_line=limits.max_line)
            return False
        if outcome is not None:
            current = outcome
    return True


def _parse_line(line: str, data: Dataset, current, limits: Limits):
    """feed one non-blank line to data.

    returns the new current section, None if it stays the same, or a
    (kind, offset, message) tuple on failure.
    """
    pair = parse_pair(line, limits.max_string)
    if pair.ok:
        if current is None:
            return (ErrorKind.PAIR_OUTSIDE_SECTION, pair.offset,
                    "Pairs must reside within a section.")
        try:
            current.add_pair(pair.value)
        except StorageExhaustedError:
            return (ErrorKind.STORAGE_EXHAUSTED, pair.offset,
                    f"Out of storage for pair '{pair.value.key}' "
                    f"in section '{current.name}'.")
        return None

    start = skip_ignored(line)
    if line[start:start + 1] != "[":
        return ErrorKind.MALFORMED_PAIR, pair.offset, "Failed to parse pair."

    section = parse_section(line, limits.max_string)
    if not section.ok:
        return ErrorKind.MALFORMED_SECTION, section.offset, "Failed to parse section."

    name = section.value
    if data.has_section(name) is not None:
        return (ErrorKind.DUPLICATE_SECTION, section.offset,
                f"Duplicate section '{name}'.")
    try:
        return data.add_section(name)
    except StorageExhaustedError:
        return (ErrorKind.STORAGE_EXHAUSTED, section.offset,
                f"Out of storage for section '{name}'.")


def read_path(path, data: Dataset | None = None, error: ParseError | None = None,
              limits: Limits | None = None, encoding: str = "utf-8") -> ParseResult:
    """open a file and parse it. OSErrors propagate."""
    with open(Path(path), "r", encoding=encoding, errors="surrogateescape",
              newline="") as f:
        return read_stream(f, data, error, limits, encoding)


def read_string(text: str, data: Dataset | None = None, error: ParseError | None = None,
                limits: Limits | None = None) -> ParseResult:
    """parse INI text held in memory."""
    return read_stream(io.StringIO(text, newline=""), data, error, limits)


def load(path, limits: Limits | None = None, encoding: str = "utf-8") -> Dataset:
    """read_path() that raises IniSyntaxError instead of returning a record."""
    result = read_path(path, limits=limits, encoding=encoding)
    if not result.ok:
        raise IniSyntaxError(result.error)
    return result.data


def loads(text: str, limits: Limits | None = None) -> Dataset:
    """read_string() that raises IniSyntaxError instead of returning a record."""
    result = read_string(text, limits=limits)
    if not result.ok:
        raise IniSyntaxError(result.error)
    return result.data
