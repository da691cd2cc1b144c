"""errors.py - what went wrong, where, and on which character.

a parse attempt fills at most one ParseError. first failure wins, the
driver stops right there. the record keeps the raw line and the offset
of the first bad character so a caller can point at it without
re-scanning.

in the world: the red pen. one circle per page, right on the letter.
"""

from dataclasses import dataclass
from enum import Enum

from inidb.config import MAX_LINE_LENGTH


class ErrorKind(Enum):
    MALFORMED_SECTION = "malformed_section"
    MALFORMED_PAIR = "malformed_pair"
    PAIR_OUTSIDE_SECTION = "pair_outside_section"
    DUPLICATE_SECTION = "duplicate_section"
    STORAGE_EXHAUSTED = "storage_exhausted"


@dataclass
class ParseError:
    """the error record for one parse attempt."""
    encountered: bool = False
    kind: ErrorKind | None = None
    message: str = ""
    line: str = ""          # copy of the offending raw line
    offset: int = 0         # first invalid character in `line`
    line_no: int = 0        # 1-based, 0 when unknown

    def clear(self):
        """reset before a new parse attempt."""
        self.encountered = False
        self.kind = None
        self.message = ""
        self.line = ""
        self.offset = 0
        self.line_no = 0

    def set(self, kind: ErrorKind, line: str, offset: int, message: str,
            line_no: int = 0, max_line: int = MAX_LINE_LENGTH) -> bool:
        """populate the record. no-op if already populated or offset < 0.

        returns True if this call populated it.
        """
        if self.encountered or offset < 0:
            return False
        self.encountered = True
        self.kind = kind
        self.message = message
        self.line = line[:max_line]
        self.offset = offset
        self.line_no = line_no
        return True

    def caret(self) -> str:
        """the offending line with a ^ under the bad character."""
        text = self.line.rstrip("\r\n")
        return f"{text}\n{' ' * self.offset}^"

    def summary(self) -> str:
        """one-line summary."""
        if not self.encountered:
            return "no error"
        where = f"line {self.line_no}, " if self.line_no else ""
        return f"[{self.kind.value}] {where}column {self.offset}: {self.message}"

    def __bool__(self):
        return self.encountered


class IniError(ValueError):
    """base for everything inidb raises on its own."""


class DuplicateSectionError(IniError):
    """a section with that name is already in the dataset."""

    def __init__(self, name: str):
        super().__init__(f"Duplicate section '{name}'.")
        self.name = name


class StorageExhaustedError(IniError):
    """backing storage could not grow: allocator refused or fixed capacity hit."""


class IniSyntaxError(IniError):
    """raised by load()/loads() when the parse fails. carries the record."""

    def __init__(self, error: ParseError):
        super().__init__(error.summary())
        self.error = error

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def offset(self) -> int:
        return self.error.offset
