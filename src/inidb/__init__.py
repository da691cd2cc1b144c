"""inidb: reads INI files into a small in-memory database, and points at the bad character when it can't."""

__version__ = "0.1.0"

from inidb.config import Limits, DEFAULT_LIMITS, MAX_STRING_LENGTH, MAX_LINE_LENGTH
from inidb.errors import (
    ErrorKind, ParseError,
    IniError, IniSyntaxError, DuplicateSectionError, StorageExhaustedError,
)
from inidb.storage import (
    Pair, Section, Dataset,
    Allocator, HeapAllocator, NoHeapAllocator, BudgetAllocator,
    create_dataset, fixed_dataset, fixed_buffers,
)
from inidb.grammar import Parsed, is_blank_line, parse_section, parse_key, parse_value, parse_pair
from inidb.reader import ParseResult, read_stream, read_path, read_string, load, loads
from inidb.writer import write_stream, write_path, dumps
from inidb.query import (
    has_section, get_value, get_string,
    get_unsigned, get_signed, get_hex, get_float, get_bool,
)

__all__ = [
    "Limits", "DEFAULT_LIMITS", "MAX_STRING_LENGTH", "MAX_LINE_LENGTH",
    "ErrorKind", "ParseError",
    "IniError", "IniSyntaxError", "DuplicateSectionError", "StorageExhaustedError",
    "Pair", "Section", "Dataset",
    "Allocator", "HeapAllocator", "NoHeapAllocator", "BudgetAllocator",
    "create_dataset", "fixed_dataset", "fixed_buffers",
    "Parsed", "is_blank_line", "parse_section", "parse_key", "parse_value", "parse_pair",
    "ParseResult", "read_stream", "read_path", "read_string", "load", "loads",
    "write_stream", "write_path", "dumps",
    "has_section", "get_value", "get_string",
    "get_unsigned", "get_signed", "get_hex", "get_float", "get_bool",
]
