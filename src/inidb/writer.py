"""writer.py - dataset back to INI text.

one [Section] header per section, then its pairs as key=value, in
insertion order. a value with a space in it gets quoted so it reads
back the same.
"""

import io
from pathlib import Path

from inidb.log import debug
from inidb.storage import Dataset


def format_pair(key: str, value: str) -> str:
    if " " in value:
        return f'{key}="{value}"'
    return f"{key}={value}"


def write_stream(data: Dataset, stream):
    """write data to an open text stream."""
    if data is None or stream is None:
        return
    for section in data.sections:
        stream.write(f"[{section.name}]\n")
        for pair in section:
            stream.write(format_pair(pair.key, pair.value) + "\n")


def dumps(data: Dataset) -> str:
    buf = io.StringIO()
    write_stream(data, buf)
    return buf.getvalue()


def write_path(data: Dataset, path, encoding: str = "utf-8"):
    """write data to a file, replacing it."""
    path = Path(path)
    with open(path, "w", encoding=encoding, newline="\n") as f:
        write_stream(data, f)
    debug("writer", f"wrote {data.count} sections to {path}")
