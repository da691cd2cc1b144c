"""query.py - lookups with defaults.

get_value() is the raw lookup: first matching key in the named section,
or None. the typed getters wrap it and fall back to the caller's default
when the key is missing OR its text doesn't parse. the two cases look
the same from here; call get_value() and parse it yourself if the
difference matters.
"""

from inidb.storage import Dataset, Section


def has_section(data: Dataset | None, section: str | None) -> Section | None:
    if data is None:
        return None
    return data.has_section(section)


def get_value(data: Dataset | None, section: str | None, key: str | None) -> str | None:
    if data is None or section is None or key is None:
        return None
    return data.get_value(section, key)


def get_string(data, section, key, default: str | None = None) -> str | None:
    value = get_value(data, section, key)
    return default if value is None else value


def _numeric(data, section, key) -> str | None:
    """the raw value, or None when it can't be a number. int() and float()
    would take `1_000` and non-ASCII digits; an INI number is plain ASCII."""
    value = get_value(data, section, key)
    if value is None or not value.isascii() or "_" in value:
        return None
    return value


def _get_int(data, section, key, default, base: int):
    value = _numeric(data, section, key)
    if value is None:
        return default
    try:
        return int(value, base)
    except ValueError:
        return default


def get_unsigned(data, section, key, default: int = 0) -> int:
    """base-10, no sign. negatives fall back to default."""
    value = _get_int(data, section, key, None, 10)
    if value is None or value < 0:
        return default
    return value


def get_signed(data, section, key, default: int = 0) -> int:
    return _get_int(data, section, key, default, 10)


def get_hex(data, section, key, default: int = 0) -> int:
    """base-16, 0x prefix optional."""
    return _get_int(data, section, key, default, 16)


def get_float(data, section, key, default: float = 0.0) -> float:
    value = _numeric(data, section, key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def get_bool(data, section, key, default: bool = False) -> bool:
    """exactly "true" or "false". anything else is the default."""
    value = get_value(data, section, key)
    if value == "true":
        return True
    if value == "false":
        return False
    return default
