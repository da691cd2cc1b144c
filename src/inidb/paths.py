"""paths.py - one place for all inidb paths.

config loading and the cli import from here. no Path.home() scattered
across the codebase.
"""

from pathlib import Path


def inidb_home() -> Path:
    """~/.inidb/ - the root of all inidb state."""
    return Path.home() / ".inidb"


def ensure_dir(path: Path) -> Path:
    """mkdir -p. returns the path for chaining."""
    path.mkdir(parents=True, exist_ok=True)
    return path


# -- ~/.inidb/ paths --
GLOBAL_CONFIG = inidb_home() / "config.json"

# -- per-project --
PROJECT_CONFIG_NAME = ".inidb.json"
