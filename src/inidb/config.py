"""config.py - configuration management.

layered config: defaults -> global (~/.inidb/config.json) -> project (.inidb.json) -> env.
holds the format limits (string and line bounds, starting capacities),
the log level, and the file encoding used by read_path/write_path.

in the world: the ruler on the desk. how long a name may be, how many
drawers to open before asking for more.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from inidb import paths


# ============================================================
# LIMITS
# ============================================================

MAX_STRING_LENGTH = 255
MAX_LINE_LENGTH = 1024
INITIAL_SECTIONS = 8
INITIAL_PAIRS = 32


@dataclass(frozen=True)
class Limits:
    """bounds the grammar and storage work within."""
    max_string: int = MAX_STRING_LENGTH
    max_line: int = MAX_LINE_LENGTH
    initial_sections: int = INITIAL_SECTIONS
    initial_pairs: int = INITIAL_PAIRS


DEFAULT_LIMITS = Limits()


# ============================================================
# DEFAULTS
# ============================================================

DEFAULTS = {
    "max_string": MAX_STRING_LENGTH,
    "max_line": MAX_LINE_LENGTH,
    "initial_sections": INITIAL_SECTIONS,
    "initial_pairs": INITIAL_PAIRS,
    "log_level": "info",
    "encoding": "utf-8",
}

_INT_KEYS = ("max_string", "max_line", "initial_sections", "initial_pairs")


@dataclass
class Config:
    """merged configuration from all layers."""
    values: dict = field(default_factory=dict)
    source: str = ""  # which layer provided the final values

    def get(self, key: str, default=None):
        return self.values.get(key, DEFAULTS.get(key, default))

    def set(self, key: str, value):
        self.values[key] = value

    def __getitem__(self, key: str):
        return self.get(key)

    def __contains__(self, key: str):
        return key in self.values or key in DEFAULTS

    def to_dict(self) -> dict:
        merged = dict(DEFAULTS)
        merged.update(self.values)
        return merged

    def limits(self) -> Limits:
        """the Limits these values describe. nonsense values fall back to defaults."""
        kwargs = {}
        for key in _INT_KEYS:
            try:
                value = int(self.get(key))
            except (TypeError, ValueError):
                continue
            if value > 0:
                kwargs[key] = value
        return Limits(**kwargs)


# ============================================================
# CONFIG LOADING
# ============================================================

def load_global() -> dict:
    """load global config from ~/.inidb/config.json."""
    if not paths.GLOBAL_CONFIG.exists():
        return {}
    try:
        return json.loads(paths.GLOBAL_CONFIG.read_text())
    except (json.JSONDecodeError, OSError):
        return {}


def save_global(config: dict):
    """save global config."""
    paths.ensure_dir(paths.GLOBAL_CONFIG.parent)
    paths.GLOBAL_CONFIG.write_text(json.dumps(config, indent=2) + "\n")


def load_project(root: str = ".") -> dict:
    """load project config from .inidb.json in project root."""
    config_path = Path(root) / paths.PROJECT_CONFIG_NAME
    if not config_path.exists():
        return {}
    try:
        return json.loads(config_path.read_text())
    except (json.JSONDecodeError, OSError):
        return {}


def save_project(config: dict, root: str = "."):
    """save project config to .inidb.json."""
    config_path = Path(root) / paths.PROJECT_CONFIG_NAME
    config_path.write_text(json.dumps(config, indent=2) + "\n")


def load_config(root: str = ".") -> Config:
    """load merged config: defaults -> global -> project -> env."""
    merged = dict(DEFAULTS)

    global_config = load_global()
    merged.update(global_config)

    project_config = load_project(root)
    merged.update(project_config)

    env_overrides = _env_overrides()
    merged.update(env_overrides)

    source = "defaults"
    if env_overrides:
        source = "env"
    elif project_config:
        source = "project"
    elif global_config:
        source = "global"

    return Config(values=merged, source=source)


def _env_overrides() -> dict:
    """extract config overrides from environment variables."""
    overrides = {}

    env_map = {
        "INIDB_MAX_STRING": "max_string",
        "INIDB_MAX_LINE": "max_line",
        "INIDB_INITIAL_SECTIONS": "initial_sections",
        "INIDB_INITIAL_PAIRS": "initial_pairs",
        "INIDB_LOG_LEVEL": "log_level",
        "INIDB_ENCODING": "encoding",
    }

    for env_key, config_key in env_map.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        if config_key in _INT_KEYS:
            try:
                overrides[config_key] = int(value)
            except ValueError:
                pass
        else:
            overrides[config_key] = value

    return overrides


def list_config(root: str = ".") -> dict:
    """list all config values with their sources."""
    global_config = load_global()
    project_config = load_project(root)
    env = _env_overrides()

    result = {}
    for key in DEFAULTS:
        source = "default"
        value = DEFAULTS[key]

        if key in global_config:
            source = "global"
            value = global_config[key]
        if key in project_config:
            source = "project"
            value = project_config[key]
        if key in env:
            source = "env"
            value = env[key]

        result[key] = {"value": value, "source": source}

    return result
