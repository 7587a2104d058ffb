"""Configuration management module for tickarchive."""

from __future__ import annotations

import codecs
import logging
import os
import re
import warnings
from pathlib import Path

logger = logging.getLogger(__name__)

try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib

# Base Paths
CONFIG_PATH = Path(
    os.getenv("TICKARCHIVE_CONFIG", str(Path.home() / ".config" / "tickarchive" / "config.toml"))
).expanduser()

DEFAULT_ENCODING = "utf-8"
DEFAULT_CHUNK_SIZE = 4096


def _read_config_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:
        warnings.warn(f"Failed to parse tickarchive config at {path}: {exc}", stacklevel=2)
        return {}


def load_config() -> dict:
    """Return parsed config content from CONFIG_PATH."""
    return _read_config_file(CONFIG_PATH)


def _is_known_codec(name: str) -> bool:
    try:
        codecs.lookup(name)
    except LookupError:
        return False
    return True


def _resolve_text_encoding() -> str:
    env_value = os.getenv("TICKARCHIVE_ENCODING")
    if env_value:
        source, value = "TICKARCHIVE_ENCODING", env_value.strip()
    else:
        config_value = load_config().get("text_encoding")
        if not (isinstance(config_value, str) and config_value.strip()):
            return DEFAULT_ENCODING
        source, value = str(CONFIG_PATH), config_value.strip()

    if not _is_known_codec(value):
        logger.warning("Ignoring unknown text_encoding from %s: %r", source, value)
        return DEFAULT_ENCODING
    return value


def _resolve_chunk_size() -> int:
    config_value = load_config().get("chunk_size")
    if isinstance(config_value, int) and not isinstance(config_value, bool) and config_value > 0:
        return config_value
    if config_value is not None:
        logger.warning("Ignoring invalid chunk_size in %s: %r", CONFIG_PATH, config_value)
    return DEFAULT_CHUNK_SIZE


TEXT_ENCODING = _resolve_text_encoding()
CHUNK_SIZE = _resolve_chunk_size()


def get_job_section() -> dict:
    """Return the ``[job]`` table from config (empty when absent or malformed)."""
    section = load_config().get("job", {})
    if not isinstance(section, dict):
        warnings.warn(f"Ignoring non-table [job] entry in {CONFIG_PATH}", stacklevel=2)
        return {}
    return section


def _format_toml_value(value: str | int) -> str:
    if isinstance(value, int):
        return str(value)
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _validate_setting(key: str, value: str | int) -> str | int:
    if key == "text_encoding":
        value = str(value).strip()
        if not _is_known_codec(value):
            raise ValueError(f"Unknown text encoding: {value!r}")
        return value
    if key == "chunk_size":
        size = int(value)
        if size <= 0:
            raise ValueError(f"chunk_size must be positive, got {size}")
        return size
    raise ValueError(f"Unsupported config key: {key}")


def set_config_value(key: str, value: str | int) -> str | int:
    """Persist a top-level setting (``text_encoding`` or ``chunk_size``) to the user config file.

    Returns the validated value written. Raises ``ValueError`` for unknown keys
    or invalid values.
    """
    value = _validate_setting(key, value)
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    new_line = f"{key} = {_format_toml_value(value)}"

    lines = CONFIG_PATH.read_text(encoding="utf-8").splitlines() if CONFIG_PATH.exists() else []

    # Top-level keys must precede the first table header.
    first_table = next(
        (idx for idx, line in enumerate(lines) if line.lstrip().startswith("[")),
        len(lines),
    )

    updated = False
    pattern = re.compile(rf"^\s*{re.escape(key)}\s*=")
    for idx, line in enumerate(lines[:first_table]):
        if pattern.match(line):
            lines[idx] = new_line
            updated = True
            break

    if not updated:
        lines.insert(first_table, new_line)

    CONFIG_PATH.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return value
