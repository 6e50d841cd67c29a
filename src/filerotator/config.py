"""Config loading, defaults, and validation for rotator settings."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from filerotator.rotator import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_FILES,
    FileRotator,
    InvalidConfiguration,
    check_file_mode,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "max_file_size": DEFAULT_MAX_FILE_SIZE,
    "max_files": DEFAULT_MAX_FILES,
    "file_mode": None,
    "rotate_by_copy": None,
}

CONFIG_NAMES = (".filerotator.yaml", ".filerotator.yml", ".filerotator.json")


def find_config(start_dir: Path | None = None) -> Path:
    """Find a .filerotator config file by walking up from start_dir."""
    search = (start_dir or Path.cwd()).resolve()
    for d in [search, *search.parents]:
        for name in CONFIG_NAMES:
            candidate = d / name
            if candidate.exists():
                return candidate
    return search / CONFIG_NAMES[0]


def _read_config_file(path: Path) -> dict:
    """Parse a JSON or YAML config file, returning empty dict if unusable."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Cannot read config file %s: %s", path, exc)
        return {}
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        logger.warning("Config file is malformed: %s (%s). Using defaults.", path, exc)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file must contain a mapping: %s. Using defaults.", path)
        return {}
    return data


def parse_mode(value):
    """Accept file modes written as ints or octal strings ("0o640", "640")."""
    if isinstance(value, str):
        raw = value.strip().lower()
        if raw.startswith("0o"):
            raw = raw[2:]
        try:
            return int(raw, 8)
        except ValueError:
            return value
    return value


def load_config(path: Path | None = None) -> dict:
    """Load config from path, merged over the defaults."""
    config = DEFAULT_CONFIG.copy()
    if path is None or not path.exists():
        return config
    config.update(_read_config_file(path))
    config["file_mode"] = parse_mode(config.get("file_mode"))
    return config


def validate_config(config: dict) -> list[str]:
    """Validate config, returning list of error messages (empty if valid)."""
    errors = []
    for key in config:
        if key not in DEFAULT_CONFIG:
            errors.append(f"Unknown key '{key}'")
    for key in ("max_file_size", "max_files"):
        value = config.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"'{key}' must be an integer, got {value!r}")
        elif value < 1:
            errors.append(f"'{key}' cannot be lower than 1, got {value}")
    try:
        check_file_mode(config.get("file_mode"))
    except InvalidConfiguration as exc:
        errors.append(str(exc))
    by_copy = config.get("rotate_by_copy")
    if by_copy is not None and not isinstance(by_copy, bool):
        errors.append(f"'rotate_by_copy' must be true, false or null, got {by_copy!r}")
    return errors


def rotator_from_config(config: dict) -> FileRotator:
    """Build a FileRotator, raising InvalidConfiguration on a bad config."""
    errors = validate_config(config)
    if errors:
        raise InvalidConfiguration("; ".join(errors))
    return FileRotator(
        max_file_size=config["max_file_size"],
        max_files=config["max_files"],
        file_mode=config.get("file_mode"),
        rotate_by_copy=config.get("rotate_by_copy"),
    )
