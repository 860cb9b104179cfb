"""
slnmove.config.loader - Configuration file discovery and loading.

Configuration lives in ``.slnmove.toml``, found by walking up from the
working directory. Values can be overridden with environment variables
named ``SLNMOVE_<SECTION>_<KEY>``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from slnmove.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG, OUTPUT_FORMATS
from slnmove.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "SLNMOVE_"
BOOLEAN_KEYS = (("solution", "read_only"), ("relocate", "dry_run"))


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML text into plain Python containers.

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        return parse_toml_document(content).unwrap()
    except TOMLKitError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def parse_toml_document(content: str) -> tomlkit.TOMLDocument:
    """Parse TOML text into a round-trip tomlkit document."""
    return tomlkit.parse(content)


def find_config_file(start_dir: Path) -> Path | None:
    """Find ``.slnmove.toml`` in ``start_dir`` or any parent directory."""
    current = Path(start_dir).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def merge_configs(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``overrides`` into a copy of ``defaults``."""
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment value: JSON lists/objects, booleans, else the string."""
    stripped = value.strip()
    if stripped.lower() == "true":
        return True
    if stripped.lower() == "false":
        return False
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply ``SLNMOVE_<SECTION>_<KEY>`` environment variables to ``config``."""
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, sep, key = name[len(ENV_PREFIX) :].lower().partition("_")
        if not sep or not key:
            continue
        config.setdefault(section, {})[key] = _try_parse_env_value(raw)
        logger.debug("Config override %s.%s from %s", section, key, name)
    return config


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a config file merged over the defaults.

    Relative ``solution.path`` values are resolved against the config
    file's directory.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        content = Path(config_path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    config = merge_configs(DEFAULT_CONFIG, parse_toml(content))
    solution = config["solution"].get("path")
    if solution and not Path(solution).is_absolute():
        config["solution"]["path"] = str(Path(config_path).parent / solution)
    return config


def validate_config(config: dict[str, Any]) -> list[str]:
    """Return a list of human-readable problems with ``config``."""
    errors = []
    output_format = config.get("output", {}).get("format", "text")
    if output_format not in OUTPUT_FORMATS:
        errors.append(f"output.format must be one of {', '.join(OUTPUT_FORMATS)}")

    for section, key in BOOLEAN_KEYS:
        value = config.get(section, {}).get(key, False)
        if not isinstance(value, bool):
            errors.append(f"{section}.{key} must be true or false, got {value!r}")

    moves = config.get("relocate", {}).get("moves", [])
    if not isinstance(moves, list):
        errors.append("relocate.moves must be a list of tables")
    else:
        for i, move in enumerate(moves):
            if not isinstance(move, dict) or not move.get("project"):
                errors.append(f"relocate.moves[{i}] needs a 'project' key")
    return errors


def get_config(config_path: Path | None = None, start_dir: Path | None = None) -> dict[str, Any]:
    """Resolve the effective configuration.

    Priority: environment > explicit config file > discovered config file
    > defaults.

    Raises:
        ConfigError: If the file is invalid.
    """
    if config_path is None:
        config_path = find_config_file(start_dir or Path.cwd())

    if config_path is not None:
        config = load_config(config_path)
        logger.debug("Loaded config from %s", config_path)
    else:
        config = copy.deepcopy(DEFAULT_CONFIG)

    config = _apply_env_overrides(config)
    errors = validate_config(config)
    if errors:
        raise ConfigError("; ".join(errors))
    return config
