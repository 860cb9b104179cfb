"""
slnmove.config - Configuration loading and defaults
"""

from slnmove.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG
from slnmove.config.loader import (
    _apply_env_overrides,
    _try_parse_env_value,
    find_config_file,
    get_config,
    load_config,
    merge_configs,
    parse_toml,
    parse_toml_document,
    validate_config,
)

__all__ = [
    "load_config",
    "find_config_file",
    "merge_configs",
    "get_config",
    "validate_config",
    "parse_toml",
    "parse_toml_document",
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "_apply_env_overrides",
    "_try_parse_env_value",
]
