"""
slnmove.config.defaults - Default configuration values.
"""

CONFIG_FILENAME = ".slnmove.toml"

DEFAULT_CONFIG = {
    "solution": {
        # Path to the .slnx file, relative to the config file
        "path": None,
        "read_only": False,
    },
    "relocate": {
        "folder": "Libs",
        "dry_run": False,
        # [[relocate.moves]] tables: {project = "...", folder = "..."}
        "moves": [],
    },
    "output": {
        "format": "text",
    },
}

OUTPUT_FORMATS = ("text", "json")
