"""Host Factory - Shared utility for opening the solution a command works on.

Commands should use this instead of locating solution files themselves.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from slnmove.errors import ConfigError, GraphLoadError
from slnmove.host import HostError
from slnmove.host.slnx import SlnxHost

logger = logging.getLogger(__name__)


def find_solution(
    solution: Path | None,
    config: dict[str, Any],
    start_dir: Path | None = None,
) -> Path:
    """Locate the solution file.

    Priority:
        explicit path > solution.path from config > the only ``*.slnx``
        in ``start_dir``

    Raises:
        ConfigError: If no solution, or more than one candidate, is found.
    """
    if solution is not None:
        return Path(solution)

    configured = config.get("solution", {}).get("path")
    if configured:
        return Path(configured)

    start_dir = start_dir or Path.cwd()
    candidates = sorted(start_dir.glob("*.slnx"))
    if len(candidates) == 1:
        logger.debug("Using solution %s", candidates[0])
        return candidates[0]
    if not candidates:
        raise ConfigError(f"No .slnx solution found in {start_dir}; pass --solution")
    names = ", ".join(c.name for c in candidates)
    raise ConfigError(f"Several solutions found ({names}); pass --solution")


def open_host(
    solution: Path | None,
    config: dict[str, Any],
    start_dir: Path | None = None,
) -> SlnxHost:
    """Open the solution a command should operate on.

    Raises:
        ConfigError: If no solution can be located.
        GraphLoadError: If the solution file cannot be read.
    """
    path = find_solution(solution, config, start_dir)
    try:
        return SlnxHost(path, read_only=config.get("solution", {}).get("read_only", False))
    except HostError as e:
        raise GraphLoadError(str(e)) from e
