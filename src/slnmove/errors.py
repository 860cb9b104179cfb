"""Error types raised by the relocation core.

Pre-move failures (``GraphLoadError``, ``ProjectNotFoundError``,
``ContainerCreationError``) leave the host untouched and are safe to retry.
``MoveError`` is raised after the single irreversible host mutation and may
leave the project detached. ``RebindError`` subclasses are never raised out
of a relocation; they are collected per holder on the result.
"""

from __future__ import annotations


class SlnmoveError(Exception):
    """Base class for all slnmove errors."""


class ConfigError(SlnmoveError):
    """Configuration file could not be parsed."""


class DuplicateProjectError(SlnmoveError):
    """Host listed two projects with the same identity."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Project '{name}' is listed more than once")
        self.name = name


class RelocationError(SlnmoveError):
    """A relocation request failed as a whole.

    Attributes:
        may_be_detached: True when the host tree may have been left in a
            partially moved state and needs a manual check.
    """

    may_be_detached = False


class GraphLoadError(RelocationError):
    """Host could not be read while loading the project graph."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Cannot load projects: {reason}")
        self.reason = reason


class ProjectNotFoundError(RelocationError):
    """Target project is not present in the graph."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Project '{name}' not found")
        self.name = name


class ContainerCreationError(RelocationError):
    """Container could not be found or created."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Cannot resolve container '{name}': {reason}")
        self.name = name
        self.reason = reason


class MoveError(RelocationError):
    """Host rejected the move of the target into its container."""

    may_be_detached = True

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(
            f"Moving '{name}' failed: {reason} "
            "(the project may be detached from the solution, check it manually)"
        )
        self.name = name
        self.reason = reason


class MovedProjectMissingError(MoveError):
    """Project file vanished between removal and re-add."""


class RebindError(SlnmoveError):
    """Recreating a reference on one holder failed."""

    def __init__(self, holder: str, reason: str) -> None:
        super().__init__(f"{holder}: {reason}")
        self.holder = holder
        self.reason = reason


class DuplicateReferenceError(RebindError):
    """Holder already carries an edge to the relocated identity."""


class HolderNotFoundError(RebindError):
    """Holder disappeared from the host between capture and rebind."""


__all__ = [
    "SlnmoveError",
    "ConfigError",
    "DuplicateProjectError",
    "RelocationError",
    "GraphLoadError",
    "ProjectNotFoundError",
    "ContainerCreationError",
    "MoveError",
    "MovedProjectMissingError",
    "RebindError",
    "DuplicateReferenceError",
    "HolderNotFoundError",
]
