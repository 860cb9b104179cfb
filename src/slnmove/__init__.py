"""
slnmove - Move projects into solution folders without losing references

Many project hosts implement "move into folder" as remove-and-re-add,
which gives the project a new handle and silently drops every reference
other projects held to it. slnmove records those references first and
puts them back on the moved project.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("slnmove")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from slnmove.errors import (
    ContainerCreationError,
    DuplicateReferenceError,
    GraphLoadError,
    MoveError,
    ProjectNotFoundError,
    SlnmoveError,
)
from slnmove.graph import ProjectIdentity, ReferenceDescriptor, load_graph
from slnmove.host import ProjectHost
from slnmove.relocation import RelocationEngine, RelocationResult

__all__ = [
    "__version__",
    "RelocationEngine",
    "RelocationResult",
    "ProjectHost",
    "ProjectIdentity",
    "ReferenceDescriptor",
    "load_graph",
    "SlnmoveError",
    "GraphLoadError",
    "ProjectNotFoundError",
    "ContainerCreationError",
    "MoveError",
    "DuplicateReferenceError",
]
