"""Host module - The project tree the relocation core works against.

Exports:
- ProjectHost: Protocol every host implementation satisfies
- HostError and subclasses: failures a host call may raise

Implementations:
- slnmove.host.memory.InMemoryHost: in-memory tree
- slnmove.host.slnx.SlnxHost: .slnx solution plus MSBuild project files
"""

from __future__ import annotations

from typing import Protocol, Sequence

from slnmove.graph.ProjectNode import Handle, ProjectIdentity
from slnmove.graph.relations import ReferenceDescriptor


class HostError(Exception):
    """A host call failed."""


class StaleHandleError(HostError):
    """Handle was issued in an earlier host scope."""

    def __init__(self, handle: Handle) -> None:
        super().__init__(f"Handle {handle} is no longer valid")
        self.handle = handle


class HostRefusedError(HostError):
    """Host rejected a structural mutation."""


class HostDuplicateReferenceError(HostError):
    """Holder already references the identity being added."""


class ProjectFileMissingError(HostError):
    """Project file could not be found when re-adding it to the tree."""


class ProjectHost(Protocol):
    """Capability the relocation core consumes.

    All calls are synchronous and must be issued from the execution
    context that owns the tree.
    """

    def list_projects(self) -> Sequence[tuple[ProjectIdentity, Handle]]:
        """List every project in the tree, in tree order."""
        ...

    def list_references(self, handle: Handle) -> Sequence[ReferenceDescriptor]:
        """List the outbound references of a project."""
        ...

    def find_top_level_node_by_name(self, name: str) -> Handle | None:
        """Find a top-level container or project by exact name."""
        ...

    def create_grouping_container(self, name: str) -> Handle:
        """Create a top-level container.

        Raises:
            HostRefusedError: If the tree is read-only or the name is taken.
        """
        ...

    def move_into_container(self, handle: Handle, container: Handle) -> Handle:
        """Remove a project from its location and re-add it under ``container``.

        Returns:
            The handle of the re-added project.

        Raises:
            HostRefusedError: If the move is rejected before removal.
            ProjectFileMissingError: If the project was removed but could
                not be re-added.
        """
        ...

    def add_reference(self, holder: Handle, referenced: Handle) -> None:
        """Add a project reference from ``holder`` to ``referenced``.

        Raises:
            HostDuplicateReferenceError: If the holder already references
                that identity.
        """
        ...


__all__ = [
    "ProjectHost",
    "HostError",
    "StaleHandleError",
    "HostRefusedError",
    "HostDuplicateReferenceError",
    "ProjectFileMissingError",
]
