"""ProjectNode - Node representation for the project graph.

This module provides the core data structures of a relocation request:
- NodeKind: Enum of tree node types
- ProjectIdentity: Stable project identity, used for lookups and equality
- Handle: Opaque host location handle, valid only within one host scope
- ProjectNode: A project with its outbound reference edges
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from slnmove.graph.relations import ReferenceDescriptor, ReferenceEdge


class NodeKind(Enum):
    """Types of nodes in a project tree."""

    PROJECT = "project"
    CONTAINER = "container"


@dataclass(frozen=True, order=True)
class ProjectIdentity:
    """Stable identity of a project.

    The name survives relocation; it is the only key used to find a
    project again after a structural mutation.
    """

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Handle:
    """Opaque location handle issued by a host.

    Handles carry the host scope they were issued in. Any structural
    mutation opens a new scope, so a handle must be obtained again after
    a move rather than kept.

    Attributes:
        token: Host-specific locator.
        kind: Whether the handle denotes a project or a container.
        scope: Host scope counter at issue time.
    """

    token: str
    kind: NodeKind = NodeKind.PROJECT
    scope: int = 0

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.token}@{self.scope}"


@dataclass
class ProjectNode:
    """A project in the graph.

    Attributes:
        identity: Stable identity of the project.
        handle: Host handle at graph-load time. Not valid after a move.
    """

    identity: ProjectIdentity
    handle: Handle

    # Internal storage (prefixed)
    _edges: list[ReferenceEdge] = field(default_factory=list, repr=False)

    @property
    def id(self) -> str:
        """Identity name, the graph index key."""
        return self.identity.name

    def iter_edges(self) -> Iterator[ReferenceEdge]:
        """Iterate outbound reference edges in host order."""
        yield from self._edges

    def edge_count(self) -> int:
        """Return number of outbound edges."""
        return len(self._edges)

    def find_edge_to(self, target: ProjectIdentity | str) -> ReferenceEdge | None:
        """Return the edge that points at ``target``, if any."""
        for edge in self._edges:
            if edge.descriptor.matches(target):
                return edge
        return None

    def references(self, target: ProjectIdentity | str) -> bool:
        """Check if this project holds an edge to ``target``."""
        return self.find_edge_to(target) is not None

    def add_reference(self, descriptor: ReferenceDescriptor) -> ReferenceEdge | None:
        """Append an edge for ``descriptor``.

        Returns:
            The new edge, or None if an edge to the same referenced
            identity already exists (the existing edge is kept).
        """
        edge = ReferenceEdge(holder=self.identity, descriptor=descriptor)
        if edge in self._edges:
            return None
        self._edges.append(edge)
        return edge
