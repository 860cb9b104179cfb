"""Graph Builder - Constructs a ProjectGraph from host state.

A graph is a per-request view: it is loaded fresh from the host for
each relocation and never cached, since any external mutation can
invalidate the handles it holds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

from slnmove.errors import DuplicateProjectError, GraphLoadError
from slnmove.graph.mutations import DuplicateEdge, MutationLog
from slnmove.graph.ProjectNode import Handle, ProjectIdentity, ProjectNode
from slnmove.graph.relations import ReferenceDescriptor
from slnmove.host import HostError, ProjectHost

logger = logging.getLogger(__name__)


@dataclass
class ProjectGraph:
    """All projects of a tree plus their reference edges.

    Uses iterator-only API for traversal.
    """

    # Internal storage (prefixed) - excluded from constructor
    _index: dict[str, ProjectNode] = field(default_factory=dict, init=False, repr=False)
    _referrers: dict[str, list[str]] = field(default_factory=dict, init=False, repr=False)

    # Detection: populated at build time
    _duplicate_edges: list[DuplicateEdge] = field(default_factory=list, init=False)

    # Host mutations issued while this graph was current
    _mutation_log: MutationLog = field(default_factory=MutationLog, init=False)

    def find_by_id(self, node_id: ProjectIdentity | str) -> ProjectNode | None:
        """Find a project by identity name."""
        return self._index.get(str(node_id))

    def all_nodes(self) -> Iterator[ProjectNode]:
        """Iterate all projects in host order."""
        yield from self._index.values()

    def node_count(self) -> int:
        """Return number of projects."""
        return len(self._index)

    def iter_referrers(self, target: ProjectIdentity | str) -> Iterator[ProjectNode]:
        """Iterate projects holding an edge to ``target``, in host order.

        The reverse index is keyed by each edge's declared name and by the
        name derived from its path, so both forms are found.
        """
        target_id = str(target)
        for holder_id in self._referrers.get(target_id, []):
            if holder_id != target_id:
                yield self._index[holder_id]

    @property
    def duplicate_edges(self) -> list[DuplicateEdge]:
        """Second references to an already-referenced identity, dropped at load."""
        return list(self._duplicate_edges)

    @property
    def mutation_log(self) -> MutationLog:
        """Host mutations recorded against this graph."""
        return self._mutation_log


class GraphBuilder:
    """Builder for constructing a ProjectGraph.

    Usage:
        builder = GraphBuilder()
        for identity, handle in host.list_projects():
            builder.add_project(identity, handle, host.list_references(handle))
        graph = builder.build()
    """

    def __init__(self) -> None:
        self._nodes: dict[str, ProjectNode] = {}
        self._duplicate_edges: list[DuplicateEdge] = []

    def add_project(
        self,
        identity: ProjectIdentity,
        handle: Handle,
        references: list[ReferenceDescriptor] | tuple[ReferenceDescriptor, ...] = (),
    ) -> ProjectNode:
        """Add a project and its outbound references.

        Raises:
            DuplicateProjectError: If the identity was already added.
        """
        if identity.name in self._nodes:
            raise DuplicateProjectError(identity.name)

        node = ProjectNode(identity=identity, handle=handle)
        for descriptor in references:
            if node.add_reference(descriptor) is None:
                self._duplicate_edges.append(
                    DuplicateEdge(
                        holder_id=identity.name,
                        referenced=descriptor.simple_name,
                        descriptor=str(descriptor),
                    )
                )
        self._nodes[identity.name] = node
        return node

    def build(self) -> ProjectGraph:
        """Build the final ProjectGraph with its reverse adjacency."""
        referrers: dict[str, list[str]] = {}
        for node in self._nodes.values():
            for edge in node.iter_edges():
                for key in edge.descriptor.match_keys:
                    holders = referrers.setdefault(key, [])
                    if node.id not in holders:
                        holders.append(node.id)

        graph = ProjectGraph()
        graph._index = dict(self._nodes)
        graph._referrers = referrers
        graph._duplicate_edges = list(self._duplicate_edges)
        return graph


def load_graph(host: ProjectHost) -> ProjectGraph:
    """Materialize a ProjectGraph from the host's current state.

    Raises:
        DuplicateProjectError: If the host lists one identity twice.
        GraphLoadError: If the host cannot list its projects or references.
    """
    builder = GraphBuilder()
    try:
        for identity, handle in host.list_projects():
            builder.add_project(identity, handle, list(host.list_references(handle)))
    except HostError as e:
        raise GraphLoadError(str(e)) from e
    graph = builder.build()
    logger.debug(
        "Loaded %d projects (%d duplicate references ignored)",
        graph.node_count(),
        len(graph.duplicate_edges),
    )
    for duplicate in graph.duplicate_edges:
        logger.warning("Ignoring duplicate reference %s", duplicate)
    return graph


def find_referrers(graph: ProjectGraph, target: ProjectIdentity | str) -> list[ProjectNode]:
    """Return every project holding an edge to ``target``.

    The target itself is never included. Order follows graph-load order;
    callers must not rely on it.
    """
    return list(graph.iter_referrers(target))
