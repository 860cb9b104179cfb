"""Graph module - Project graph data structures.

Exports:
- NodeKind: Enum of tree node types
- ProjectIdentity: Stable project identity
- Handle: Opaque host location handle
- ProjectNode: Project with outbound reference edges
- ReferenceKind, ReferenceDescriptor, ReferenceEdge: Reference edges
- DuplicateEdge: Second reference to one identity (detection)
- MutationEntry, MutationLog: Host mutations of a request
- ProjectGraph, GraphBuilder, load_graph, find_referrers: Graph construction
"""

from slnmove.graph.builder import GraphBuilder, ProjectGraph, find_referrers, load_graph
from slnmove.graph.mutations import DuplicateEdge, MutationEntry, MutationLog
from slnmove.graph.ProjectNode import Handle, NodeKind, ProjectIdentity, ProjectNode
from slnmove.graph.relations import ReferenceDescriptor, ReferenceEdge, ReferenceKind

__all__ = [
    "NodeKind",
    "ProjectIdentity",
    "Handle",
    "ProjectNode",
    "ReferenceKind",
    "ReferenceDescriptor",
    "ReferenceEdge",
    "DuplicateEdge",
    "MutationEntry",
    "MutationLog",
    "ProjectGraph",
    "GraphBuilder",
    "load_graph",
    "find_referrers",
]
