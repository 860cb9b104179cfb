"""Test helpers for building project trees and graphs.

Factories for the reference descriptors and in-memory trees used across
the core tests, plus string conversion helpers so tests assert on
observable output rather than internal state.
"""

from __future__ import annotations

from slnmove.graph import ProjectGraph, ReferenceDescriptor, load_graph
from slnmove.host.memory import InMemoryHost

# === Descriptor Factories ===

TOKEN = "b77a5c561934e089"


def project_ref(name: str) -> ReferenceDescriptor:
    """Path reference to a sibling project, as a project file would hold it."""
    return ReferenceDescriptor.from_path(f"..\\{name}\\{name}.csproj")


def strong_ref(name: str, version: str = "1.0.0.0") -> ReferenceDescriptor:
    """Strong-name reference to a compiled assembly."""
    return ReferenceDescriptor.strong_name(name, version=version, public_key_token=TOKEN)


# === Host Factories ===


def make_host(
    projects: dict[str, list[ReferenceDescriptor]],
    folders: dict[str, list[str]] | None = None,
    **kwargs,
) -> InMemoryHost:
    """Build an InMemoryHost.

    Args:
        projects: Project name -> outbound references, in tree order.
        folders: Container name -> names of projects placed in it.
        **kwargs: Passed to InMemoryHost.
    """
    host = InMemoryHost(**kwargs)
    placement = {}
    for folder, members in (folders or {}).items():
        host.add_container(folder)
        for member in members:
            placement[member] = folder
    for name, refs in projects.items():
        host.add_project(name, refs, folder=placement.get(name))
    return host


def scenario_host(**kwargs) -> InMemoryHost:
    """A, B and L with A -> L and B -> L project references."""
    return make_host(
        {
            "L": [],
            "A": [project_ref("L")],
            "B": [project_ref("L")],
        },
        **kwargs,
    )


def make_graph(projects: dict[str, list[ReferenceDescriptor]]) -> ProjectGraph:
    """Load a graph from a fresh in-memory tree."""
    return load_graph(make_host(projects))


# === String Helpers ===


def ids_string(nodes) -> str:
    """Comma-separated identities, sorted for order-independent asserts."""
    return ", ".join(sorted(str(getattr(n, "identity", n)) for n in nodes))


def refs_string(host: InMemoryHost, name: str) -> str:
    """Sorted simple names a project references in the host tree."""
    return ", ".join(sorted(ref.simple_name for ref in host.references_of(name)))
