"""In-memory project host.

Models a project tree the way IDE automation layers expose it: moving a
project is a remove followed by a re-add, the re-added project gets a
new handle, and path references other projects held to it are dropped
on removal. Strong-name references are left alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable
from uuid import uuid4

from slnmove.graph.ProjectNode import Handle, NodeKind, ProjectIdentity
from slnmove.graph.relations import ReferenceDescriptor, ReferenceKind
from slnmove.host import (
    HostDuplicateReferenceError,
    HostError,
    HostRefusedError,
    ProjectFileMissingError,
    StaleHandleError,
)

logger = logging.getLogger(__name__)


def _new_token() -> str:
    return uuid4().hex[:12]


@dataclass
class _HostProject:
    name: str
    path: str
    folder: str | None = None
    references: list[ReferenceDescriptor] = field(default_factory=list)
    token: str = field(default_factory=_new_token)


class InMemoryHost:
    """A ProjectHost backed by plain Python objects.

    Args:
        read_only: Refuse container creation.
        reject_moves: Project names whose move is refused before removal.
        missing_files: Project names whose file is gone when re-added, so
            the move removes them and then fails.
        unreadable: Project names whose references cannot be listed.

    Attributes:
        calls: Names of the host operations issued, in order.
    """

    def __init__(
        self,
        read_only: bool = False,
        reject_moves: Iterable[str] = (),
        missing_files: Iterable[str] = (),
        unreadable: Iterable[str] = (),
    ) -> None:
        self.read_only = read_only
        self.reject_moves = set(reject_moves)
        self.missing_files = set(missing_files)
        self.unreadable = set(unreadable)
        self.calls: list[str] = []
        self._projects: dict[str, _HostProject] = {}
        self._containers: dict[str, str] = {}
        self._scope = 0

    # ─────────────────────────────────────────────────────────────────────
    # Tree setup and inspection
    # ─────────────────────────────────────────────────────────────────────

    def add_project(
        self,
        name: str,
        references: Iterable[ReferenceDescriptor] = (),
        path: str | None = None,
        folder: str | None = None,
    ) -> None:
        """Add a project to the tree."""
        if folder is not None and folder not in self._containers:
            self.add_container(folder)
        self._projects[name] = _HostProject(
            name=name,
            path=path or f"{name}\\{name}.csproj",
            folder=folder,
            references=list(references),
        )

    def add_container(self, name: str) -> None:
        """Add a top-level container to the tree."""
        self._containers.setdefault(name, _new_token())

    def container_names(self) -> list[str]:
        """Names of all containers."""
        return list(self._containers)

    def children_of(self, container: str) -> list[str]:
        """Names of projects directly under ``container``."""
        return [p.name for p in self._projects.values() if p.folder == container]

    def folder_of(self, name: str) -> str | None:
        """Container a project sits in, or None at top level."""
        return self._projects[name].folder

    def remove_project(self, name: str) -> None:
        """Drop a project without touching references to it."""
        del self._projects[name]

    def has_project(self, name: str) -> bool:
        """Check if a project is part of the tree."""
        return name in self._projects

    def references_of(self, name: str) -> list[ReferenceDescriptor]:
        """Outbound references of a project, by name."""
        return list(self._projects[name].references)

    # ─────────────────────────────────────────────────────────────────────
    # ProjectHost
    # ─────────────────────────────────────────────────────────────────────

    def list_projects(self) -> list[tuple[ProjectIdentity, Handle]]:
        self.calls.append("list_projects")
        return [(ProjectIdentity(p.name), self._handle(p)) for p in self._projects.values()]

    def list_references(self, handle: Handle) -> list[ReferenceDescriptor]:
        self.calls.append("list_references")
        project = self._resolve(handle)
        if project.name in self.unreadable:
            raise HostError(f"Project file '{project.path}' cannot be read")
        return list(project.references)

    def find_top_level_node_by_name(self, name: str) -> Handle | None:
        self.calls.append("find_top_level_node_by_name")
        if name in self._containers:
            return Handle(self._containers[name], NodeKind.CONTAINER, self._scope)
        project = self._projects.get(name)
        if project is not None and project.folder is None:
            return self._handle(project)
        return None

    def create_grouping_container(self, name: str) -> Handle:
        self.calls.append("create_grouping_container")
        if self.read_only:
            raise HostRefusedError("Project tree is read-only")
        if self.find_top_level_node_by_name(name) is not None:
            raise HostRefusedError(f"A top-level node named '{name}' already exists")
        self.add_container(name)
        logger.debug("Created container %s", name)
        return Handle(self._containers[name], NodeKind.CONTAINER, self._scope)

    def move_into_container(self, handle: Handle, container: Handle) -> Handle:
        self.calls.append("move_into_container")
        project = self._resolve(handle)
        folder = self._container_name(container)
        if project.name in self.reject_moves:
            raise HostRefusedError(f"Host refused to move '{project.name}'")

        # Removal: the tree forgets the project and every path reference to it.
        del self._projects[project.name]
        for other in self._projects.values():
            other.references = [
                ref
                for ref in other.references
                if ref.kind != ReferenceKind.PATH or not ref.matches(project.name)
            ]
        self._scope += 1

        if project.name in self.missing_files:
            raise ProjectFileMissingError(f"Project file '{project.path}' not found")

        moved = _HostProject(
            name=project.name,
            path=project.path,
            folder=folder,
            references=project.references,
        )
        self._projects[moved.name] = moved
        return self._handle(moved)

    def add_reference(self, holder: Handle, referenced: Handle) -> None:
        self.calls.append("add_reference")
        source = self._resolve(holder)
        target = self._resolve(referenced)
        if any(ref.matches(target.name) for ref in source.references):
            raise HostDuplicateReferenceError(
                f"'{source.name}' already references '{target.name}'"
            )
        source.references.append(ReferenceDescriptor.from_path(target.path, target.name))

    # ─────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────

    def _handle(self, project: _HostProject) -> Handle:
        return Handle(project.token, NodeKind.PROJECT, self._scope)

    def _resolve(self, handle: Handle) -> _HostProject:
        if handle.kind == NodeKind.PROJECT and handle.scope == self._scope:
            for project in self._projects.values():
                if project.token == handle.token:
                    return project
        raise StaleHandleError(handle)

    def _container_name(self, handle: Handle) -> str:
        if handle.kind == NodeKind.CONTAINER:
            for name, token in self._containers.items():
                if token == handle.token:
                    return name
        raise StaleHandleError(handle)
