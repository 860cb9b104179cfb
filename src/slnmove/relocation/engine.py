"""Relocation engine - moves one project into a container and rebinds its referrers.

State machine per request::

    IDLE -> REFERRERS_CAPTURED -> MOVED -> REBOUND
                          |
                          +-> ABORTED

ABORTED is reached only when the move fails. Once MOVED, the request
always ends REBOUND; partial rebind failures do not roll back the move.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from slnmove.errors import (
    MovedProjectMissingError,
    MoveError,
    ProjectNotFoundError,
    RebindError,
)
from slnmove.graph.builder import ProjectGraph, find_referrers, load_graph
from slnmove.graph.mutations import MutationEntry
from slnmove.graph.ProjectNode import Handle, ProjectIdentity
from slnmove.host import HostError, ProjectFileMissingError, ProjectHost
from slnmove.relocation.containers import ContainerLocator
from slnmove.relocation.rebinder import CapturedEdge, ReferenceRebinder

logger = logging.getLogger(__name__)


class RelocationState(Enum):
    """Progress of a relocation request."""

    IDLE = "idle"
    REFERRERS_CAPTURED = "referrers-captured"
    MOVED = "moved"
    REBOUND = "rebound"
    ABORTED = "aborted"


@dataclass
class RelocationResult:
    """Outcome of a relocation that got past the move.

    Attributes:
        target: Identity of the relocated project.
        container: Name of the container it now lives in.
        new_handle: Host handle of the re-added project.
        captured: Referrer edges recorded before the move.
        rebound: Holders that got their edge back.
        failures: Holders that did not, with the reason.
        mutations: Host mutations issued, in order.
    """

    target: ProjectIdentity
    container: str
    new_handle: Handle
    captured: list[CapturedEdge] = field(default_factory=list)
    rebound: list[ProjectIdentity] = field(default_factory=list)
    failures: dict[ProjectIdentity, RebindError] = field(default_factory=dict)
    mutations: list[MutationEntry] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every captured holder was rebound."""
        return not self.failures

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "target": str(self.target),
            "container": self.container,
            "new_handle": str(self.new_handle),
            "captured": [edge.to_dict() for edge in self.captured],
            "rebound": [str(holder) for holder in self.rebound],
            "failures": {
                str(holder): {"error": type(error).__name__, "reason": error.reason}
                for holder, error in self.failures.items()
            },
            "mutations": [entry.to_dict() for entry in self.mutations],
        }


class RelocationEngine:
    """Orchestrates referrer capture, container resolution, move and rebind.

    The host is injected so the engine can run against any ProjectHost.
    Not safe for concurrent requests against the same tree; callers
    serialize requests.

    Example:
        >>> engine = RelocationEngine(host)
        >>> result = engine.relocate("ClassLibrary1", "Libs")
        >>> result.ok
        True
    """

    def __init__(
        self,
        host: ProjectHost,
        locator: ContainerLocator | None = None,
        rebinder: ReferenceRebinder | None = None,
    ) -> None:
        self.host = host
        self.locator = locator or ContainerLocator(host)
        self.rebinder = rebinder or ReferenceRebinder(host)
        self.state = RelocationState.IDLE

    def relocate(self, target_name: str, container_name: str) -> RelocationResult:
        """Relocate ``target_name`` into ``container_name``.

        Loads a fresh graph from the host for this request.

        Raises:
            GraphLoadError: The host could not be read; nothing was changed.
            ProjectNotFoundError: Target absent; nothing was changed.
            ContainerCreationError: Container unavailable; nothing was moved.
            MoveError: The host rejected the move; the project may be
                detached and needs a manual check.
        """
        self.state = RelocationState.IDLE
        return self.relocate_in(load_graph(self.host), target_name, container_name)

    def relocate_in(
        self, graph: ProjectGraph, target_name: str, container_name: str
    ) -> RelocationResult:
        """Relocate against an already loaded graph.

        The graph must have been loaded from ``self.host`` with no host
        mutation since.
        """
        self.state = RelocationState.IDLE
        target = graph.find_by_id(target_name)
        if target is None:
            raise ProjectNotFoundError(target_name)

        referrers = find_referrers(graph, target.identity)
        captured = self.rebinder.capture(referrers, target.identity)
        self.state = RelocationState.REFERRERS_CAPTURED
        logger.info(
            "Relocating %s into %s (%d referrers)", target.id, container_name, len(captured)
        )

        container = self.locator.resolve(graph, container_name)
        new_handle = self._move(graph, target.identity, target.handle, container, container_name)
        self.state = RelocationState.MOVED

        outcome = self.rebinder.rebind(captured, new_handle, target.identity, graph)
        self.state = RelocationState.REBOUND

        return RelocationResult(
            target=target.identity,
            container=container_name,
            new_handle=new_handle,
            captured=captured,
            rebound=outcome.rebound,
            failures=outcome.failures,
            mutations=list(graph.mutation_log.iter_entries()),
        )

    def _move(
        self,
        graph: ProjectGraph,
        target: ProjectIdentity,
        handle: Handle,
        container: Handle,
        container_name: str,
    ) -> Handle:
        try:
            new_handle = self.host.move_into_container(handle, container)
        except ProjectFileMissingError as e:
            self.state = RelocationState.ABORTED
            logger.error("Project %s was removed but could not be re-added: %s", target, e)
            raise MovedProjectMissingError(str(target), str(e)) from e
        except HostError as e:
            self.state = RelocationState.ABORTED
            logger.error("Move of %s rejected: %s", target, e)
            raise MoveError(str(target), str(e)) from e

        graph.mutation_log.append(
            MutationEntry(
                operation="move_project",
                target_id=str(target),
                before_state={"handle": str(handle)},
                after_state={"container": container_name, "handle": str(new_handle)},
                irreversible=True,
            )
        )
        return new_handle
