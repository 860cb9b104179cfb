"""Reference capture and rebinding around a move.

Referrer edges are captured before the move, because the descriptor may
be derived from the target's current location and is unreadable after
it. After the move every captured holder gets an edge to the target's
new handle, each holder independently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from slnmove.errors import DuplicateReferenceError, HolderNotFoundError, RebindError
from slnmove.graph.builder import ProjectGraph
from slnmove.graph.mutations import MutationEntry
from slnmove.graph.ProjectNode import Handle, ProjectIdentity, ProjectNode
from slnmove.graph.relations import ReferenceDescriptor
from slnmove.host import HostDuplicateReferenceError, HostError, ProjectHost

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapturedEdge:
    """A referrer edge recorded before the move.

    Attributes:
        holder: Identity of the referring project.
        descriptor: The exact descriptor that pointed at the target.
    """

    holder: ProjectIdentity
    descriptor: ReferenceDescriptor

    def to_dict(self) -> dict[str, str]:
        return {
            "holder": str(self.holder),
            "kind": self.descriptor.kind.value,
            "descriptor": str(self.descriptor),
        }


@dataclass
class RebindOutcome:
    """Per-holder results of one rebind pass."""

    rebound: list[ProjectIdentity] = field(default_factory=list)
    failures: dict[ProjectIdentity, RebindError] = field(default_factory=dict)


class ReferenceRebinder:
    """Captures referrer edges and recreates them against a new handle."""

    def __init__(self, host: ProjectHost) -> None:
        self._host = host

    def capture(
        self, referrers: Iterable[ProjectNode], target: ProjectIdentity
    ) -> list[CapturedEdge]:
        """Record the edge each referrer holds to ``target``."""
        captured = []
        for node in referrers:
            edge = node.find_edge_to(target)
            if edge is None:
                continue
            captured.append(CapturedEdge(holder=node.identity, descriptor=edge.descriptor))
            logger.debug("Captured %s", edge)
        return captured

    def rebind(
        self,
        captured: list[CapturedEdge],
        new_target: Handle,
        target: ProjectIdentity,
        graph: ProjectGraph | None = None,
    ) -> RebindOutcome:
        """Add an edge from every captured holder to ``new_target``.

        Holder handles are fetched again from the host, since the move
        invalidated the ones loaded with the graph. A failure on one
        holder is recorded and the remaining holders are still attempted.

        Args:
            captured: Edges returned by ``capture``.
            new_target: Handle the host returned for the moved project.
            target: Identity of the moved project.
            graph: Graph whose mutation log records added references.
        """
        outcome = RebindOutcome()
        if not captured:
            return outcome

        try:
            handles = {identity: handle for identity, handle in self._host.list_projects()}
        except HostError as e:
            logger.warning("Could not list projects after the move: %s", e)
            for edge in captured:
                outcome.failures[edge.holder] = RebindError(str(edge.holder), str(e))
            return outcome

        for edge in captured:
            try:
                self._rebind_one(edge.holder, handles.get(edge.holder), new_target, target)
            except RebindError as e:
                logger.warning("Could not rebind %s: %s", edge.holder, e.reason)
                outcome.failures[edge.holder] = e
                continue

            outcome.rebound.append(edge.holder)
            logger.info("Rebound %s -> %s", edge.holder, target)
            if graph is not None:
                graph.mutation_log.append(
                    MutationEntry(
                        operation="add_reference",
                        target_id=str(edge.holder),
                        before_state={"descriptor": str(edge.descriptor)},
                        after_state={"referenced": str(target), "handle": str(new_target)},
                    )
                )
        return outcome

    def _rebind_one(
        self,
        holder: ProjectIdentity,
        holder_handle: Handle | None,
        new_target: Handle,
        target: ProjectIdentity,
    ) -> None:
        if holder_handle is None:
            raise HolderNotFoundError(str(holder), "project is no longer in the tree")

        try:
            existing = self._host.list_references(holder_handle)
        except HostError as e:
            raise RebindError(str(holder), str(e)) from e

        for descriptor in existing:
            if descriptor.matches(target):
                raise DuplicateReferenceError(
                    str(holder), f"already references '{target}' as {descriptor}"
                )

        try:
            self._host.add_reference(holder_handle, new_target)
        except HostDuplicateReferenceError as e:
            raise DuplicateReferenceError(str(holder), str(e)) from e
        except HostError as e:
            raise RebindError(str(holder), str(e)) from e
