"""Container lookup and creation."""

from __future__ import annotations

import logging

from slnmove.errors import ContainerCreationError
from slnmove.graph.builder import ProjectGraph
from slnmove.graph.mutations import MutationEntry
from slnmove.graph.ProjectNode import Handle, NodeKind
from slnmove.host import HostError, ProjectHost

logger = logging.getLogger(__name__)


class ContainerLocator:
    """Finds a top-level grouping container by name, creating it on first use.

    Resolving the same name twice against the same tree yields the same
    container; a second one is never created.
    """

    def __init__(self, host: ProjectHost) -> None:
        self._host = host

    def resolve(self, graph: ProjectGraph, name: str) -> Handle:
        """Return the handle of container ``name``.

        Raises:
            ContainerCreationError: If the name belongs to a top-level
                project or the host refuses creation. Not retried.
        """
        try:
            existing = self._host.find_top_level_node_by_name(name)
        except HostError as e:
            raise ContainerCreationError(name, str(e)) from e

        if existing is not None:
            if existing.kind != NodeKind.CONTAINER:
                raise ContainerCreationError(name, "a project with that name is at top level")
            logger.debug("Reusing container %s", name)
            return existing

        if graph.find_by_id(name) is not None:
            logger.debug("Container %s shares its name with a nested project", name)

        try:
            handle = self._host.create_grouping_container(name)
        except HostError as e:
            raise ContainerCreationError(name, str(e)) from e

        graph.mutation_log.append(
            MutationEntry(
                operation="create_container",
                target_id=name,
                before_state={"exists": False},
                after_state={"exists": True, "handle": str(handle)},
            )
        )
        logger.info("Created container %s", name)
        return handle
