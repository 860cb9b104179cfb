"""Mutation types for relocation requests.

This module provides dataclasses for tracking the host mutations a
relocation issues, and for duplicate references detected at load time.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4


@dataclass(frozen=True)
class DuplicateEdge:
    """A second reference from one holder to the same identity.

    Captured during graph load. The first edge is kept in the graph.

    Attributes:
        holder_id: Identity of the project carrying both references.
        referenced: Simple name both references resolve to.
        descriptor: Rendering of the dropped (second) descriptor.
    """

    holder_id: str
    referenced: str
    descriptor: str

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"{self.holder_id} --> {self.referenced} (duplicate: {self.descriptor})"


@dataclass
class MutationEntry:
    """Single host mutation record.

    Attributes:
        id: Unique mutation ID (UUID4).
        timestamp: When the mutation was issued.
        operation: Operation type ("create_container", "move_project",
            "add_reference").
        target_id: Primary target of the mutation.
        before_state: State before mutation.
        after_state: State after mutation.
        irreversible: Whether the mutation cannot be undone by the core.
    """

    operation: str
    target_id: str
    before_state: dict[str, Any]
    after_state: dict[str, Any]
    irreversible: bool = False
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"[{self.id[:8]}] {self.operation}({self.target_id})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "operation": self.operation,
            "target_id": self.target_id,
            "before": dict(self.before_state),
            "after": dict(self.after_state),
            "irreversible": self.irreversible,
        }


class MutationLog:
    """Append-only record of host mutations within one request.

    Example:
        >>> log = MutationLog()
        >>> log.append(
        ...     MutationEntry(
        ...         operation="create_container",
        ...         target_id="Libs",
        ...         before_state={"exists": False},
        ...         after_state={"exists": True},
        ...     )
        ... )
        >>> len(log)
        1
    """

    def __init__(self) -> None:
        """Initialize an empty mutation log."""
        self._entries: list[MutationEntry] = []

    def append(self, entry: MutationEntry) -> None:
        """Append a mutation entry to the log."""
        self._entries.append(entry)

    def iter_entries(self) -> Iterator[MutationEntry]:
        """Iterate over all entries in chronological order."""
        yield from self._entries

    def by_operation(self, operation: str) -> list[MutationEntry]:
        """Return entries of one operation type, oldest first."""
        return [e for e in self._entries if e.operation == operation]

    def __len__(self) -> int:
        """Return the number of entries in the log."""
        return len(self._entries)

    def last(self) -> MutationEntry | None:
        """Return the most recent entry, or None if empty."""
        return self._entries[-1] if self._entries else None


__all__ = ["DuplicateEdge", "MutationEntry", "MutationLog"]
