"""Relocation module - Move a project and keep its inbound references.

Exports:
- RelocationEngine: Orchestrates one relocation request
- RelocationResult: What a relocation did
- RelocationState: Progress of a request
- ContainerLocator: Finds or creates grouping containers
- ReferenceRebinder, CapturedEdge: Capture and restore referrer edges
"""

from slnmove.relocation.containers import ContainerLocator
from slnmove.relocation.engine import RelocationEngine, RelocationResult, RelocationState
from slnmove.relocation.rebinder import CapturedEdge, RebindOutcome, ReferenceRebinder

__all__ = [
    "RelocationEngine",
    "RelocationResult",
    "RelocationState",
    "ContainerLocator",
    "ReferenceRebinder",
    "CapturedEdge",
    "RebindOutcome",
]
