"""
slnmove.commands.referrers - Show which projects reference a project.
"""

from __future__ import annotations

import argparse
import json
import sys

from slnmove.config import get_config
from slnmove.errors import SlnmoveError
from slnmove.graph import find_referrers, load_graph
from slnmove.host.factory import open_host
from slnmove.relocation import ReferenceRebinder


def run(args: argparse.Namespace) -> int:
    """Run the referrers command."""
    try:
        config = get_config(args.config)
        host = open_host(args.solution, config)
        graph = load_graph(host)
    except SlnmoveError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    target = graph.find_by_id(args.project)
    if target is None:
        print(f"Error: Project '{args.project}' not found", file=sys.stderr)
        return 2

    referrers = find_referrers(graph, target.identity)
    captured = ReferenceRebinder(host).capture(referrers, target.identity)

    if args.json or config["output"]["format"] == "json":
        print(json.dumps([edge.to_dict() for edge in captured], indent=2))
        return 0

    if not captured:
        print(f"No project references {target.id}")
        return 0

    print(f"Projects referencing {target.id}")
    print("=" * 60)
    for edge in captured:
        print(f"{edge.holder}  [{edge.descriptor.kind.value}]  {edge.descriptor}")
    for duplicate in graph.duplicate_edges:
        if duplicate.referenced == target.id:
            print(f"  ! {duplicate}")
    return 0
