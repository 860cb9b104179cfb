"""
slnmove.commands.relocate - Move a project into a solution folder.
"""

from __future__ import annotations

import argparse
import json
import sys

from slnmove.config import get_config
from slnmove.errors import MoveError, SlnmoveError
from slnmove.host.factory import open_host
from slnmove.host.slnx import SlnxHost
from slnmove.relocation import RelocationEngine, RelocationResult

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_ABORTED = 2
EXIT_MOVE_FAILED = 3


def run(args: argparse.Namespace) -> int:
    """Run the relocate command."""
    try:
        config = get_config(args.config)
        host = open_host(args.solution, config)
    except SlnmoveError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ABORTED

    folder = args.folder or config["relocate"]["folder"]
    dry_run = args.dry_run or config["relocate"]["dry_run"]
    as_json = args.json or config["output"]["format"] == "json"

    code, result = execute(host, args.project, folder, dry_run=dry_run)
    if result is not None:
        if as_json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print_result(result, dry_run=dry_run)
    return code


def execute(
    host: SlnxHost,
    project: str,
    folder: str,
    dry_run: bool = False,
) -> tuple[int, RelocationResult | None]:
    """Relocate one project and save unless ``dry_run``.

    Returns:
        Exit code and the result (None when the request failed).
    """
    engine = RelocationEngine(host)
    try:
        result = engine.relocate(project, folder)
    except MoveError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("No files were written.", file=sys.stderr)
        return EXIT_MOVE_FAILED, None
    except SlnmoveError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ABORTED, None

    if not dry_run:
        try:
            host.save()
        except OSError as e:
            print(f"Error: could not write changes: {e}", file=sys.stderr)
            return EXIT_MOVE_FAILED, result
    return (EXIT_OK if result.ok else EXIT_PARTIAL), result


def print_result(result: RelocationResult, dry_run: bool = False) -> None:
    """Print a human-readable summary."""
    prefix = "[dry-run] " if dry_run else ""
    print(f"{prefix}Moved {result.target} into {result.container}")
    for holder in result.rebound:
        print(f"  ✓ {holder} -> {result.target}")
    for holder, error in result.failures.items():
        print(f"  ✗ {holder}: {error.reason} ({type(error).__name__})")
    print(f"{len(result.rebound)} reference(s) restored, {len(result.failures)} failed")
