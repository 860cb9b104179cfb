"""
slnmove.commands.apply - Run the relocations listed in the config file.

Each ``[[relocate.moves]]`` entry is an independent relocation request
against a freshly opened solution; a failure stops the run but earlier
relocations stay saved.
"""

from __future__ import annotations

import argparse
import json
import sys

from slnmove.commands.relocate import EXIT_ABORTED, EXIT_OK, EXIT_PARTIAL, execute, print_result
from slnmove.config import get_config
from slnmove.errors import SlnmoveError
from slnmove.host.factory import open_host


def run(args: argparse.Namespace) -> int:
    """Run the apply command."""
    try:
        config = get_config(args.config)
    except SlnmoveError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ABORTED

    moves = config["relocate"]["moves"]
    if not moves:
        print("No [[relocate.moves]] entries configured")
        return EXIT_OK

    dry_run = args.dry_run or config["relocate"]["dry_run"]
    as_json = args.json or config["output"]["format"] == "json"
    default_folder = config["relocate"]["folder"]

    worst = EXIT_OK
    reports = []
    for move in moves:
        # Dry runs never save, so later moves would not see earlier ones.
        try:
            host = open_host(args.solution, config)
        except SlnmoveError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_ABORTED

        code, result = execute(
            host, move["project"], move.get("folder") or default_folder, dry_run=dry_run
        )
        if result is not None:
            reports.append(result.to_dict())
            if not as_json:
                print_result(result, dry_run=dry_run)
        if code not in (EXIT_OK, EXIT_PARTIAL):
            worst = code
            break
        worst = max(worst, code)

    if as_json:
        print(json.dumps(reports, indent=2))
    return worst
