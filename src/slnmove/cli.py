"""
slnmove.cli - Command-line interface.

Main entry point for the slnmove CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from slnmove import __version__
from slnmove.commands import apply, referrers, relocate


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="slnmove",
        description="Move projects into solution folders without losing references",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  slnmove relocate ClassLibrary1 Libs     # Move ClassLibrary1 into the Libs folder
  slnmove relocate ClassLibrary1 --dry-run
  slnmove referrers ClassLibrary1         # Who references ClassLibrary1
  slnmove apply                           # Run [[relocate.moves]] from .slnmove.toml

Exit codes:
  0  success
  1  moved, but some references could not be restored
  2  nothing changed (project/folder not found, bad config)
  3  move failed; check the solution manually

For detailed command help: slnmove <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"slnmove {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Verbose output (-vv for debug)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    # Options shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--solution",
        type=Path,
        help="Path to the .slnx solution (default: from config or current directory)",
        metavar="PATH",
    )
    common.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output JSON",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # relocate command
    relocate_parser = subparsers.add_parser(
        "relocate",
        parents=[common],
        help="Move a project into a solution folder, keeping references to it",
    )
    relocate_parser.add_argument("project", help="Name of the project to move")
    relocate_parser.add_argument(
        "folder",
        nargs="?",
        help="Solution folder name (default: relocate.folder from config)",
    )
    relocate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing files",
    )

    # referrers command
    referrers_parser = subparsers.add_parser(
        "referrers",
        parents=[common],
        help="List projects that reference a project",
    )
    referrers_parser.add_argument("project", help="Name of the referenced project")

    # apply command
    apply_parser = subparsers.add_parser(
        "apply",
        parents=[common],
        help="Run the relocations listed under [[relocate.moves]]",
    )
    apply_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing files",
    )

    return parser


def configure_logging(verbose: int, quiet: bool) -> None:
    """Configure the root logger from -v/-q."""
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install slnmove[completion]
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose, args.quiet)

    try:
        if args.command == "relocate":
            return relocate.run(args)
        elif args.command == "referrers":
            return referrers.run(args)
        elif args.command == "apply":
            return apply.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
