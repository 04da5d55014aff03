"""Command-line interface for brewfeed.

Usage:
    brewfeed list
    brewfeed list --sort-by name --descending --search denver
    brewfeed list --format json
    brewfeed autocomplete bend --limit 5
"""

import argparse
import asyncio
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from brewfeed import __version__
from brewfeed.config import settings
from brewfeed.engine import SORT_FIELDS
from brewfeed.errors import NoDataSource
from brewfeed.pipeline.orchestrator import Orchestrator

logger = logging.getLogger(__name__)

_executor = ThreadPoolExecutor(max_workers=1)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser with all commands and arguments.
    """
    parser = argparse.ArgumentParser(
        prog="brewfeed",
        description="brewfeed: cached brewery lookup with offline fallback",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  brewfeed list
  brewfeed list --sort-by name --search denver
  brewfeed autocomplete bend --limit 5
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list command
    list_parser = subparsers.add_parser(
        "list",
        help="List breweries",
        description="Fetch, search and sort breweries",
    )
    list_parser.add_argument(
        "--sort-by",
        type=str,
        default="city",
        help=f"Sort field, one of {', '.join(SORT_FIELDS)} (default: city)",
    )
    list_parser.add_argument(
        "--descending",
        action="store_true",
        help="Sort in descending order",
    )
    list_parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="Case-insensitive match on name, city or phone",
    )
    _add_common_arguments(list_parser)

    # autocomplete command
    autocomplete_parser = subparsers.add_parser(
        "autocomplete",
        help="Suggest brewery names and cities",
    )
    autocomplete_parser.add_argument(
        "query",
        type=str,
        help="Partial name, city or phone",
    )
    autocomplete_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum number of suggestions (default: 10)",
    )
    _add_common_arguments(autocomplete_parser)

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    subparser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help=f"Snapshot file (default: {settings.snapshot_path})",
    )


def _run_async(coro):
    """Run an async coroutine from synchronous CLI context.

    Spins up a new event loop in a dedicated thread to avoid conflicts
    with any existing event loop.
    """
    def _target():
        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()

    future = _executor.submit(_target)
    return future.result()


def _build_orchestrator(args: argparse.Namespace) -> Orchestrator:
    config = settings
    if args.snapshot is not None:
        config = settings.model_copy(update={"snapshot_path": str(args.snapshot)})
    return Orchestrator.from_settings(config)


def cmd_list(args: argparse.Namespace) -> int:
    """Execute the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        orchestrator = _build_orchestrator(args)
        records = _run_async(
            orchestrator.get_records(
                sort_by=args.sort_by,
                descending=args.descending,
                search=args.search,
            )
        )

        if args.format == "json":
            print(json.dumps([r.to_dict() for r in records], indent=2))
        else:
            for r in records:
                print(f"{r.name}\t{r.city}\t{r.phone}")

        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except NoDataSource as e:
        logger.error("No brewery data available: %s (cause: %s)", e, e.cause)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error("List failed: %s", e, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_autocomplete(args: argparse.Namespace) -> int:
    """Execute the autocomplete command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        orchestrator = _build_orchestrator(args)
        suggestions = _run_async(orchestrator.autocomplete(args.query, limit=args.limit))

        if args.format == "json":
            print(json.dumps(suggestions, indent=2))
        else:
            for s in suggestions:
                print(f"{s['name']} ({s['city']})")

        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error("Autocomplete failed: %s", e, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_version(args: argparse.Namespace) -> int:
    """Execute the version command."""
    print(f"brewfeed v{__version__}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = create_parser()
    args = parser.parse_args(argv)

    # Route to command handler
    if args.command == "list":
        return cmd_list(args)
    elif args.command == "autocomplete":
        return cmd_autocomplete(args)
    elif args.command == "version":
        return cmd_version(args)
    else:
        # No command specified
        parser.print_help()
        return 0


def cli_entry() -> None:
    """Console script entry point for setuptools."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
