import argparse
import sys

from infrastructure.logging import setup_logger
from infrastructure.telemetry import setup_opentelemetry, shutdown_opentelemetry

from adapters.serve_cli import ServeCLI
from adapters.version_cli import VersionCLI


def main() -> int:
    """
    Unified entry point for the `catalog` command.

    Subcommands:
        serve          – Run the read-only HTTP API.
        next-version   – Print the next version number of an edition.
    """
    # Top‑level parser only defines subcommands; each subcommand parses its own arguments.
    parser = argparse.ArgumentParser(
        prog="catalog", description="Dataset catalog API with multiple subcommands"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log at DEBUG regardless of LOG_LEVEL"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Serve the dataset catalog API")
    subparsers.add_parser(
        "next-version", help="Print the next version number of an edition"
    )

    args, remaining = parser.parse_known_args()

    # Setup shared infrastructure
    setup_logger(verbose=args.verbose)
    provider = setup_opentelemetry()

    try:
        if args.command == "serve":
            return ServeCLI().run(remaining)
        elif args.command == "next-version":
            return VersionCLI().run(remaining)
        else:
            parser.error(f"Unknown subcommand: {args.command}")
            return 2
    finally:
        shutdown_opentelemetry(provider)


if __name__ == "__main__":
    sys.exit(main())
