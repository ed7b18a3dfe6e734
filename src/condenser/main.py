"""Subcommand dispatcher for condenser.

Usage:
    condenser condense match.mp4 events.json --output condensed_match.mp4
    condenser check    match.mp4 events.json
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="condenser",
        description="Condense a recorded match into a captioned highlight reel.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("condense", help="Build the highlight reel")
    subparsers.add_parser("check", help="Validate events against the video, no encode")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "condense":
        from .condense_cli import main as condense_main
        condense_main(remaining)
    elif parsed.command == "check":
        from .check_cli import main as check_main
        check_main(remaining)


if __name__ == "__main__":
    main()
