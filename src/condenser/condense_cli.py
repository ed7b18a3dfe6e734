"""CLI for building a highlight reel.

Usage:
    condenser condense match.mp4 events.json
    condenser condense match.mp4 events.json --output reel.mp4 --config reel.yaml
    condenser condense match.mp4 events.json --no-captions --workers 4 --gpu
"""

import argparse
import sys

from .config import load_config
from .errors import CondenserError, NoValidClips
from .pipeline import DEFAULT_OUTPUT, condense


def _parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="Cut the analyzer's events out of a match video into one reel.",
    )
    parser.add_argument(
        "video",
        help="Path to the source match video",
    )
    parser.add_argument(
        "events",
        help="Path to the analyzer event list (JSON or YAML)",
    )
    parser.add_argument(
        "--output", default=DEFAULT_OUTPUT,
        help=f"Output mp4 path (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to YAML run config (codec, caption style, workers)",
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Parallel workers for clip preparation (default: from config, 1)",
    )
    parser.add_argument(
        "--gpu", action="store_true",
        help="Use GPU encoding (h264_nvenc). Default is CPU (libx264).",
    )
    parser.add_argument(
        "--no-captions", action="store_true",
        help="Skip caption overlays",
    )
    parser.add_argument(
        "--quiet", action="store_true",
        help="Only print the final summary",
    )
    return parser.parse_args(args)


def main(args=None):
    parsed = _parse_args(args)

    try:
        config = load_config(parsed.config).with_overrides(
            gpu=parsed.gpu,
            captions=False if parsed.no_captions else None,
            workers=parsed.workers,
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    if not parsed.quiet:
        print("--- Match Condenser ---")
        print(f"Video:    {parsed.video}")
        print(f"Analysis: {parsed.events}")

    try:
        result = condense(
            parsed.video, parsed.events, parsed.output,
            config=config, quiet=parsed.quiet,
        )
    except NoValidClips as e:
        print(f"Error: {e}", file=sys.stderr)
        for skip in e.skipped:
            print(f"  - {skip.describe()}", file=sys.stderr)
        sys.exit(1)
    except (CondenserError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print()
    print(result.format_summary())


if __name__ == "__main__":
    main()
