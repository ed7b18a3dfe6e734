"""CLI for a dry run — validate events against the video without encoding.

Usage:
    condenser check match.mp4 events.json
"""

import argparse
import sys

from .errors import CondenserError
from .events import EVENT_TYPES, WINNING_SHOTS
from .pipeline import plan
from .timecode import format_timestamp


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Check an event list against a match video (no rendering).",
    )
    parser.add_argument("video", help="Path to the source match video")
    parser.add_argument("events", help="Path to the analyzer event list")
    parsed = parser.parse_args(args)

    try:
        result = plan(parsed.video, parsed.events)
    except CondenserError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Video: {result.video_path} ({result.media_duration:.1f}s, {result.fps:g}fps)")
    print(f"Events: {len(result.events)}  kept: {len(result.kept)}  skipped: {len(result.skipped)}")
    for iv in result.kept:
        ev = iv.event
        flags = []
        if ev.event_type not in EVENT_TYPES:
            flags.append(f"unknown event_type '{ev.event_type}'")
        if ev.winning_shot not in WINNING_SHOTS:
            flags.append(f"unknown winning_shot '{ev.winning_shot}'")
        tag = f"  ({'; '.join(flags)})" if flags else ""
        print(f"  KEEP   [{iv.index}] {ev.span}  {iv.duration:.1f}s  {ev.event_type}{tag}")
    for skip in result.skipped:
        print(f"  SKIP   {skip.describe()}")
    print(f"Expected reel duration: {format_timestamp(result.expected_duration)}")

    if not result.kept:
        print("No valid clips: a reel would not be produced.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
