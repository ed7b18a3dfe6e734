"""Timestamp parsing and formatting.

Accepts ``H:MM:SS``, ``MM:SS`` or bare seconds. Components are
colon-separated with left-to-right significance, and may be fractional
(``00:01:05.5``). Purely syntactic: no upper bound is enforced here.
"""

import math

from .errors import MalformedTimestamp

MAX_COMPONENTS = 3


def parse_timestamp(text: str | int | float) -> float:
    """Convert a timestamp to an offset in seconds.

    Raises:
        MalformedTimestamp: Empty string, too many components, or a
            component that is not a finite non-negative number.
    """
    if isinstance(text, bool) or text is None:
        raise MalformedTimestamp(f"Not a timestamp: {text!r}")
    if isinstance(text, (int, float)):
        text = str(text)

    s = str(text).strip()
    if not s:
        raise MalformedTimestamp("Empty timestamp")

    parts = s.split(":")
    if len(parts) > MAX_COMPONENTS:
        raise MalformedTimestamp(
            f"Too many components in timestamp '{s}' (max {MAX_COMPONENTS})"
        )

    seconds = 0.0
    for part in parts:
        part = part.strip()
        try:
            value = float(part)
        except ValueError:
            raise MalformedTimestamp(
                f"Non-numeric component '{part}' in timestamp '{s}'"
            ) from None
        if not math.isfinite(value) or value < 0:
            raise MalformedTimestamp(
                f"Invalid component '{part}' in timestamp '{s}'"
            )
        seconds = seconds * 60 + value
    return seconds


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS``, adding ``.mmm`` when fractional."""
    if seconds < 0 or not math.isfinite(seconds):
        raise ValueError(f"Cannot format offset {seconds!r}")

    millis = round(seconds * 1000)
    whole, ms = divmod(millis, 1000)
    hours, rem = divmod(whole, 3600)
    minutes, secs = divmod(rem, 60)
    text = f"{hours:02d}:{minutes:02d}:{secs:02d}"
    if ms:
        text += f".{ms:03d}"
    return text
