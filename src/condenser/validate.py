"""Event validation — decide keep or skip for each analyzer event.

Rules, checked in order:
  1. Both timestamps parse (else MALFORMED_TIMESTAMP).
  2. start < end (else NON_POSITIVE_DURATION).
  3. end <= media duration (else OUT_OF_RANGE).

Skips never abort a run. Kept intervals preserve input order.
"""

from dataclasses import dataclass
from enum import Enum

from .errors import MalformedTimestamp
from .events import Event
from .timecode import format_timestamp, parse_timestamp


class SkipReason(Enum):
    MALFORMED_TIMESTAMP = "MalformedTimestamp"
    NON_POSITIVE_DURATION = "NonPositiveDuration"
    OUT_OF_RANGE = "OutOfRange"
    DECODE_ERROR = "MediaDecodeError"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class ValidatedInterval:
    """A checked span: 0 <= start < end <= media duration."""

    start: float
    end: float
    event: Event
    index: int = 0

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class Skip:
    """An event left out of the reel, with the reason why."""

    index: int
    event: Event
    reason: SkipReason
    detail: str = ""

    def describe(self) -> str:
        text = f"[{self.index}] {self.event.span}: {self.reason}"
        if self.detail:
            text += f" ({self.detail})"
        return text


def validate_event(
    event: Event, media_duration: float, index: int = 0,
) -> ValidatedInterval | Skip:
    """Check one event against ordering and media-duration bounds."""
    try:
        start = parse_timestamp(event.start_time)
        end = parse_timestamp(event.end_time)
    except MalformedTimestamp as e:
        return Skip(index, event, SkipReason.MALFORMED_TIMESTAMP, str(e))

    if start >= end:
        return Skip(
            index, event, SkipReason.NON_POSITIVE_DURATION,
            f"start {format_timestamp(start)} is not before end {format_timestamp(end)}",
        )

    if end > media_duration:
        return Skip(
            index, event, SkipReason.OUT_OF_RANGE,
            f"end {format_timestamp(end)} exceeds video duration {media_duration:.2f}s",
        )

    return ValidatedInterval(start, end, event, index)


def validate_events(
    events: list[Event], media_duration: float,
) -> tuple[list[ValidatedInterval], list[Skip]]:
    """Validate every event. Returns (kept, skipped), both in input order."""
    kept = []
    skipped = []
    for i, event in enumerate(events):
        result = validate_event(event, media_duration, index=i)
        if isinstance(result, Skip):
            skipped.append(result)
        else:
            kept.append(result)
    return kept, skipped
