"""Event list loader — the analyzer's output, as read by the condenser.

Event list schema (JSON or YAML):
  [
    {
      "start_time": "00:00:05",     # HH:MM:SS, MM:SS or bare seconds
      "end_time": "00:00:15",
      "event_type": "Rally",        # defaults to "Rally"
      "winning_shot": "Forehand",   # defaults to "N/A"
      "winner": "Server"            # defaults to ""
    }
  ]

A top-level mapping with an ``events`` key holding the list is accepted too.
Unknown fields on an event are ignored. Timestamps are not parsed here;
that is the validator's job, so a bad timestamp skips one event instead of
failing the whole list.
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import EventListError, InputNotFound


EVENT_TYPES = ("Rally", "Double Fault")
WINNING_SHOTS = ("Forehand", "Backhand", "Volley", "Serve", "Overhead", "N/A")

DEFAULT_EVENT_TYPE = "Rally"
DEFAULT_WINNING_SHOT = "N/A"
DEFAULT_WINNER = ""

# Analyzers sometimes wrap their JSON in a Markdown code fence.
_FENCE_RE = re.compile(r"^\s*```[\w-]*\s*\n(.*?)\n\s*```\s*$", re.DOTALL)


@dataclass(frozen=True)
class Event:
    """One scored span of play, immutable once parsed."""

    start_time: str
    end_time: str
    event_type: str = DEFAULT_EVENT_TYPE
    winning_shot: str = DEFAULT_WINNING_SHOT
    winner: str = DEFAULT_WINNER

    @classmethod
    def from_dict(cls, raw: dict) -> "Event":
        """Build an Event from one analyzer object, applying defaults."""
        def _text(key, default):
            value = raw.get(key)
            if value is None:
                return default
            return str(value).strip()

        return cls(
            start_time=_text("start_time", ""),
            end_time=_text("end_time", ""),
            event_type=_text("event_type", DEFAULT_EVENT_TYPE) or DEFAULT_EVENT_TYPE,
            winning_shot=_text("winning_shot", DEFAULT_WINNING_SHOT) or DEFAULT_WINNING_SHOT,
            winner=_text("winner", DEFAULT_WINNER),
        )

    @property
    def caption(self) -> str:
        """Two-line caption: '<event_type> | <winner>' then '<winning_shot>'."""
        return f"{self.event_type} | {self.winner}\n{self.winning_shot}"

    @property
    def span(self) -> str:
        return f"{self.start_time} -> {self.end_time}"


def parse_events(raw) -> list[Event]:
    """Convert decoded JSON/YAML data into a list of Events.

    Raises:
        EventListError: Data is not a sequence of objects.
    """
    if isinstance(raw, dict):
        if "events" not in raw:
            raise EventListError(
                "Event list: expected a list of events or a mapping with an 'events' key"
            )
        raw = raw["events"]

    if not isinstance(raw, list):
        raise EventListError(
            f"Event list: expected a list, got {type(raw).__name__}"
        )

    events = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise EventListError(
                f"Event {i}: expected an object, got {type(item).__name__}"
            )
        events.append(Event.from_dict(item))
    return events


def _strip_fence(text: str) -> str:
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def load_events(events_path: str | Path) -> list[Event]:
    """Load and parse an event list file.

    ``.yaml``/``.yml`` files are read with PyYAML; anything else is read
    as JSON (after unwrapping an optional Markdown code fence).

    Raises:
        InputNotFound: File does not exist.
        EventListError: File cannot be decoded or is structurally invalid.
    """
    p = Path(events_path)
    if not p.is_file():
        raise InputNotFound(f"Event list not found: {events_path}")

    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in (".yaml", ".yml"):
            raw = yaml.safe_load(text)
            if raw is None:
                # An empty YAML document is an empty list.
                return []
        else:
            raw = json.loads(_strip_fence(text))
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise EventListError(f"Event list {events_path}: cannot decode ({e})") from e

    return parse_events(raw)
