"""Tests for the event list loader."""

import json

import pytest
import yaml

from condenser.errors import EventListError, InputNotFound
from condenser.events import Event, load_events, parse_events

from conftest import event


class TestEventFromDict:
    def test_all_fields(self):
        ev = Event.from_dict(event("00:00:05", "00:00:15", "Rally", "Forehand", "Server"))
        assert ev.start_time == "00:00:05"
        assert ev.end_time == "00:00:15"
        assert ev.event_type == "Rally"
        assert ev.winning_shot == "Forehand"
        assert ev.winner == "Server"

    def test_optional_fields_default(self):
        ev = Event.from_dict({"start_time": "00:01", "end_time": "00:05"})
        assert ev.winning_shot == "N/A"
        assert ev.winner == ""
        assert ev.event_type == "Rally"

    def test_null_fields_default(self):
        ev = Event.from_dict({"start_time": "1", "end_time": "2", "winner": None, "winning_shot": None})
        assert ev.winner == ""
        assert ev.winning_shot == "N/A"

    def test_unknown_fields_ignored(self):
        ev = Event.from_dict({"start_time": "1", "end_time": "2", "confidence": 0.9})
        assert not hasattr(ev, "confidence")

    def test_missing_timestamps_are_empty(self):
        ev = Event.from_dict({"event_type": "Rally"})
        assert ev.start_time == ""
        assert ev.end_time == ""

    def test_numeric_timestamps_kept_as_text(self):
        ev = Event.from_dict({"start_time": 5, "end_time": 15.5})
        assert ev.start_time == "5"
        assert ev.end_time == "15.5"

    def test_caption_two_lines(self):
        ev = Event.from_dict(event("0", "1", "Double Fault", "N/A", "Receiver"))
        assert ev.caption == "Double Fault | Receiver\nN/A"

    def test_event_is_immutable(self):
        ev = Event.from_dict(event("0", "1"))
        with pytest.raises(AttributeError):
            ev.winner = "someone else"


class TestParseEvents:
    def test_list_of_objects(self):
        events = parse_events([event("0", "1"), event("2", "3")])
        assert [e.start_time for e in events] == ["0", "2"]

    def test_events_key_mapping(self):
        events = parse_events({"events": [event("0", "1")]})
        assert len(events) == 1

    def test_empty_list(self):
        assert parse_events([]) == []

    def test_not_a_list_raises(self):
        with pytest.raises(EventListError, match="expected a list"):
            parse_events("00:00:05")

    def test_none_raises(self):
        with pytest.raises(EventListError, match="got NoneType"):
            parse_events(None)

    def test_null_events_key_raises(self):
        with pytest.raises(EventListError):
            parse_events({"events": None})

    def test_mapping_without_events_raises(self):
        with pytest.raises(EventListError):
            parse_events({"start_time": "0"})

    def test_non_object_entry_raises(self):
        with pytest.raises(EventListError, match="Event 1"):
            parse_events([event("0", "1"), ["00:00:02", "00:00:03"]])


class TestLoadEvents:
    def test_json_file(self, write_events):
        path = write_events([event("00:00:05", "00:00:15")])
        events = load_events(path)
        assert events[0].end_time == "00:00:15"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "events.yaml"
        path.write_text(yaml.dump([event("00:00:05", "00:00:15")]))
        events = load_events(path)
        assert events[0].start_time == "00:00:05"

    def test_markdown_fence_unwrapped(self, tmp_path):
        path = tmp_path / "events.json"
        body = json.dumps([event("00:00:05", "00:00:15")], indent=2)
        path.write_text(f"```json\n{body}\n```\n")
        events = load_events(path)
        assert len(events) == 1

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(InputNotFound):
            load_events(tmp_path / "nope.json")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("[{not json")
        with pytest.raises(EventListError, match="cannot decode"):
            load_events(path)

    def test_json_null_raises(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("null")
        with pytest.raises(EventListError):
            load_events(path)

    def test_empty_yaml_is_empty_list(self, tmp_path):
        path = tmp_path / "events.yaml"
        path.write_text("")
        assert load_events(path) == []

    def test_object_instead_of_list_raises(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(json.dumps({"rallies": []}))
        with pytest.raises(EventListError):
            load_events(path)
