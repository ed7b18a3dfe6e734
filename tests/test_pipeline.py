"""End-to-end tests for condense() and the dry-run plan."""

import json

import pytest
from moviepy import VideoFileClip

from condenser.config import ReelConfig, VideoSettings
from condenser.errors import EventListError, InputNotFound, NoValidClips, SourceVideoError
from condenser.media import MediaHandle
from condenser.overlays import NullCaptionRenderer, OverlayComposer, PillowCaptionRenderer
from condenser.pipeline import condense, plan, prepare_clips
from condenser.validate import SkipReason, validate_events
from condenser.events import Event

from conftest import event, ramp_clip


def _duration(path):
    with VideoFileClip(str(path)) as clip:
        return clip.duration


class TestScenarios:
    def test_scenario_a_out_of_range_skipped(self, match_video, write_events, fast_config, tmp_path):
        events = write_events([
            event("00:00:05", "00:00:15", "Rally", "Forehand", "Server"),
            event("00:01:50", "00:02:10", "Rally", "Backhand", "Receiver"),
        ])
        out = tmp_path / "reel.mp4"
        result = condense(match_video, events, out, config=fast_config, quiet=True)

        assert result.included == [0]
        assert [(s.index, s.reason) for s in result.skipped] == [(1, SkipReason.OUT_OF_RANGE)]
        assert result.duration == pytest.approx(10.0)
        assert _duration(out) == pytest.approx(10.0, abs=0.5)

    def test_scenario_b_empty_events(self, match_video, write_events, fast_config, tmp_path):
        events = write_events([])
        out = tmp_path / "reel.mp4"
        with pytest.raises(NoValidClips):
            condense(match_video, events, out, config=fast_config, quiet=True)
        assert not out.exists()

    def test_scenario_c_reversed_interval(self, match_video, write_events, fast_config, tmp_path):
        events = write_events([
            event("00:00:20", "00:00:10"),
            event("00:00:30", "00:00:33"),
        ])
        out = tmp_path / "reel.mp4"
        result = condense(match_video, events, out, config=fast_config, quiet=True)

        assert result.included == [1]
        assert result.skipped[0].reason is SkipReason.NON_POSITIVE_DURATION
        assert out.exists()
        assert _duration(out) == pytest.approx(3.0, abs=0.5)

    def test_all_skipped_raises_with_reasons(self, match_video, write_events, fast_config, tmp_path):
        events = write_events([event("bad", "00:00:10"), event("00:03:00", "00:03:10")])
        with pytest.raises(NoValidClips) as exc_info:
            condense(match_video, events, tmp_path / "reel.mp4", config=fast_config, quiet=True)
        reasons = [s.reason for s in exc_info.value.skipped]
        assert reasons == [SkipReason.MALFORMED_TIMESTAMP, SkipReason.OUT_OF_RANGE]


class TestDegradedCaptions:
    def test_reel_produced_without_captions(self, match_video, write_events, fast_config, tmp_path):
        events = write_events([
            event("00:00:01", "00:00:03"),
            event("00:00:10", "00:00:12"),
        ])
        out = tmp_path / "reel.mp4"
        result = condense(
            match_video, events, out,
            config=fast_config,
            renderer=NullCaptionRenderer("simulated missing backend"),
            quiet=True,
        )
        assert out.exists()
        assert result.included == [0, 1]
        assert [n.index for n in result.notes] == [0, 1]
        assert all("OverlayUnavailable" in n.message for n in result.notes)

    def test_captions_disabled_no_notes(self, match_video, write_events, tmp_path):
        events = write_events([event("00:00:01", "00:00:03")])
        config = ReelConfig(video=VideoSettings(preset="ultrafast")).with_overrides(captions=False)
        result = condense(match_video, events, tmp_path / "reel.mp4", config=config, quiet=True)
        assert result.notes == []


class TestPreconditions:
    def test_missing_video(self, write_events, tmp_path):
        events = write_events([event("00:00:01", "00:00:03")])
        with pytest.raises(InputNotFound, match="source video"):
            condense(tmp_path / "missing.mp4", events, tmp_path / "reel.mp4", quiet=True)

    def test_missing_events(self, match_video, tmp_path):
        with pytest.raises(InputNotFound, match="event list"):
            condense(match_video, tmp_path / "missing.json", tmp_path / "reel.mp4", quiet=True)

    def test_both_missing_listed(self, tmp_path):
        with pytest.raises(InputNotFound, match="Missing 2 input"):
            condense(tmp_path / "a.mp4", tmp_path / "b.json", quiet=True)

    def test_structurally_invalid_events(self, match_video, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(json.dumps({"start_time": "00:00:01"}))
        with pytest.raises(EventListError):
            condense(match_video, path, tmp_path / "reel.mp4", quiet=True)
        assert not (tmp_path / "reel.mp4").exists()

    def test_unreadable_video(self, write_events, tmp_path):
        bogus = tmp_path / "bogus.mp4"
        bogus.write_bytes(b"\x00" * 64)
        events = write_events([event("00:00:01", "00:00:03")])
        with pytest.raises(SourceVideoError):
            condense(bogus, events, tmp_path / "reel.mp4", quiet=True)


class TestPrepareClips:
    def _kept(self, spans):
        events = [Event.from_dict(event(s, e)) for s, e in spans]
        kept, _ = validate_events(events, media_duration=20.0)
        return kept

    def test_parallel_preserves_event_order(self):
        media = MediaHandle(ramp_clip(duration=20.0))
        kept = self._kept([("15", "16"), ("1", "2"), ("8", "9"), ("3", "4"), ("12", "13")])
        composer = OverlayComposer(PillowCaptionRenderer())
        clips = prepare_clips(media, kept, composer, workers=4)
        assert [c.index for c in clips] == [0, 1, 2, 3, 4]
        assert [c.start for c in clips] == [15.0, 1.0, 8.0, 3.0, 12.0]
        assert all(c.overlay is not None for c in clips)

    def test_parallel_matches_sequential(self):
        media = MediaHandle(ramp_clip(duration=20.0))
        kept = self._kept([("5", "6"), ("1", "2"), ("10", "11")])
        composer = OverlayComposer(NullCaptionRenderer("off"))
        seq = prepare_clips(media, kept, composer, workers=1)
        par = prepare_clips(media, kept, composer, workers=3)
        assert [(c.index, c.start, c.end, c.note) for c in seq] == [
            (c.index, c.start, c.end, c.note) for c in par
        ]


class TestPlan:
    def test_plan_reports_kept_and_skipped(self, match_video, write_events):
        events = write_events([
            event("00:00:05", "00:00:15"),
            event("00:01:50", "00:02:10"),
            event("00:00:20", "00:00:10"),
        ])
        result = plan(match_video, events)
        assert [iv.index for iv in result.kept] == [0]
        assert [s.reason for s in result.skipped] == [
            SkipReason.OUT_OF_RANGE, SkipReason.NON_POSITIVE_DURATION,
        ]
        assert result.expected_duration == pytest.approx(10.0)
        assert result.fps == pytest.approx(5.0)
