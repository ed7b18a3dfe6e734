"""Shared test fixtures for condenser tests."""

import json
import subprocess

import numpy as np
import pytest
import imageio_ffmpeg
from moviepy import VideoClip

from condenser.config import ReelConfig, VideoSettings

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


@pytest.fixture
def make_video(tmp_path):
    """Factory: write a test video (blue, 160x120, 5fps) with silent audio."""
    def _make(duration=10, name="match.mp4", size="160x120", fps=5):
        out = tmp_path / name
        subprocess.run(
            [
                _FFMPEG, "-y",
                "-f", "lavfi", "-i", f"color=c=blue:s={size}:d={duration}:r={fps}",
                "-f", "lavfi", "-i", "anullsrc=r=22050:cl=mono",
                "-shortest",
                "-c:v", "libx264", "-preset", "ultrafast", "-crf", "30",
                "-pix_fmt", "yuv420p",
                "-c:a", "aac", "-b:a", "32k",
                str(out),
            ],
            check=True,
            capture_output=True,
        )
        return out
    return _make


@pytest.fixture
def match_video(make_video):
    """A 120-second source video."""
    return make_video(duration=120)


@pytest.fixture
def write_events(tmp_path):
    """Factory: write an event list to events.json and return its path."""
    def _write(events, name="events.json"):
        path = tmp_path / name
        path.write_text(json.dumps(events))
        return path
    return _write


@pytest.fixture
def fast_config():
    """Default config with the fastest x264 preset."""
    return ReelConfig(video=VideoSettings(preset="ultrafast"))


def ramp_clip(duration=20.0, size=(64, 48), fps=10):
    """In-memory clip whose pixel value encodes time (10 * t)."""
    w, h = size

    def _frame(t):
        return np.full((h, w, 3), int(round(t * 10)) % 256, dtype=np.uint8)

    return VideoClip(_frame, duration=duration).with_fps(fps)


def event(start, end, event_type="Rally", winning_shot="Forehand", winner="Server"):
    """Analyzer event dict."""
    return {
        "start_time": start,
        "end_time": end,
        "event_type": event_type,
        "winning_shot": winning_shot,
        "winner": winner,
    }


def corrupt_after_clip(limit, duration=20.0, size=(64, 48), fps=10):
    """Like ramp_clip, but frames after *limit* seconds raise OSError."""
    w, h = size

    def _frame(t):
        if t > limit:
            raise OSError("corrupt packet")
        return np.full((h, w, 3), int(round(t * 10)) % 256, dtype=np.uint8)

    return VideoClip(_frame, duration=duration).with_fps(fps)
