#!/usr/bin/env python3
"""Generate a synthetic match video and analyzer event list for a demo run.

Creates examples/demo-match/match.mp4 (60s, alternating "rally" and
"dead time" segments, running clock burned in) and events.json with one
out-of-range event and one reversed event, so the run summary shows
both kinds of skip.

Usage:
    python examples/generate_demo_match.py
    # Then condense:
    condenser condense examples/demo-match/match.mp4 \
        examples/demo-match/events.json --output examples/demo-match/reel.mp4
"""

import json
from pathlib import Path

import numpy as np
from moviepy import VideoClip
from PIL import Image, ImageDraw, ImageFont

OUTPUT_DIR = Path(__file__).resolve().parent / "demo-match"
SIZE = (640, 360)
FPS = 25
DURATION = 60.0

# (start, end) of play in seconds; everything else is dead time.
RALLIES = [(4.0, 12.0), (20.0, 27.5), (35.0, 49.0)]

EVENTS = [
    {"start_time": "00:00:04", "end_time": "00:00:12", "event_type": "Rally",
     "winning_shot": "Forehand", "winner": "Server"},
    {"start_time": "00:00:20", "end_time": "00:00:27.5", "event_type": "Double Fault",
     "winning_shot": "N/A", "winner": "Receiver"},
    {"start_time": "00:00:49", "end_time": "00:00:35", "event_type": "Rally",
     "winning_shot": "Volley", "winner": "Top Player"},
    {"start_time": "00:00:55", "end_time": "00:01:10", "event_type": "Rally",
     "winning_shot": "Backhand", "winner": "Bottom Player"},
]

PLAY_COLOR = (40, 120, 60)      # court green
DEAD_COLOR = (30, 30, 40)


def _font():
    try:
        return ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 36
        )
    except OSError:
        return ImageFont.load_default()


FONT = _font()


def _frame(t: float) -> np.ndarray:
    """Solid segment color with the match clock drawn top-left."""
    in_play = any(start <= t < end for start, end in RALLIES)
    img = Image.new("RGB", SIZE, PLAY_COLOR if in_play else DEAD_COLOR)
    draw = ImageDraw.Draw(img)
    minutes, seconds = divmod(t, 60)
    draw.text((16, 12), f"{int(minutes):02d}:{seconds:04.1f}", fill=(255, 255, 255), font=FONT)
    return np.array(img)


def main():
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    video = OUTPUT_DIR / "match.mp4"
    if video.exists():
        print(f"  skip {video.name} (exists)")
    else:
        clip = VideoClip(_frame, duration=DURATION)
        clip.write_videofile(
            str(video), fps=FPS, codec="libx264", audio=False, logger=None,
        )
        print(f"  wrote {video}")

    events = OUTPUT_DIR / "events.json"
    events.write_text(json.dumps(EVENTS, indent=2))
    print(f"  wrote {events}")


if __name__ == "__main__":
    main()
