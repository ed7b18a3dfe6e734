"""End-to-end condensing run: video + event list -> highlight reel.

  load events -> open media -> validate -> extract -> caption -> assemble

All inputs are checked before any processing. The MediaHandle is scoped
to the run and closed on every exit path. Each call is independent; no
state is shared between runs.

Extraction and captioning may run on a thread pool (workers > 1). They
never decode frames, so the shared decoder is untouched; results are put
back in original event order before assembly.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from .assembly import ReelOutput, assemble_reel
from .config import ReelConfig
from .errors import InputNotFound
from .events import Event, load_events
from .media import Clip, MediaHandle, extract_clip
from .overlays import CaptionRenderer, OverlayComposer, select_caption_renderer
from .validate import Skip, ValidatedInterval, validate_events


DEFAULT_OUTPUT = "condensed_match.mp4"


@dataclass
class RunPlan:
    """What a run would do, without encoding anything."""

    video_path: str
    media_duration: float
    fps: float
    events: list[Event] = field(default_factory=list)
    kept: list[ValidatedInterval] = field(default_factory=list)
    skipped: list[Skip] = field(default_factory=list)

    @property
    def expected_duration(self) -> float:
        return sum(iv.duration for iv in self.kept)


def check_inputs(video_path: str | Path, events_path: str | Path) -> None:
    """Fail fast when either required input is missing.

    Raises:
        InputNotFound: Lists every missing input.
    """
    missing = []
    if not video_path or not Path(video_path).is_file():
        missing.append(f"source video: {video_path}")
    if not events_path or not Path(events_path).is_file():
        missing.append(f"event list: {events_path}")
    if missing:
        msg = f"Missing {len(missing)} input(s):\n"
        for m in missing:
            msg += f"  - {m}\n"
        raise InputNotFound(msg)


def plan(video_path: str | Path, events_path: str | Path) -> RunPlan:
    """Load inputs and validate every event against the video duration."""
    check_inputs(video_path, events_path)
    events = load_events(events_path)
    with MediaHandle.open(video_path) as media:
        kept, skipped = validate_events(events, media.duration)
        return RunPlan(
            video_path=str(video_path),
            media_duration=media.duration,
            fps=media.fps,
            events=events,
            kept=kept,
            skipped=skipped,
        )


def prepare_clips(
    media: MediaHandle,
    kept: list[ValidatedInterval],
    composer: OverlayComposer,
    workers: int = 1,
) -> list[Clip]:
    """Extract and caption each kept interval, in original event order."""
    def _prepare(interval):
        return composer.compose(extract_clip(media, interval), interval.event)

    if workers <= 1 or len(kept) <= 1:
        return [_prepare(iv) for iv in kept]

    results = {}
    with ThreadPoolExecutor(max_workers=min(workers, len(kept))) as pool:
        futures = {pool.submit(_prepare, iv): iv.index for iv in kept}
        for future, index in futures.items():
            results[index] = future.result()  # propagate exceptions
    return [results[index] for index in sorted(results)]


def condense(
    video_path: str | Path,
    events_path: str | Path,
    output_path: str | Path = DEFAULT_OUTPUT,
    config: ReelConfig | None = None,
    renderer: CaptionRenderer | None = None,
    quiet: bool = False,
) -> ReelOutput:
    """Build a condensed highlight reel from a match video and its events.

    Args:
        video_path: Source match video.
        events_path: Analyzer event list (JSON or YAML).
        output_path: Reel mp4 path.
        config: Encode/caption settings; defaults when None.
        renderer: Caption strategy; probed from config when None.
        quiet: Suppress progress output.

    Returns:
        ReelOutput summarizing included/skipped events.

    Raises:
        InputNotFound, EventListError, SourceVideoError: Precondition
            failures, raised before any processing.
        NoValidClips: Every event was skipped or failed to decode.
    """
    config = config or ReelConfig()

    def _log(msg):
        if not quiet:
            print(msg, flush=True)

    check_inputs(video_path, events_path)
    events = load_events(events_path)

    t0 = time.monotonic()
    with MediaHandle.open(video_path) as media:
        _log(f"Video: {video_path} ({media.duration:.1f}s, {media.fps:g}fps)")
        _log(f"Processing {len(events)} events...")

        kept, skipped = validate_events(events, media.duration)
        for iv in kept:
            _log(f"  KEEP   [{iv.index}] {iv.event.span}  {iv.event.event_type}")
        for skip in skipped:
            _log(f"  SKIP   {skip.describe()}")

        renderer = renderer or select_caption_renderer(config.caption)
        if not renderer.available and renderer.reason:
            _log(f"  NOTE   captions disabled: {renderer.reason}")
        composer = OverlayComposer(renderer)

        clips = prepare_clips(media, kept, composer, workers=config.workers)
        result = assemble_reel(
            clips, output_path,
            fps=media.fps,
            video=config.video,
            skipped=skipped,
            quiet=quiet,
        )

    _log(f"\nDone in {time.monotonic() - t0:.1f}s")
    return result
