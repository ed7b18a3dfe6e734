"""Reel assembly — concatenate captioned clips into one re-encoded mp4.

Clips are materialized here, in the order received. A clip whose range
fails to decode is dropped with a MediaDecodeError skip; the rest still
make the reel. If nothing is left, NoValidClips is raised and no output
file is written.

The encode goes to a temporary file next to the target and is moved into
place only once ffmpeg has finished, so a failed encode never leaves a
partial reel at the output path.
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from moviepy import concatenate_videoclips

from .config import VideoSettings
from .errors import EncodeError, MediaDecodeError, NoValidClips
from .media import Clip
from .timecode import format_timestamp
from .validate import Skip, SkipReason


@dataclass
class OverlayNote:
    """A kept clip that could not be captioned."""

    index: int
    message: str


@dataclass
class ReelOutput:
    """Result of a successful run: the file plus what went into it."""

    output_path: str
    duration: float
    included: list[int] = field(default_factory=list)
    skipped: list[Skip] = field(default_factory=list)
    notes: list[OverlayNote] = field(default_factory=list)

    @property
    def included_count(self) -> int:
        return len(self.included)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def format_summary(self) -> str:
        """Human-readable run report."""
        lines = [
            f"Output:   {self.output_path}",
            f"Duration: {format_timestamp(self.duration)} ({self.duration:.1f}s)",
            f"Included: {self.included_count} event(s)",
            f"Skipped:  {self.skipped_count} event(s)",
        ]
        for skip in self.skipped:
            lines.append(f"  - {skip.describe()}")
        if self.notes:
            lines.append(f"Notes:    {len(self.notes)} clip(s) without caption")
            for note in self.notes:
                lines.append(f"  - [{note.index}] {note.message}")
        return "\n".join(lines)


def _temp_output(output_path: Path) -> Path:
    """Reserve a temp file beside output_path with the same extension."""
    fd, tmp = tempfile.mkstemp(
        prefix=f".{output_path.stem}.", suffix=output_path.suffix or ".mp4",
        dir=output_path.parent,
    )
    os.close(fd)
    return Path(tmp)


def assemble_reel(
    clips: list[Clip],
    output_path: str | Path,
    fps: float,
    video: VideoSettings | None = None,
    skipped: list[Skip] | None = None,
    quiet: bool = False,
) -> ReelOutput:
    """Concatenate clips in order and encode them to output_path.

    Args:
        clips: Clips in reel order (chronological order of the match).
        output_path: Target mp4 path. Parent dirs are created.
        fps: Output frame rate, normally the source video's.
        video: Codec settings.
        skipped: Skips from validation, carried into the summary.
        quiet: Suppress progress lines and the moviepy progress bar.

    Returns:
        ReelOutput with included indices, all skips, and overlay notes.

    Raises:
        NoValidClips: No clip could be materialized. No file is written.
        EncodeError: ffmpeg failed while writing. No file is left behind.
    """
    video = video or VideoSettings()
    skipped = list(skipped or [])

    if not clips:
        raise NoValidClips(skipped)

    parts = []
    included = []
    notes = []
    for clip in clips:
        try:
            parts.append(clip.materialize())
        except MediaDecodeError as e:
            skipped.append(Skip(clip.index, clip.interval.event, SkipReason.DECODE_ERROR, str(e)))
            if not quiet:
                print(f"  DROP   [{clip.index}] {clip.interval.event.span}: {e}", flush=True)
            continue
        included.append(clip.index)
        if clip.note:
            notes.append(OverlayNote(clip.index, clip.note))

    if not parts:
        raise NoValidClips(sorted(skipped, key=lambda s: s.index))
    skipped.sort(key=lambda s: s.index)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    final = concatenate_videoclips(parts)
    tmp_path = _temp_output(output_path)
    try:
        if not quiet:
            print(f"Concatenating {len(parts)} clips ({final.duration:.1f}s)...", flush=True)
            print(f"Writing to: {output_path}", flush=True)
        try:
            final.write_videofile(
                str(tmp_path),
                fps=fps,
                codec=video.codec,
                audio_codec=video.audio_codec,
                preset=video.preset,
                ffmpeg_params=video.ffmpeg_params(),
                logger=None if quiet else "bar",
                temp_audiofile_path=str(output_path.parent),
            )
        except OSError as e:
            raise EncodeError(f"Encoding {output_path} failed: {e}") from e
        if tmp_path.stat().st_size == 0:
            raise EncodeError(f"Encoding {output_path} failed: ffmpeg wrote no data")
        os.replace(tmp_path, output_path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()

    # Decoders are shared with the MediaHandle, which closes them.
    return ReelOutput(
        output_path=str(output_path),
        duration=final.duration,
        included=included,
        skipped=skipped,
        notes=notes,
    )
