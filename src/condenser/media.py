"""Source media handle and lazy clip extraction.

A MediaHandle owns the decoder for the source video. Clips never copy
frames: each is an index/range pair with a back-reference to the handle,
turned into a moviepy subclip only when the reel is assembled. Closing
the handle releases the decoder for every clip derived from it.
"""

from dataclasses import dataclass, replace
from pathlib import Path

from moviepy import VideoClip, VideoFileClip

from .errors import InputNotFound, MediaDecodeError, SourceVideoError
from .overlays import Overlay, apply_patch_to_frame
from .validate import ValidatedInterval


class MediaHandle:
    """Read-only handle on the source video. Use as a context manager."""

    def __init__(self, source: VideoClip, path: str | None = None):
        self._source = source
        self.path = path
        self.closed = False

    @classmethod
    def open(cls, path: str | Path) -> "MediaHandle":
        """Open a video file for decoding.

        Raises:
            InputNotFound: File does not exist.
            SourceVideoError: File exists but cannot be decoded.
        """
        p = Path(path)
        if not p.is_file():
            raise InputNotFound(f"Source video not found: {path}")
        try:
            source = VideoFileClip(str(p))
        except (OSError, KeyError, IndexError, ValueError) as e:
            raise SourceVideoError(f"Cannot open video {path}: {e}") from e
        if not source.duration or not source.fps:
            source.close()
            raise SourceVideoError(f"Cannot read duration/fps from video {path}")
        return cls(source, path=str(p))

    @property
    def duration(self) -> float:
        return self._source.duration

    @property
    def fps(self) -> float:
        return self._source.fps

    @property
    def size(self) -> tuple[int, int]:
        return tuple(self._source.size)

    def subrange(self, start: float, end: float) -> VideoClip:
        """Lazy moviepy view of [start, end). The source is not modified."""
        if self.closed:
            raise MediaDecodeError("Media handle is closed")
        return self._source.subclipped(start, end)

    def close(self) -> None:
        if not self.closed:
            self._source.close()
            self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


@dataclass(frozen=True)
class Clip:
    """Range reference into a MediaHandle plus an optional caption overlay.

    ``note`` is set when a caption was requested but could not be rendered.
    """

    media: MediaHandle
    interval: ValidatedInterval
    overlay: Overlay | None = None
    note: str | None = None

    @property
    def index(self) -> int:
        return self.interval.index

    @property
    def start(self) -> float:
        return self.interval.start

    @property
    def end(self) -> float:
        return self.interval.end

    @property
    def duration(self) -> float:
        return self.interval.duration

    @property
    def size(self) -> tuple[int, int]:
        return self.media.size

    def with_overlay(self, overlay: Overlay) -> "Clip":
        return replace(self, overlay=overlay, note=None)

    def with_note(self, note: str) -> "Clip":
        return replace(self, overlay=None, note=note)

    def materialize(self) -> VideoClip:
        """Build the moviepy clip for this range, with the overlay applied.

        The whole range is decoded once here (frames are discarded) so a
        broken range fails per clip rather than midway through the final
        encode.

        Raises:
            MediaDecodeError: The range cannot be decoded.
        """
        try:
            clip = self.media.subrange(self.start, self.end)
            for _ in clip.iter_frames(fps=self.media.fps):
                pass
        except (OSError, ValueError, IndexError) as e:
            raise MediaDecodeError(
                f"Cannot decode {self.start:.2f}s-{self.end:.2f}s: {e}"
            ) from e

        if self.overlay is not None:
            overlay = self.overlay

            def _apply_overlay(get_frame, t):
                return apply_patch_to_frame(get_frame(t), overlay.patch, overlay.x, overlay.y)

            clip = clip.transform(_apply_overlay)
        return clip


def extract_clip(media: MediaHandle, interval: ValidatedInterval) -> Clip:
    """Zero-copy range reference [start, end) into the media handle."""
    return Clip(media=media, interval=interval)
