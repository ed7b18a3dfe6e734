"""Exception taxonomy for condenser runs.

Precondition failures (missing inputs, unreadable video, malformed event
list) stop a run before any processing. Per-event problems never raise to
the caller; they are recorded as skips in the run summary. NoValidClips is
raised only after every event has been attempted.
"""


class CondenserError(Exception):
    """Base class for all condenser errors."""


class MalformedTimestamp(CondenserError, ValueError):
    """A timestamp string is empty or has a non-numeric component."""


class InputNotFound(CondenserError, FileNotFoundError):
    """A required input file (video or event list) does not exist."""


class EventListError(CondenserError, ValueError):
    """The event list is not a sequence of objects."""


class SourceVideoError(CondenserError, OSError):
    """The source video exists but cannot be opened for decoding."""


class MediaDecodeError(CondenserError, RuntimeError):
    """Frames for an otherwise valid interval could not be decoded."""


class NoValidClips(CondenserError, RuntimeError):
    """Nothing survived validation and decoding, so no reel is written."""

    def __init__(self, skipped=()):
        self.skipped = list(skipped)
        msg = "No valid clips to assemble"
        if self.skipped:
            msg += f" ({len(self.skipped)} event(s) skipped)"
        super().__init__(msg)


class EncodeError(CondenserError, RuntimeError):
    """ffmpeg failed while writing the reel. No output file is left behind."""
