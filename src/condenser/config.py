"""Run configuration — encode and caption settings from optional YAML.

Config schema (every key optional):
  video:
    codec: libx264            # or h264_nvenc
    audio_codec: aac
    crf: 20
    preset: medium
  caption:
    enabled: true
    font_size: 30             # at a 720px-high frame, scaled linearly
    color: "#FFFFFF"
    position: bottom-right    # 3x3 grid name, e.g. "top-left"
    width_frac: 0.3333        # caption width as fraction of frame width
    bg_alpha: 153             # background opacity, 0-255
  workers: 1
"""

from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from .common import parse_hex_color


VALID_CODECS = {"libx264", "h264_nvenc"}
VALID_POSITIONS = {
    f"{v}-{h}"
    for v in ("top", "middle", "bottom")
    for h in ("left", "center", "right")
}


@dataclass(frozen=True)
class VideoSettings:
    codec: str = "libx264"
    audio_codec: str = "aac"
    crf: int = 20
    preset: str = "medium"

    def ffmpeg_params(self) -> list[str]:
        """Quality flags for the selected codec (nvenc uses -cq, not -crf)."""
        if self.codec == "h264_nvenc":
            return ["-cq", str(self.crf), "-pix_fmt", "yuv420p"]
        return ["-crf", str(self.crf), "-pix_fmt", "yuv420p"]


@dataclass(frozen=True)
class CaptionStyle:
    enabled: bool = True
    font_size: int = 30
    color: tuple[int, int, int] = (255, 255, 255)
    position: str = "bottom-right"
    width_frac: float = 1 / 3
    bg_alpha: int = 153


@dataclass(frozen=True)
class ReelConfig:
    video: VideoSettings = field(default_factory=VideoSettings)
    caption: CaptionStyle = field(default_factory=CaptionStyle)
    workers: int = 1

    def with_overrides(
        self,
        gpu: bool = False,
        captions: bool | None = None,
        workers: int | None = None,
    ) -> "ReelConfig":
        """Apply CLI flag overrides on top of file/default settings."""
        config = self
        if gpu:
            config = replace(config, video=replace(config.video, codec="h264_nvenc"))
        if captions is not None:
            config = replace(config, caption=replace(config.caption, enabled=captions))
        if workers is not None:
            if workers < 1:
                raise ValueError(f"workers must be >= 1, got {workers}")
            config = replace(config, workers=workers)
        return config


def _check_number(name, value, minimum, maximum=None, integer=False):
    kinds = (int,) if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, kinds):
        raise ValueError(f"Config: {name} must be a number, got {value!r}")
    if value < minimum or (maximum is not None and value > maximum):
        bound = f">= {minimum}" if maximum is None else f"in [{minimum}, {maximum}]"
        raise ValueError(f"Config: {name} must be {bound}, got {value!r}")
    return value


def _parse_video(raw: dict) -> VideoSettings:
    settings = VideoSettings()
    if "codec" in raw:
        if raw["codec"] not in VALID_CODECS:
            raise ValueError(
                f"Config: invalid video.codec '{raw['codec']}'. "
                f"Valid: {sorted(VALID_CODECS)}"
            )
        settings = replace(settings, codec=raw["codec"])
    if "audio_codec" in raw:
        settings = replace(settings, audio_codec=str(raw["audio_codec"]))
    if "crf" in raw:
        settings = replace(
            settings, crf=_check_number("video.crf", raw["crf"], 0, 51, integer=True),
        )
    if "preset" in raw:
        settings = replace(settings, preset=str(raw["preset"]))
    return settings


def _parse_caption(raw: dict) -> CaptionStyle:
    style = CaptionStyle()
    if "enabled" in raw:
        if not isinstance(raw["enabled"], bool):
            raise ValueError(f"Config: caption.enabled must be true/false, got {raw['enabled']!r}")
        style = replace(style, enabled=raw["enabled"])
    if "font_size" in raw:
        style = replace(
            style,
            font_size=_check_number("caption.font_size", raw["font_size"], 1, integer=True),
        )
    if "color" in raw:
        style = replace(style, color=parse_hex_color(str(raw["color"])))
    if "position" in raw:
        if raw["position"] not in VALID_POSITIONS:
            raise ValueError(
                f"Config: invalid caption.position '{raw['position']}'. "
                f"Valid: {sorted(VALID_POSITIONS)}"
            )
        style = replace(style, position=raw["position"])
    if "width_frac" in raw:
        frac = _check_number("caption.width_frac", raw["width_frac"], 0.05, 1.0)
        style = replace(style, width_frac=float(frac))
    if "bg_alpha" in raw:
        style = replace(
            style,
            bg_alpha=_check_number("caption.bg_alpha", raw["bg_alpha"], 0, 255, integer=True),
        )
    return style


def load_config(config_path: str | Path | None = None) -> ReelConfig:
    """Load a ReelConfig from YAML, or return defaults when no path is given.

    Raises:
        FileNotFoundError: Config path does not exist.
        ValueError: Unknown sections or invalid values.
    """
    if config_path is None:
        return ReelConfig()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError("Config: top level must be a mapping")

    unknown = set(raw) - {"video", "caption", "workers"}
    if unknown:
        raise ValueError(f"Config: unknown section(s) {sorted(unknown)}")

    for section in ("video", "caption"):
        if section in raw and not isinstance(raw[section], dict):
            raise ValueError(f"Config: '{section}' must be a mapping")

    config = ReelConfig(
        video=_parse_video(raw.get("video", {})),
        caption=_parse_caption(raw.get("caption", {})),
    )
    if "workers" in raw:
        config = replace(
            config, workers=_check_number("workers", raw["workers"], 1, integer=True),
        )
    return config
