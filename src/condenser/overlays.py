"""Caption overlays — render an event caption and composite it onto a clip.

The caption is two lines, '<event_type> | <winner>' then '<winning_shot>',
drawn on a semi-transparent dark box whose width is a fixed fraction of
the frame width (one third by default), anchored bottom-right with a
margin, for the clip's full duration.

Captioning is a strategy chosen once per run: select_caption_renderer()
probes the Pillow/FreeType backend and returns either the real renderer
or a no-op one. With the no-op renderer every clip passes through
uncaptioned and carries an OverlayUnavailable note, so a reel can
always be produced.
"""

from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageDraw

from .common import load_font, wrap_text
from .config import CaptionStyle


# ── Constants ────────────────────────────────────────────────────

OVERLAY_UNAVAILABLE = "OverlayUnavailable"

OVERLAY_MARGIN_FRAC = 0.03       # margin from edges as fraction of frame dimension
OVERLAY_BORDER_RADIUS = 6        # rounded corner radius

# Pixel sizes are defined at REF_H and scaled linearly with frame height.
REF_H = 720
_REF_PADDING_X = (12, 3)         # (value at REF_H, floor)
_REF_PADDING_Y = (8, 2)
_REF_LINE_SPACING = (4, 1)
_MIN_FONT_SIZE = 8


def _scale(ref_and_floor: tuple[int, int], frame_h: int) -> int:
    ref_val, floor = ref_and_floor
    return max(floor, round(ref_val * frame_h / REF_H))


def caption_font_size(font_size: int, frame_h: int) -> int:
    """Scale the configured font size (defined at REF_H) to the frame."""
    return max(_MIN_FONT_SIZE, round(font_size * frame_h / REF_H))


def caption_width(frame_w: int, width_frac: float) -> int:
    """Caption box width in pixels. 1/3 of 1920 is 640, not 639."""
    return max(1, int(round(frame_w * width_frac, 6)))


@dataclass(frozen=True, eq=False)
class Overlay:
    """A pre-rendered RGBA patch placed at (x, y) for the clip's full duration."""

    patch: np.ndarray
    x: int
    y: int


# ── Position computation ─────────────────────────────────────────


def compute_overlay_position(
    position: str,
    patch_w: int,
    patch_h: int,
    frame_w: int,
    frame_h: int,
) -> tuple[int, int]:
    """Compute (x, y) for an overlay patch on a 3x3 grid.

    Margin is OVERLAY_MARGIN_FRAC of the frame dimension from each edge.

    Args:
        position: One of the 9 grid positions (e.g. "bottom-right").
        patch_w: Rendered overlay patch width.
        patch_h: Rendered overlay patch height.
        frame_w: Target frame width.
        frame_h: Target frame height.

    Returns:
        (x, y) top-left corner for placing the overlay.
    """
    margin_x = int(frame_w * OVERLAY_MARGIN_FRAC)
    margin_y = int(frame_h * OVERLAY_MARGIN_FRAC)

    vert, horiz = position.split("-", 1)
    if horiz == "left":
        x = margin_x
    elif horiz == "right":
        x = frame_w - margin_x - patch_w
    else:  # center
        x = (frame_w - patch_w) // 2

    if vert == "top":
        y = margin_y
    elif vert == "bottom":
        y = frame_h - margin_y - patch_h
    else:  # middle
        y = (frame_h - patch_h) // 2

    return x, y


# ── Patch rendering ──────────────────────────────────────────────


def render_caption_patch(
    text: str,
    width: int,
    font_size: int,
    color: tuple[int, int, int],
    bg_alpha: int = 153,
    frame_h: int = REF_H,
) -> np.ndarray:
    """Render caption text into a fixed-width semi-transparent box.

    Text is word-wrapped to fit inside the padded width; the box grows
    vertically to hold every line.

    Returns:
        numpy array of shape (h, width, 4), dtype uint8 (RGBA).
    """
    font = load_font(font_size)
    pad_x = _scale(_REF_PADDING_X, frame_h)
    pad_y = _scale(_REF_PADDING_Y, frame_h)
    spacing = _scale(_REF_LINE_SPACING, frame_h)

    lines = wrap_text(text, font, max(1, width - 2 * pad_x))

    draw_tmp = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
    line_h = draw_tmp.textbbox((0, 0), "Ag|", font=font)[3]

    patch_h = 2 * pad_y + len(lines) * line_h + (len(lines) - 1) * spacing
    img = Image.new("RGBA", (width, patch_h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    draw.rounded_rectangle(
        [(0, 0), (width - 1, patch_h - 1)],
        radius=min(OVERLAY_BORDER_RADIUS, width // 2, patch_h // 2),
        fill=(0, 0, 0, bg_alpha),
    )

    y = pad_y
    for line in lines:
        draw.text((pad_x, y), line, fill=(*color, 255), font=font)
        y += line_h + spacing

    return np.array(img)


# ── Frame-level compositing ──────────────────────────────────────


def apply_patch_to_frame(
    frame: np.ndarray, patch: np.ndarray, x: int, y: int,
) -> np.ndarray:
    """Alpha-blend an RGBA patch onto an RGB frame at (x, y).

    The patch is cropped to the frame bounds. The input frame is not
    modified.
    """
    frame_h, frame_w = frame.shape[:2]
    x = max(0, x)
    y = max(0, y)
    vis_h = min(patch.shape[0], frame_h - y)
    vis_w = min(patch.shape[1], frame_w - x)
    if vis_h <= 0 or vis_w <= 0:
        return frame

    result = frame.copy()
    visible = patch[:vis_h, :vis_w]
    alpha = visible[:, :, 3:4].astype(np.float32) / 255.0
    rgb = visible[:, :, :3].astype(np.float32)
    dest = result[y:y + vis_h, x:x + vis_w].astype(np.float32)
    blended = dest * (1 - alpha) + rgb * alpha
    result[y:y + vis_h, x:x + vis_w] = blended.astype(np.uint8)
    return result


# ── Renderer strategy ────────────────────────────────────────────


class CaptionRenderer:
    """Turns caption text into an Overlay for a given frame size."""

    available = True
    reason = None

    def render(self, text: str, frame_size: tuple[int, int]) -> Overlay:
        raise NotImplementedError


class PillowCaptionRenderer(CaptionRenderer):
    """Real renderer: Pillow text on a semi-transparent box."""

    def __init__(self, style: CaptionStyle | None = None):
        self.style = style or CaptionStyle()

    def render(self, text, frame_size):
        frame_w, frame_h = frame_size
        style = self.style
        patch = render_caption_patch(
            text,
            width=min(frame_w, caption_width(frame_w, style.width_frac)),
            font_size=caption_font_size(style.font_size, frame_h),
            color=style.color,
            bg_alpha=style.bg_alpha,
            frame_h=frame_h,
        )
        patch_h, patch_w = patch.shape[:2]
        x, y = compute_overlay_position(style.position, patch_w, patch_h, frame_w, frame_h)

        # Clamp to frame bounds.
        x = max(0, min(x, frame_w - patch_w))
        y = max(0, min(y, frame_h - patch_h))
        return Overlay(patch, x, y)


class NullCaptionRenderer(CaptionRenderer):
    """No-op renderer. Clips pass through uncaptioned.

    With a reason, each clip gets an OverlayUnavailable note; without one
    (captions turned off on purpose) clips pass through silently.
    """

    available = False

    def __init__(self, reason: str | None = None):
        self.reason = reason

    def render(self, text, frame_size):
        return None


def select_caption_renderer(style: CaptionStyle | None = None) -> CaptionRenderer:
    """Pick the caption strategy for a run by probing the backend once."""
    style = style or CaptionStyle()
    if not style.enabled:
        return NullCaptionRenderer()

    renderer = PillowCaptionRenderer(style)
    try:
        renderer.render("Rally | Probe\nN/A", (640, 360))
    except (OSError, ImportError, ValueError) as e:
        return NullCaptionRenderer(f"caption backend unavailable: {e}")
    return renderer


# ── Composer ─────────────────────────────────────────────────────


class OverlayComposer:
    """Attaches a caption overlay to clips using the selected renderer."""

    def __init__(self, renderer: CaptionRenderer):
        self.renderer = renderer

    def compose(self, clip, event):
        """Return the clip carrying a caption overlay for *event*.

        When captioning is unavailable the clip comes back without an
        overlay and with an OverlayUnavailable note; it is never dropped.
        """
        if not self.renderer.available:
            if self.renderer.reason is None:
                return clip
            return clip.with_note(f"{OVERLAY_UNAVAILABLE}: {self.renderer.reason}")

        try:
            overlay = self.renderer.render(event.caption, clip.size)
        except Exception as e:
            # Any backend failure leaves the clip uncaptioned.
            return clip.with_note(f"{OVERLAY_UNAVAILABLE}: {e}")
        return clip.with_overlay(overlay)
