"""condenser.common — shared font, color, and text layout helpers."""

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont


# ── Font paths ─────────────────────────────────────────────────────
# Arial-like sans faces first, DejaVu Sans as the usual Linux fallback.

FONT_PATHS = [
    Path("/usr/share/fonts/truetype/msttcorefonts/Arial.ttf"),
    Path("/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf"),
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    Path("/Library/Fonts/Arial.ttf"),
    Path("C:/Windows/Fonts/arial.ttf"),
]


# ── Color utilities ────────────────────────────────────────────────

def parse_hex_color(hex_str: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' or 'RRGGBB' string to (R, G, B) tuple."""
    hex_str = hex_str.lstrip("#")
    if len(hex_str) != 6 or not all(c in "0123456789abcdefABCDEF" for c in hex_str):
        raise ValueError(f"Invalid hex color: '{hex_str}'")
    return (int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


# ── Font loading ───────────────────────────────────────────────────

def load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load the first available sans font at the given size.

    Falls back to Pillow's built-in default font when none of
    FONT_PATHS can be opened.
    """
    for font_path in FONT_PATHS:
        if font_path.exists():
            try:
                return ImageFont.truetype(str(font_path), size=size)
            except (OSError, IndexError):
                continue
    return ImageFont.load_default(size=size)


# ── Text layout ────────────────────────────────────────────────────

def wrap_text(
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    max_width: int,
) -> list[str]:
    """Greedy word-wrap *text* so each line fits within max_width pixels.

    Explicit newlines are kept. A single word wider than max_width is
    broken across lines character by character.
    """
    draw = ImageDraw.Draw(Image.new("RGBA", (1, 1)))

    def _fits(s):
        return draw.textlength(s, font=font) <= max_width

    lines = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if _fits(candidate):
                current = candidate
                continue
            if current:
                lines.append(current)
            # Break an over-long word into chunks that fit.
            while not _fits(word) and len(word) > 1:
                cut = len(word) - 1
                while cut > 1 and not _fits(word[:cut]):
                    cut -= 1
                lines.append(word[:cut])
                word = word[cut:]
            current = word
        lines.append(current)
    return lines
