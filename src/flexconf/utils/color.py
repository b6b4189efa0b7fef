"""Color helpers for deriving UI tints from the system accent color.

Two encodings are understood: ``#rrggbb`` and ``rgb(r, g, b)``. The result
is always returned in the same encoding as the input.
"""
import math
import re
from typing import Optional

HEX_RE = re.compile(r"^#([0-9a-fA-F]{6})$")
RGB_RE = re.compile(r"^rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)$")


class ColorFormatError(ValueError):
    """Color string is neither ``#rrggbb`` nor ``rgb(r, g, b)``."""
    pass


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(channel: int) -> int:
    return max(0, min(255, channel))


def parse_color(color: str) -> tuple[tuple[int, int, int], str]:
    """
    Split a color string into its channels and encoding.

    Returns:
        ((r, g, b), kind) where kind is "hex" or "rgb"

    Raises:
        ColorFormatError: If the string matches neither encoding
    """
    text = (color or "").strip()

    match = HEX_RE.match(text)
    if match:
        packed = int(match.group(1), 16)
        return ((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF), "hex"

    match = RGB_RE.match(text)
    if match:
        channels = tuple(int(match.group(i)) for i in (1, 2, 3))
        if any(c > 255 for c in channels):
            raise ColorFormatError(f"RGB channel out of range in {color!r}")
        return channels, "rgb"  # type: ignore[return-value]

    raise ColorFormatError(
        f"Invalid color {color!r}. Expected #rrggbb or rgb(r, g, b)"
    )


def format_color(channels: tuple[int, int, int], kind: str) -> str:
    """Encode channels as ``#rrggbb`` (kind "hex") or ``rgb(r, g, b)``."""
    r, g, b = (_clamp(c) for c in channels)
    if kind == "hex":
        return f"#{r:02x}{g:02x}{b:02x}"
    return f"rgb({r}, {g}, {b})"


def adjust_brightness(
    color: str,
    brightness_percent: float,
    contrast_percent: Optional[float] = None,
) -> str:
    """
    Lighten or darken a color, optionally changing its contrast.

    Each channel is scaled by ``1 + brightness_percent / 100``. With a
    contrast value the channel is then pushed away from (or towards) the
    128 midpoint by ``(100 + contrast_percent) / 100``. Both steps round
    half-up; the result is clamped to 0..255.

    Examples:
        adjust_brightness("#808080", 0) -> "#808080"
        adjust_brightness("rgb(100, 50, 0)", 50) -> "rgb(150, 75, 0)"

    Raises:
        ColorFormatError: If ``color`` is not a supported encoding
    """
    (r, g, b), kind = parse_color(color)

    multiplier = 1 + brightness_percent / 100
    channels = [_round_half_up(c * multiplier) for c in (r, g, b)]

    if contrast_percent is not None:
        factor = (100 + contrast_percent) / 100
        channels = [_round_half_up((c - 128) * factor + 128) for c in channels]

    return format_color((channels[0], channels[1], channels[2]), kind)
