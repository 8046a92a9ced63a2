from __future__ import annotations

import logging
from typing import Mapping

from coloraide import Color as CAColor

from .conversions import hex_to_rgb, is_valid_hex, rgb_to_hex
from .errors import HexFormatError, UnknownPaletteError

log = logging.getLogger(__name__)

PALETTES: Mapping[str, tuple[str, ...]] = {
    "basic": (
        "#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#00FFFF", "#FF00FF",
        "#FFA500", "#800080", "#FFC0CB", "#A52A2A", "#000000", "#FFFFFF",
        "#808080", "#C0C0C0", "#800000", "#008000", "#000080", "#808000",
    ),
    "pastel": (
        "#FFB6C1", "#FFD700", "#98FB98", "#87CEFA", "#DDA0DD", "#FFA07A",
        "#F0E68C", "#E6E6FA", "#FFF0F5", "#F5F5DC", "#F0FFF0", "#F0F8FF",
        "#F5F5F5", "#FFF5EE", "#FAEBD7", "#FFEFD5", "#FFE4E1", "#E0FFFF",
    ),
    "vibrant": (
        "#FF4500", "#DA70D6", "#00FA9A", "#1E90FF", "#FFD700", "#FF69B4",
        "#7CFC00", "#FF6347", "#00CED1", "#FF8C00", "#8A2BE2", "#32CD32",
        "#DC143C", "#00BFFF", "#FF1493", "#7B68EE", "#ADFF2F", "#FF00FF",
    ),
}

DEFAULT_PALETTE = "basic"

FIT = {"method": "raytrace"}  # same gamut-fit for every CSS input


def palette(category: str) -> tuple[str, ...]:
    try:
        return PALETTES[category]
    except KeyError:
        raise UnknownPaletteError(category) from None


def parse_color(text: str) -> str:
    """Normalize user color input to ``#RRGGBB``.

    Strict HEX (with or without ``#``) is taken as-is; anything else goes
    through ColorAide's CSS parser ("rebeccapurple", "hsl(120 50% 50%)", …)
    and is fitted into sRGB.
    """
    s = (text or "").strip()
    if is_valid_hex(s):
        return rgb_to_hex(*hex_to_rgb(s))
    try:
        col = CAColor(s)
    except ValueError:
        raise HexFormatError(f"unrecognized color '{s}'") from None
    out = col.convert("srgb").to_string(hex=True, fit=FIT)
    log.debug("parsed CSS color %r → %s", s, out)
    # ColorAide emits lowercase and may append alpha digits
    return out[:7].upper()


__all__ = ["PALETTES", "DEFAULT_PALETTE", "palette", "parse_color"]
