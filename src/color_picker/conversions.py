# conversions.py – sRGB 8-bit ↔ CMYK / HLS / HSV / HEX
#   - integer percent (CMYK, L, S, V) and integer degree (H) units
#   - half-up rounding everywhere, matching the browser front-end
#   - out-of-range input raises; only CMYK→RGB, HLS→RGB outputs and the
#     HSV helpers clamp

from __future__ import annotations

import math
import re
import string
from dataclasses import dataclass
from numbers import Real
from typing import Any, NamedTuple

from .errors import ColorRangeError, HexFormatError

# --- constants ---------------------------------------------------------------
RGB_MAX = 255
PERCENT_MAX = 100
HUE_MAX = 360

RGB_RANGE = "RGB values must be between 0 and 255"
CMYK_RANGE = "CMYK values must be between 0 and 100"
HUE_RANGE = "Hue must be between 0 and 360"
LIGHTNESS_RANGE = "Lightness must be between 0 and 100"
SATURATION_RANGE = "Saturation must be between 0 and 100"
HEX_LENGTH = "HEX color must be 6 characters long"
HEX_FORMAT = "Invalid HEX color format"

# relative luminance (sRGB, Rec. 709 primaries)
_LIN_THRESHOLD = 0.03928
_LIN_SLOPE = 12.92
_LIN_OFFSET = 0.055
_GAMMA = 2.4
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)

BLACK = "#000000"
WHITE = "#FFFFFF"

_HEX_RE = re.compile(r"#?[0-9A-F]{6}", re.IGNORECASE)


class RGB(NamedTuple):
    r: int
    g: int
    b: int


class CMYK(NamedTuple):
    c: int
    m: int
    y: int
    k: int


class HLS(NamedTuple):
    h: int
    l: int  # noqa: E741
    s: int


class HSV(NamedTuple):
    h: int
    s: int
    v: int


# --- helpers -----------------------------------------------------------------
def js_round(x: float) -> int:
    """Round half up (``Math.round``); Python's round() rounds half to even."""
    return int(math.floor(x + 0.5))


def clamp(value, lo, hi):
    return min(max(value, lo), hi)


def _in_range(value: Any, lo: float, hi: float) -> bool:
    # NaN fails both comparisons
    return isinstance(value, Real) and lo <= value <= hi


def _check(values, lo: float, hi: float, message: str, model: str) -> None:
    for v in values:
        if not _in_range(v, lo, hi):
            raise ColorRangeError(message, model=model, value=v)


def _check_rgb(r, g, b) -> None:
    _check((r, g, b), 0, RGB_MAX, RGB_RANGE, "rgb")


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def _rgb_hue(r: float, g: float, b: float, hi: float, delta: float) -> float:
    """Hue in turns [0, 1]; the first channel equal to ``hi`` wins (R, G, B)."""
    if hi == r:
        h = (g - b) / delta + (6 if g < b else 0)
    elif hi == g:
        h = (b - r) / delta + 2
    else:
        h = (r - g) / delta + 4
    return h / 6


def _degrees(turns: float) -> int:
    # 359.5+ rounds up to a full turn
    return js_round(turns * HUE_MAX) % HUE_MAX


# --- RGB ↔ CMYK --------------------------------------------------------------
def rgb_to_cmyk(r, g, b) -> CMYK:
    _check_rgb(r, g, b)
    r_n, g_n, b_n = r / RGB_MAX, g / RGB_MAX, b / RGB_MAX

    k = 1 - max(r_n, g_n, b_n)
    if k == 1:
        # pure black; avoids 0/0 below
        return CMYK(0, 0, 0, 100)

    c = (1 - r_n - k) / (1 - k)
    m = (1 - g_n - k) / (1 - k)
    y = (1 - b_n - k) / (1 - k)
    return CMYK(
        js_round(c * PERCENT_MAX),
        js_round(m * PERCENT_MAX),
        js_round(y * PERCENT_MAX),
        js_round(k * PERCENT_MAX),
    )


def cmyk_to_rgb_unclamped(c, m, y, k) -> RGB:
    """CMYK → RGB rounded but not yet clamped; lets callers see overflow."""
    _check((c, m, y, k), 0, PERCENT_MAX, CMYK_RANGE, "cmyk")
    k_n = k / PERCENT_MAX
    return RGB(
        js_round(RGB_MAX * (1 - c / PERCENT_MAX) * (1 - k_n)),
        js_round(RGB_MAX * (1 - m / PERCENT_MAX) * (1 - k_n)),
        js_round(RGB_MAX * (1 - y / PERCENT_MAX) * (1 - k_n)),
    )


def cmyk_to_rgb(c, m, y, k) -> RGB:
    raw = cmyk_to_rgb_unclamped(c, m, y, k)
    return RGB(*(clamp(ch, 0, RGB_MAX) for ch in raw))


# --- RGB ↔ HLS ---------------------------------------------------------------
def rgb_to_hls(r, g, b) -> HLS:
    _check_rgb(r, g, b)
    r_n, g_n, b_n = r / RGB_MAX, g / RGB_MAX, b / RGB_MAX

    hi = max(r_n, g_n, b_n)
    lo = min(r_n, g_n, b_n)
    l = (hi + lo) / 2  # noqa: E741

    if hi == lo:
        # achromatic
        h = s = 0.0
    else:
        d = hi - lo
        s = d / (2 - hi - lo) if l > 0.5 else d / (hi + lo)
        h = _rgb_hue(r_n, g_n, b_n, hi, d)

    return HLS(_degrees(h), js_round(l * PERCENT_MAX), js_round(s * PERCENT_MAX))


def hls_to_rgb_unclamped(h, l, s) -> RGB:  # noqa: E741
    if not _in_range(h, 0, HUE_MAX):
        raise ColorRangeError(HUE_RANGE, model="hls", value=h)
    if not _in_range(l, 0, PERCENT_MAX):
        raise ColorRangeError(LIGHTNESS_RANGE, model="hls", value=l)
    if not _in_range(s, 0, PERCENT_MAX):
        raise ColorRangeError(SATURATION_RANGE, model="hls", value=s)

    h_n = h / HUE_MAX
    l_n = l / PERCENT_MAX
    s_n = s / PERCENT_MAX

    if s_n == 0:
        r = g = b = l_n
    else:
        q = l_n * (1 + s_n) if l_n < 0.5 else l_n + s_n - l_n * s_n
        p = 2 * l_n - q
        r = _hue_to_channel(p, q, h_n + 1 / 3)
        g = _hue_to_channel(p, q, h_n)
        b = _hue_to_channel(p, q, h_n - 1 / 3)

    return RGB(js_round(r * RGB_MAX), js_round(g * RGB_MAX), js_round(b * RGB_MAX))


def hls_to_rgb(h, l, s) -> RGB:  # noqa: E741
    raw = hls_to_rgb_unclamped(h, l, s)
    return RGB(*(clamp(ch, 0, RGB_MAX) for ch in raw))


# --- RGB ↔ HEX ---------------------------------------------------------------
def rgb_to_hex(r, g, b) -> str:
    _check_rgb(r, g, b)
    return "#{:02X}{:02X}{:02X}".format(js_round(r), js_round(g), js_round(b))


def hex_to_rgb(text: str) -> RGB:
    """Parse ``#RRGGBB`` or ``RRGGBB`` (any case)."""
    if not isinstance(text, str):
        raise HexFormatError(HEX_FORMAT)
    raw = text[1:] if text.startswith("#") else text
    if len(raw) != 6:
        raise HexFormatError(HEX_LENGTH)
    # int(..., 16) would also take "+f" or " f"
    if not all(ch in string.hexdigits for ch in raw):
        raise HexFormatError(HEX_FORMAT)
    return RGB(int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16))


def is_valid_hex(text: str) -> bool:
    return isinstance(text, str) and _HEX_RE.fullmatch(text) is not None


# --- RGB ↔ HSV (permissive: wraps hue, clamps the rest) -----------------------
def hsv_to_rgb(h, s, v) -> RGB:
    if not all(isinstance(x, Real) and math.isfinite(x) for x in (h, s, v)):
        raise ColorRangeError("HSV values must be finite numbers", model="hsv")
    h = h % HUE_MAX
    s = clamp(s, 0, PERCENT_MAX) / PERCENT_MAX
    v = clamp(v, 0, PERCENT_MAX) / PERCENT_MAX

    c = v * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = v - c

    if h < 60:
        r, g, b = c, x, 0.0
    elif h < 120:
        r, g, b = x, c, 0.0
    elif h < 180:
        r, g, b = 0.0, c, x
    elif h < 240:
        r, g, b = 0.0, x, c
    elif h < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    return RGB(
        js_round((r + m) * RGB_MAX),
        js_round((g + m) * RGB_MAX),
        js_round((b + m) * RGB_MAX),
    )


def rgb_to_hsv(r, g, b) -> HSV:
    if not all(isinstance(x, Real) and math.isfinite(x) for x in (r, g, b)):
        raise ColorRangeError(RGB_RANGE, model="rgb")
    r_n = clamp(r, 0, RGB_MAX) / RGB_MAX
    g_n = clamp(g, 0, RGB_MAX) / RGB_MAX
    b_n = clamp(b, 0, RGB_MAX) / RGB_MAX

    hi = max(r_n, g_n, b_n)
    lo = min(r_n, g_n, b_n)
    delta = hi - lo

    h = 0.0 if delta == 0 else _rgb_hue(r_n, g_n, b_n, hi, delta)
    s = 0.0 if hi == 0 else delta / hi
    return HSV(_degrees(h), js_round(s * PERCENT_MAX), js_round(hi * PERCENT_MAX))


# --- luminance / contrast ----------------------------------------------------
def _linear(channel: float) -> float:
    v = channel / RGB_MAX
    if v <= _LIN_THRESHOLD:
        return v / _LIN_SLOPE
    return ((v + _LIN_OFFSET) / (1 + _LIN_OFFSET)) ** _GAMMA


def get_luminance(r, g, b) -> float:
    wr, wg, wb = LUMA_WEIGHTS
    return wr * _linear(r) + wg * _linear(g) + wb * _linear(b)


def get_text_color(r, g, b) -> str:
    """Black text on light backgrounds, white otherwise (a threshold, not WCAG)."""
    return BLACK if get_luminance(r, g, b) > 0.5 else WHITE


# --- full snapshot -----------------------------------------------------------
@dataclass(frozen=True)
class Color:
    """One color in every model at once. RGB is the pivot."""

    rgb: RGB
    cmyk: CMYK
    hls: HLS
    hsv: HSV
    hex: str

    @classmethod
    def from_rgb(cls, r, g, b) -> "Color":
        _check_rgb(r, g, b)
        rgb = RGB(js_round(r), js_round(g), js_round(b))
        return cls(
            rgb=rgb,
            cmyk=rgb_to_cmyk(*rgb),
            hls=rgb_to_hls(*rgb),
            hsv=rgb_to_hsv(*rgb),
            hex=rgb_to_hex(*rgb),
        )

    @property
    def text_color(self) -> str:
        return get_text_color(*self.rgb)

    def as_dict(self) -> dict[str, Any]:
        return {
            "rgb": self.rgb._asdict(),
            "cmyk": self.cmyk._asdict(),
            "hls": self.hls._asdict(),
            "hsv": self.hsv._asdict(),
            "hex": self.hex,
            "text_color": self.text_color,
        }


def color_from_rgb(r, g, b) -> Color:
    return Color.from_rgb(r, g, b)


__all__ = [
    "RGB",
    "CMYK",
    "HLS",
    "HSV",
    "Color",
    "clamp",
    "js_round",
    "rgb_to_cmyk",
    "cmyk_to_rgb",
    "cmyk_to_rgb_unclamped",
    "rgb_to_hls",
    "hls_to_rgb",
    "hls_to_rgb_unclamped",
    "rgb_to_hex",
    "hex_to_rgb",
    "is_valid_hex",
    "hsv_to_rgb",
    "rgb_to_hsv",
    "get_luminance",
    "get_text_color",
    "color_from_rgb",
]
