# gradient.py – saturation × lightness field for one hue
#   x axis: saturation 0 → 100 (left → right)
#   y axis: lightness 100 → 0 (top → bottom)
# Vectorized twin of conversions.hls_to_rgb; every pixel must match the
# scalar result exactly, so the arithmetic below keeps the same order.

from __future__ import annotations

import logging
from typing import NamedTuple

import numpy as np

from .conversions import HLS, HUE_MAX, PERCENT_MAX, RGB_MAX, clamp
from .errors import ColorRangeError

log = logging.getLogger(__name__)


class GradientCursor(NamedTuple):
    x: float  # 0..1, saturation
    y: float  # 0..1, 1 - lightness


def cursor_for(hls: HLS) -> GradientCursor:
    return GradientCursor(hls.s / PERCENT_MAX, 1 - hls.l / PERCENT_MAX)


def point_to_hls(hue: float, x: float, y: float) -> tuple[float, float, float]:
    """Cursor fractions → (h, l, s). Not rounded; the canvas is continuous."""
    return hue, PERCENT_MAX - y * PERCENT_MAX, x * PERCENT_MAX


def _hue_to_channel(p: np.ndarray, q: np.ndarray, t: float) -> np.ndarray:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    # t is constant across the field: one branch for the whole array
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def _round_half_up(v: np.ndarray) -> np.ndarray:
    # np.round is half-to-even
    return np.floor(v + 0.5)


def gradient_field(hue: float, width: int, height: int) -> np.ndarray:
    """(height, width, 3) uint8 RGB for ``hue``; pixel (x, y) is
    hls_to_rgb(hue, 100 - 100*y/height, 100*x/width)."""
    if not 0 <= hue <= HUE_MAX:
        raise ColorRangeError("Hue must be between 0 and 360", model="hls", value=hue)
    if width < 1 or height < 1:
        raise ValueError("gradient size must be at least 1×1")

    xs = np.arange(width, dtype=np.float64)
    ys = np.arange(height, dtype=np.float64)
    sat = (xs / width) * PERCENT_MAX
    light = PERCENT_MAX - (ys / height) * PERCENT_MAX

    s_n = np.broadcast_to(sat / PERCENT_MAX, (height, width))
    l_n = np.broadcast_to((light / PERCENT_MAX)[:, None], (height, width))
    h_n = hue / HUE_MAX

    q = np.where(l_n < 0.5, l_n * (1 + s_n), l_n + s_n - l_n * s_n)
    p = 2 * l_n - q

    chans = []
    for offset in (1 / 3, 0.0, -1 / 3):
        t = h_n + offset if offset else h_n
        ch = _hue_to_channel(p, q, t)
        # s == 0 column is pure gray
        ch = np.where(s_n == 0, l_n, ch)
        chans.append(ch)

    rgb = _round_half_up(np.stack(chans, axis=-1) * RGB_MAX)
    return np.clip(rgb, 0, RGB_MAX).astype(np.uint8)


def field_size(width, height, *, default: int, limit: int) -> tuple[int, int]:
    """Parse requested canvas size, falling back to ``default`` and capping at ``limit``."""
    w = default if width is None else int(width)
    h = default if height is None else int(height)
    return int(clamp(w, 1, limit)), int(clamp(h, 1, limit))


__all__ = ["GradientCursor", "cursor_for", "point_to_hls", "gradient_field", "field_size"]
