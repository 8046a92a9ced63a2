"""Single-writer synchronization of one color across every model.

The controller owns the authoritative :class:`~color_picker.conversions.Color`.
An edit arrives in one model (RGB, CMYK, HLS, HEX or a gradient point), is
clamped into range, converted to the RGB pivot, and every other model is
derived from that pivot. The result is pushed to a view collaborator.

While an update is running the controller ignores further updates. Views
usually echo a displayed value back as an input event; that echo lands
here while the guard is set and is dropped instead of recursing.
"""

from __future__ import annotations

import enum
import logging
import math
import time
from dataclasses import dataclass, replace
from numbers import Real
from typing import Callable, Protocol, Union

from .conversions import (
    CMYK,
    HLS,
    HUE_MAX,
    PERCENT_MAX,
    RGB,
    RGB_MAX,
    Color,
    clamp,
    cmyk_to_rgb_unclamped,
    hex_to_rgb,
    hls_to_rgb,
    hls_to_rgb_unclamped,
    is_valid_hex,
    js_round,
)
from .errors import ColorError, ColorRangeError, HexFormatError
from .gradient import GradientCursor, cursor_for, point_to_hls

log = logging.getLogger(__name__)

DEFAULT_WARNING_LIFETIME = 5.0


class Keep(enum.Enum):
    """Marker for "leave this field as currently displayed"."""

    CURRENT = "current"

    def __repr__(self) -> str:
        return "KEEP"


KEEP = Keep.CURRENT

Field = Union[float, Keep]


# ---- edits ------------------------------------------------------------------


@dataclass(frozen=True)
class RgbEdit:
    r: Field = KEEP
    g: Field = KEEP
    b: Field = KEEP


@dataclass(frozen=True)
class CmykEdit:
    c: Field = KEEP
    m: Field = KEEP
    y: Field = KEEP
    k: Field = KEEP


@dataclass(frozen=True)
class HlsEdit:
    h: Field = KEEP
    l: Field = KEEP  # noqa: E741
    s: Field = KEEP


@dataclass(frozen=True)
class HexEdit:
    value: str


@dataclass(frozen=True)
class GradientEdit:
    x: float
    y: float


ColorEdit = Union[RgbEdit, CmykEdit, HlsEdit, HexEdit, GradientEdit]


# ---- outcomes ---------------------------------------------------------------


class UpdateStatus(enum.Enum):
    APPLIED = "applied"
    REJECTED = "rejected"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class UpdateResult:
    status: UpdateStatus
    color: Color
    warning: str | None = None
    error: ColorError | None = None

    @property
    def ok(self) -> bool:
        return self.status is UpdateStatus.APPLIED


@dataclass(frozen=True)
class ColorWarning:
    message: str
    raised_at: float
    lifetime: float

    def expired(self, now: float) -> bool:
        return now - self.raised_at >= self.lifetime

    def remaining(self, now: float) -> float:
        return max(0.0, self.lifetime - (now - self.raised_at))


# ---- view collaborator ------------------------------------------------------


class ColorView(Protocol):
    def show_rgb(self, rgb: RGB) -> None: ...
    def show_cmyk(self, cmyk: CMYK) -> None: ...
    def show_hls(self, hls: HLS) -> None: ...
    def show_hex(self, hex_value: str) -> None: ...
    def show_preview(self, hex_value: str, text_color: str) -> None: ...
    def show_warning(self, message: str, lifetime: float) -> None: ...
    def hide_warning(self) -> None: ...
    def move_cursor(self, cursor: GradientCursor) -> None: ...
    def render_gradient(self, hue: int) -> None: ...


class NullView:
    """No-op view; subclass and override what you render."""

    def show_rgb(self, rgb: RGB) -> None:
        pass

    def show_cmyk(self, cmyk: CMYK) -> None:
        pass

    def show_hls(self, hls: HLS) -> None:
        pass

    def show_hex(self, hex_value: str) -> None:
        pass

    def show_preview(self, hex_value: str, text_color: str) -> None:
        pass

    def show_warning(self, message: str, lifetime: float) -> None:
        pass

    def hide_warning(self) -> None:
        pass

    def move_cursor(self, cursor: GradientCursor) -> None:
        pass

    def render_gradient(self, hue: int) -> None:
        pass


def preview_border(text_color: str) -> str:
    """Translucent swatch border matching the contrast text color."""
    if text_color == "#FFFFFF":
        return "rgba(255, 255, 255, 0.3)"
    return "rgba(0, 0, 0, 0.3)"


# ---- controller -------------------------------------------------------------


class ColorController:
    def __init__(
        self,
        view: ColorView | None = None,
        *,
        warning_lifetime: float = DEFAULT_WARNING_LIFETIME,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._view: ColorView = view if view is not None else NullView()
        self._clock = clock
        self._lifetime = float(warning_lifetime)
        self._updating = False
        self._warning: ColorWarning | None = None
        self._rendered_hue: int | None = None
        # placeholder until the first update has run
        self._color = Color.from_rgb(RGB_MAX, RGB_MAX, RGB_MAX)
        self.update_from_rgb(RGB_MAX, RGB_MAX, RGB_MAX)

    # ---- read side ----

    @property
    def color(self) -> Color:
        return self._color

    @property
    def is_updating(self) -> bool:
        return self._updating

    @property
    def warning(self) -> ColorWarning | None:
        w = self._warning
        if w is not None and w.expired(self._clock()):
            return None
        return w

    @property
    def cursor(self) -> GradientCursor:
        return cursor_for(self._color.hls)

    def warning_remaining(self) -> float:
        w = self.warning
        return 0.0 if w is None else w.remaining(self._clock())

    # ---- entry points ----

    def update_from_rgb(self, r: Field = KEEP, g: Field = KEEP, b: Field = KEEP) -> UpdateResult:
        def build() -> tuple[Color, list[str]]:
            notes: list[str] = []
            cur = self._color.rgb
            rgb = RGB(
                _resolve("R", r, cur.r, 0, RGB_MAX, "rgb", notes),
                _resolve("G", g, cur.g, 0, RGB_MAX, "rgb", notes),
                _resolve("B", b, cur.b, 0, RGB_MAX, "rgb", notes),
            )
            return Color.from_rgb(*rgb), notes

        return self._transaction("rgb", build)

    def update_from_cmyk(
        self, c: Field = KEEP, m: Field = KEEP, y: Field = KEEP, k: Field = KEEP
    ) -> UpdateResult:
        def build() -> tuple[Color, list[str]]:
            notes: list[str] = []
            cur = self._color.cmyk
            cmyk = CMYK(
                _resolve("C", c, cur.c, 0, PERCENT_MAX, "cmyk", notes),
                _resolve("M", m, cur.m, 0, PERCENT_MAX, "cmyk", notes),
                _resolve("Y", y, cur.y, 0, PERCENT_MAX, "cmyk", notes),
                _resolve("K", k, cur.k, 0, PERCENT_MAX, "cmyk", notes),
            )
            rgb = self._bounded(cmyk_to_rgb_unclamped(*cmyk), notes)
            # the edited model keeps the user's values
            return replace(Color.from_rgb(*rgb), cmyk=cmyk), notes

        return self._transaction("cmyk", build)

    def update_from_hls(self, h: Field = KEEP, l: Field = KEEP, s: Field = KEEP) -> UpdateResult:  # noqa: E741
        def build() -> tuple[Color, list[str]]:
            notes: list[str] = []
            cur = self._color.hls
            hls = HLS(
                _resolve("H", h, cur.h, 0, HUE_MAX, "hls", notes),
                _resolve("L", l, cur.l, 0, PERCENT_MAX, "hls", notes),
                _resolve("S", s, cur.s, 0, PERCENT_MAX, "hls", notes),
            )
            rgb = self._bounded(hls_to_rgb_unclamped(*hls), notes)
            return replace(Color.from_rgb(*rgb), hls=hls), notes

        return self._transaction("hls", build)

    def update_from_hue(self, h: float) -> UpdateResult:
        return self.update_from_hls(h=h)

    def update_from_hex(self, text: str) -> UpdateResult:
        """Hex field: ``ff8800``, ``#FF8800``; routed through the RGB entry point."""
        if self._updating:
            return self._skipped("hex")
        value = (text or "").strip().upper()
        if not value.startswith("#"):
            value = "#" + value
        if not is_valid_hex(value):
            return self._reject("hex", HexFormatError(f"Invalid HEX color: {text!r}"))
        return self.update_from_rgb(*hex_to_rgb(value))

    def update_from_gradient(self, x: float, y: float) -> UpdateResult:
        """Canvas point as fractions of width/height; outside the canvas is ignored."""
        if self._updating:
            return self._skipped("gradient")
        if not (_finite(x) and _finite(y) and 0 <= x <= 1 and 0 <= y <= 1):
            log.debug("gradient point (%r, %r) outside canvas", x, y)
            return UpdateResult(UpdateStatus.SKIPPED, self._color)
        h, l, s = point_to_hls(self._color.hls.h, x, y)  # noqa: E741
        try:
            rgb = hls_to_rgb(h, l, s)
        except ColorError as exc:
            return self._reject("gradient", exc)
        return self.update_from_rgb(*rgb)

    def apply(self, edit: ColorEdit) -> UpdateResult:
        if isinstance(edit, RgbEdit):
            return self.update_from_rgb(edit.r, edit.g, edit.b)
        if isinstance(edit, CmykEdit):
            return self.update_from_cmyk(edit.c, edit.m, edit.y, edit.k)
        if isinstance(edit, HlsEdit):
            return self.update_from_hls(edit.h, edit.l, edit.s)
        if isinstance(edit, HexEdit):
            return self.update_from_hex(edit.value)
        if isinstance(edit, GradientEdit):
            return self.update_from_gradient(edit.x, edit.y)
        raise TypeError(f"unsupported edit {type(edit).__name__}")

    # ---- clamping warnings ----

    def check_color_bounds(self, rgb: tuple[float, float, float]) -> RGB:
        """Warn about pre-clamp channels outside 0..255; clear the warning otherwise."""
        notes: list[str] = []
        clamped = self._bounded(rgb, notes)
        if notes:
            self._show_warning(", ".join(notes))
        else:
            self._hide_warning()
        return clamped

    def clear_warning(self) -> None:
        self._hide_warning()

    # ---- internals ----

    @staticmethod
    def _bounded(rgb: tuple[float, float, float], notes: list[str]) -> RGB:
        out = []
        for name, v in zip("RGB", rgb):
            c = clamp(v, 0, RGB_MAX)
            if c != v:
                notes.append(f"{name} value clamped to {c}")
            out.append(js_round(c))
        return RGB(*out)

    def _transaction(self, model: str, build: Callable[[], tuple[Color, list[str]]]) -> UpdateResult:
        if self._updating:
            return self._skipped(model)

        self._updating = True
        try:
            try:
                color, notes = build()
            except ColorError as exc:
                return self._reject(model, exc)
            self._commit(color, notes)
            message = ", ".join(notes) or None
            return UpdateResult(UpdateStatus.APPLIED, color, warning=message)
        finally:
            self._updating = False

    def _commit(self, color: Color, notes: list[str]) -> None:
        self._color = color
        view = self._view

        hue = color.hls.h
        view.move_cursor(cursor_for(color.hls))
        if hue != self._rendered_hue:
            view.render_gradient(hue)
            self._rendered_hue = hue

        view.show_rgb(color.rgb)
        view.show_cmyk(color.cmyk)
        view.show_hls(color.hls)
        view.show_hex(color.hex)
        view.show_preview(color.hex, color.text_color)

        if notes:
            self._show_warning(", ".join(notes))
        else:
            self._hide_warning()

    def _reject(self, model: str, exc: ColorError) -> UpdateResult:
        log.warning("rejected %s update: %s", model, exc)
        self._show_warning(str(exc))
        return UpdateResult(UpdateStatus.REJECTED, self._color, warning=str(exc), error=exc)

    def _skipped(self, model: str) -> UpdateResult:
        log.debug("dropped re-entrant %s update", model)
        return UpdateResult(UpdateStatus.SKIPPED, self._color)

    def _show_warning(self, message: str) -> None:
        self._warning = ColorWarning(message, self._clock(), self._lifetime)
        self._view.show_warning(message, self._lifetime)

    def _hide_warning(self) -> None:
        self._warning = None
        self._view.hide_warning()


def _finite(v) -> bool:
    return isinstance(v, Real) and math.isfinite(v)


def _resolve(
    name: str, value: Field, current: int, lo: int, hi: int, model: str, notes: list[str]
) -> int:
    """KEEP → current displayed value; otherwise clamp into [lo, hi] and round."""
    if value is KEEP:
        return current
    if not _finite(value):
        raise ColorRangeError(f"{name} must be a number, got {value!r}", model=model, value=value)
    c = clamp(value, lo, hi)
    if c != value:
        notes.append(f"{name} value clamped to {c}")
    return js_round(c)


__all__ = [
    "KEEP",
    "Keep",
    "RgbEdit",
    "CmykEdit",
    "HlsEdit",
    "HexEdit",
    "GradientEdit",
    "ColorEdit",
    "UpdateStatus",
    "UpdateResult",
    "ColorWarning",
    "ColorView",
    "NullView",
    "ColorController",
    "preview_border",
]
