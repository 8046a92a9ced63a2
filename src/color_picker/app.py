from __future__ import annotations

import base64
import logging
from typing import Any, Mapping

from flask import Flask, jsonify, request, session

from .config import configure
from .controller import (
    KEEP,
    CmykEdit,
    ColorController,
    ColorEdit,
    GradientEdit,
    HexEdit,
    HlsEdit,
    RgbEdit,
    UpdateStatus,
    preview_border,
)
from .conversions import Color, cmyk_to_rgb, hex_to_rgb, hls_to_rgb, hsv_to_rgb
from .errors import ColorError, UnknownPaletteError
from .gradient import field_size, gradient_field
from .palette import PALETTES, palette, parse_color
from .sessions import SessionStore

log = logging.getLogger(__name__)

SESSION_KEY = "picker_session"

EDIT_FIELDS: Mapping[str, tuple[type, tuple[str, ...]]] = {
    "rgb": (RgbEdit, ("r", "g", "b")),
    "cmyk": (CmykEdit, ("c", "m", "y", "k")),
    "hls": (HlsEdit, ("h", "l", "s")),
}

CONVERTERS = {
    "rgb": lambda *v: Color.from_rgb(*v),
    "cmyk": lambda *v: Color.from_rgb(*cmyk_to_rgb(*v)),
    "hls": lambda *v: Color.from_rgb(*hls_to_rgb(*v)),
    "hsv": lambda *v: Color.from_rgb(*hsv_to_rgb(*v)),
}


def supported_models() -> tuple[str, ...]:
    return tuple(list(CONVERTERS.keys()) + ["hex", "css"])


def edit_from_json(model: str, body: Mapping[str, Any]) -> ColorEdit:
    """JSON body → edit record. Absent fields are KEEP; unknown fields are an error."""
    if model == "hex":
        value = body.get("value")
        if not isinstance(value, str):
            raise ValueError("'value' must be a string")
        return HexEdit(value)
    if model == "gradient":
        try:
            return GradientEdit(float(body["x"]), float(body["y"]))
        except KeyError as exc:
            raise ValueError(f"missing field {exc}") from None
    if model not in EDIT_FIELDS:
        raise ValueError(f"unknown model '{model}'")

    cls, names = EDIT_FIELDS[model]
    extra = set(body) - set(names)
    if extra:
        raise ValueError(f"unknown fields for {model}: {', '.join(sorted(extra))}")
    for name in names:
        if isinstance(body.get(name), bool):
            raise ValueError(f"'{name}' must be a number")
    return cls(**{name: body.get(name, KEEP) for name in names})


def state_payload(ctrl: ColorController) -> dict[str, Any]:
    color = ctrl.color
    warning = ctrl.warning
    return {
        "color": color.as_dict(),
        "border": preview_border(color.text_color),
        "cursor": ctrl.cursor._asdict(),
        "warning": (
            None
            if warning is None
            else {"message": warning.message, "expires_in": ctrl.warning_remaining()}
        ),
    }


# ----------------------------- Flask app ----------------------------------


def create_app(overrides: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    configure(app, overrides)
    logging.basicConfig(level=app.config["LOG_LEVEL"], format="%(levelname)s: %(message)s")

    lifetime = float(app.config["WARNING_LIFETIME"])
    store = SessionStore(
        lambda: ColorController(warning_lifetime=lifetime),
        max_sessions=int(app.config["MAX_SESSIONS"]),
    )
    app.extensions["color_picker.sessions"] = store

    def session_id() -> str:
        sid = session.get(SESSION_KEY)
        if not sid:
            sid = store.new_id()
            session[SESSION_KEY] = sid
        return sid

    @app.get("/api/color")
    def current_color():
        with store.checkout(session_id()) as ctrl:
            return jsonify(state_payload(ctrl))

    @app.post("/api/color/<model>")
    def update_color(model: str):
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return jsonify({"error": "expected a JSON object"}), 400
        try:
            edit = edit_from_json(model, body)
        except (TypeError, ValueError) as e:
            return jsonify({"error": str(e)}), 400

        with store.checkout(session_id()) as ctrl:
            result = ctrl.apply(edit)
            payload = state_payload(ctrl)
        payload["status"] = result.status.value

        if result.status is UpdateStatus.REJECTED:
            payload["error"] = str(result.error)
            return jsonify(payload), 422
        return jsonify(payload)

    @app.post("/api/convert")
    def convert():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return jsonify({"error": "expected a JSON object"}), 400
        model = str(body.get("model", "")).lower()
        if model not in supported_models():
            return (
                jsonify(
                    {
                        "error": f"unknown model '{model}'",
                        "supported": supported_models(),
                    }
                ),
                400,
            )
        try:
            if model == "hex":
                color = Color.from_rgb(*hex_to_rgb(body.get("value")))
            elif model == "css":
                color = Color.from_rgb(*hex_to_rgb(parse_color(str(body.get("value", "")))))
            else:
                values = body.get("values")
                if not isinstance(values, list):
                    return jsonify({"error": "'values' must be a list"}), 400
                color = CONVERTERS[model](*values)
        except ColorError as e:
            return jsonify({"error": str(e)}), 400
        except TypeError:
            return jsonify({"error": f"wrong number of values for {model}"}), 400
        except Exception as exc:
            log.exception("Conversion failed")
            return jsonify({"error": str(exc)}), 500

        return jsonify(color.as_dict())

    @app.get("/api/palettes")
    def palettes():
        return jsonify({name: list(colors) for name, colors in PALETTES.items()})

    @app.get("/api/palettes/<category>")
    def palette_colors(category: str):
        try:
            return jsonify(list(palette(category)))
        except UnknownPaletteError as e:
            return jsonify({"error": str(e), "supported": sorted(PALETTES)}), 404

    @app.get("/api/gradient")
    def gradient():
        try:
            hue = float(request.args.get("hue", 0))
            width, height = field_size(
                request.args.get("width"),
                request.args.get("height"),
                default=int(app.config["GRADIENT_DEFAULT_SIZE"]),
                limit=int(app.config["GRADIENT_MAX_SIZE"]),
            )
            pixels = gradient_field(hue, width, height)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        return jsonify(
            {
                "hue": hue,
                "width": width,
                "height": height,
                "rgb": base64.b64encode(pixels.tobytes()).decode("ascii"),
            }
        )

    return app


def main() -> None:
    # threaded=True is fine: each session's controller is locked per request
    create_app().run(debug=False, threaded=True)


if __name__ == "__main__":
    main()
