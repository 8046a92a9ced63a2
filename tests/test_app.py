import base64

import numpy as np
import pytest

from color_picker.app import create_app, edit_from_json
from color_picker.controller import KEEP, CmykEdit, HexEdit, RgbEdit
from color_picker.gradient import gradient_field


def test_initial_state(client):
    resp = client.get("/api/color")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["color"]["hex"] == "#FFFFFF"
    assert data["color"]["cmyk"] == {"c": 0, "m": 0, "y": 0, "k": 0}
    assert data["color"]["hls"] == {"h": 0, "l": 100, "s": 0}
    assert data["border"] == "rgba(0, 0, 0, 0.3)"
    assert data["cursor"] == {"x": 0.0, "y": 0.0}
    assert data["warning"] is None


def test_rgb_then_partial_cmyk(client):
    resp = client.post("/api/color/rgb", json={"r": 255, "g": 0, "b": 0})
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["status"] == "applied"
    assert data["color"]["hex"] == "#FF0000"
    assert data["color"]["hls"] == {"h": 0, "l": 50, "s": 100}

    # c, m, y stay as displayed (0, 100, 100)
    data = client.post("/api/color/cmyk", json={"k": 100}).get_json()
    assert data["color"]["rgb"] == {"r": 0, "g": 0, "b": 0}
    assert data["color"]["cmyk"] == {"c": 0, "m": 100, "y": 100, "k": 100}
    assert data["warning"] is None


def test_clamped_input_reports_warning(client):
    data = client.post("/api/color/hls", json={"h": 0, "l": 50, "s": 250}).get_json()
    assert data["status"] == "applied"
    assert data["color"]["hex"] == "#FF0000"
    assert data["warning"]["message"] == "S value clamped to 100"
    assert 0 < data["warning"]["expires_in"] <= 5.0


def test_rejected_update_keeps_state(client):
    client.post("/api/color/hex", json={"value": "00ff00"})
    resp = client.post("/api/color/rgb", json={"r": "lots"})
    assert resp.status_code == 422
    data = resp.get_json()
    assert data["status"] == "rejected"
    assert data["color"]["hex"] == "#00FF00"
    assert data["error"] == data["warning"]["message"]

    resp = client.post("/api/color/hex", json={"value": "#12345"})
    assert resp.status_code == 422
    assert client.get("/api/color").get_json()["color"]["hex"] == "#00FF00"


def test_gradient_point(client):
    client.post("/api/color/rgb", json={"r": 0, "g": 0, "b": 255})
    data = client.post("/api/color/gradient", json={"x": 1, "y": 0.5}).get_json()
    assert data["color"]["hex"] == "#0000FF"
    data = client.post("/api/color/gradient", json={"x": 2, "y": 0.5}).get_json()
    assert data["status"] == "skipped"


@pytest.mark.parametrize(
    "model,body",
    [
        ("rgb", {"x": 1}),
        ("rgb", {"r": True}),
        ("lab", {"l": 50}),
        ("hex", {"value": 123}),
        ("gradient", {"x": 0.5}),
        ("gradient", {"x": "left", "y": 0}),
    ],
)
def test_malformed_edits(client, model, body):
    resp = client.post(f"/api/color/{model}", json=body)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_non_json_body(client):
    resp = client.post("/api/color/rgb", data="r=1", content_type="text/plain")
    assert resp.status_code == 400


def test_sessions_are_isolated(app):
    alice = app.test_client()
    bob = app.test_client()
    alice.post("/api/color/rgb", json={"r": 0, "g": 0, "b": 0})
    assert alice.get("/api/color").get_json()["color"]["hex"] == "#000000"
    assert bob.get("/api/color").get_json()["color"]["hex"] == "#FFFFFF"
    assert len(app.extensions["color_picker.sessions"]) == 2


def test_edit_from_json():
    assert edit_from_json("rgb", {"g": 5}) == RgbEdit(KEEP, 5, KEEP)
    assert edit_from_json("cmyk", {}) == CmykEdit()
    assert edit_from_json("hex", {"value": "#fff000"}) == HexEdit("#fff000")


# ---- stateless conversion --------------------------------------------------


def test_convert_rgb(client):
    data = client.post("/api/convert", json={"model": "rgb", "values": [255, 0, 0]}).get_json()
    assert data["cmyk"] == {"c": 0, "m": 100, "y": 100, "k": 0}
    assert data["hsv"] == {"h": 0, "s": 100, "v": 100}
    assert data["hex"] == "#FF0000"


def test_convert_other_models(client):
    def hex_of(body):
        return client.post("/api/convert", json=body).get_json()["hex"]

    assert hex_of({"model": "cmyk", "values": [0, 0, 0, 100]}) == "#000000"
    assert hex_of({"model": "hls", "values": [120, 50, 100]}) == "#00FF00"
    assert hex_of({"model": "hsv", "values": [-120, 100, 100]}) == "#0000FF"
    assert hex_of({"model": "hex", "value": "ff8800"}) == "#FF8800"
    assert hex_of({"model": "css", "value": "rebeccapurple"}) == "#663399"


@pytest.mark.parametrize(
    "body",
    [
        {"model": "rgb", "values": [256, 0, 0]},
        {"model": "cmyk", "values": [-1, 0, 0, 0]},
        {"model": "hls", "values": [361, 0, 0]},
        {"model": "hex", "value": "12345"},
        {"model": "hex", "value": "GGGGGG"},
        {"model": "rgb", "values": [1, 2]},
        {"model": "rgb", "values": "1,2,3"},
        {"model": "css", "value": "not a color"},
        {"model": "yuv", "values": [0, 0, 0]},
    ],
)
def test_convert_failures(client, body):
    resp = client.post("/api/convert", json=body)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


# ---- palettes / gradient ---------------------------------------------------


def test_palettes(client):
    data = client.get("/api/palettes").get_json()
    assert sorted(data) == ["basic", "pastel", "vibrant"]
    assert client.get("/api/palettes/pastel").get_json()[0] == "#FFB6C1"
    resp = client.get("/api/palettes/neon")
    assert resp.status_code == 404


def test_gradient_bytes(client):
    data = client.get("/api/gradient?hue=120&width=4&height=2").get_json()
    assert (data["width"], data["height"]) == (4, 2)
    pixels = np.frombuffer(base64.b64decode(data["rgb"]), dtype=np.uint8).reshape(2, 4, 3)
    assert np.array_equal(pixels, gradient_field(120, 4, 2))


def test_gradient_size_is_capped():
    app = create_app({"TESTING": True, "GRADIENT_MAX_SIZE": 8})
    data = app.test_client().get("/api/gradient?width=100&height=1").get_json()
    assert data["width"] == 8
    assert data["hue"] == 0


def test_gradient_bad_query(client):
    assert client.get("/api/gradient?hue=400").status_code == 400
    assert client.get("/api/gradient?hue=red").status_code == 400
    assert client.get("/api/gradient?width=wide").status_code == 400


def test_bad_config_is_refused():
    with pytest.raises(ValueError):
        create_app({"WARNING_LIFETIME": 0})
