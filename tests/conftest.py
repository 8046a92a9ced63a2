"""Pytest fixtures for tests."""

import pytest

from color_picker.app import create_app
from color_picker.controller import ColorController, NullView


class RecordingView(NullView):
    """Remembers every push from the controller, in order."""

    def __init__(self):
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, args))

    def show_rgb(self, rgb):
        self._record("rgb", rgb)

    def show_cmyk(self, cmyk):
        self._record("cmyk", cmyk)

    def show_hls(self, hls):
        self._record("hls", hls)

    def show_hex(self, hex_value):
        self._record("hex", hex_value)

    def show_preview(self, hex_value, text_color):
        self._record("preview", hex_value, text_color)

    def show_warning(self, message, lifetime):
        self._record("warning", message, lifetime)

    def hide_warning(self):
        self._record("hide_warning")

    def move_cursor(self, cursor):
        self._record("cursor", cursor)

    def render_gradient(self, hue):
        self._record("gradient", hue)

    def named(self, name):
        return [args for n, args in self.calls if n == name]


class FakeClock:
    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def view():
    return RecordingView()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def controller(view, clock):
    return ColorController(view, clock=clock)


@pytest.fixture
def app():
    return create_app({"TESTING": True, "SECRET_KEY": "test", "MAX_SESSIONS": 8})


@pytest.fixture
def client(app):
    return app.test_client()
