"""Application settings.

Defaults live here; ``create_app`` layers ``COLOR_PICKER_*`` environment
variables and explicit overrides on top (Flask ``from_prefixed_env`` parses
values as JSON, so ``COLOR_PICKER_WARNING_LIFETIME=2.5`` arrives as a float).
"""

from __future__ import annotations

from typing import Any, Mapping

from flask import Flask

ENV_PREFIX = "COLOR_PICKER"

DEFAULTS: Mapping[str, Any] = {
    "WARNING_LIFETIME": 5.0,  # seconds a clamping/validation warning stays up
    "GRADIENT_DEFAULT_SIZE": 256,
    "GRADIENT_MAX_SIZE": 512,
    "MAX_SESSIONS": 1024,
    "LOG_LEVEL": "INFO",
    "SECRET_KEY": "dev",  # override in production
}


def configure(app: Flask, overrides: Mapping[str, Any] | None = None) -> None:
    app.config.update(DEFAULTS)
    app.config.from_prefixed_env(ENV_PREFIX)
    if overrides:
        app.config.update(overrides)
    if float(app.config["WARNING_LIFETIME"]) <= 0:
        raise ValueError("WARNING_LIFETIME must be positive")
    if int(app.config["GRADIENT_MAX_SIZE"]) < 1:
        raise ValueError("GRADIENT_MAX_SIZE must be at least 1")
