"""Validation failures raised by the conversion layer.

Every failure is a ``ValueError`` so callers that only care about "bad
input" can keep catching that. The controller catches ``ColorError`` and
turns it into a rejected update; nothing here is fatal.
"""

from __future__ import annotations


class ColorError(ValueError):
    """Base class for invalid color input."""


class ColorRangeError(ColorError):
    """A numeric channel outside its model's legal range."""

    def __init__(self, message: str, *, model: str, value: object = None) -> None:
        super().__init__(message)
        self.model = model
        self.value = value


class HexFormatError(ColorError):
    """A HEX string with the wrong length or non-hex digits."""


class UnknownPaletteError(ColorError, KeyError):
    def __init__(self, category: str) -> None:
        super().__init__(f"unknown palette '{category}'")
        self.category = category

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]
