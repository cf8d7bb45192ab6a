"""Error types raised while loading or running a classifier.

I/O problems surface as the built-in OSError family. Everything else is a
BertError, which subclasses ValueError so callers that only care about "bad
input" can catch one type.
"""
from __future__ import annotations

from collections.abc import Sequence


class BertError(ValueError):
    """Base class for all bertinfer failures."""


class BundleFormatError(BertError):
    """The weight bundle could not be parsed."""


class MissingTensorError(BertError):
    """A required tensor is absent under every known name."""

    def __init__(self, keys: Sequence[str]) -> None:
        self.keys: tuple[str, ...] = tuple(keys)
        if len(self.keys) == 1:
            message = f"Missing tensor: {self.keys[0]}"
        else:
            message = "Missing tensor, tried: " + ", ".join(self.keys)
        super().__init__(message)


class DtypeError(BertError):
    """A tensor does not carry the dtype its consumer needs."""


class ShapeError(BertError):
    """A tensor shape does not fit the operation using it."""


class ConfigError(BertError):
    """A configuration file or value is malformed."""


class BackendError(BertError):
    """The requested compute backend is unavailable."""
