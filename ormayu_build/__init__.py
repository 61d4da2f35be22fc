"""ormayu-build: build configuration resolver for the ormayu_app Android module."""

from __future__ import annotations

from ormayu_build.__version__ import __version__

__all__ = ["__version__"]
