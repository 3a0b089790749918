# evapurge/errors.py
from __future__ import annotations

from pathlib import Path
from typing import Sequence


class PurgeError(Exception):
    """Base class for every failure the purge pipeline reports."""


class CSSNotFoundError(PurgeError, FileNotFoundError):
    """The input stylesheet does not exist; raised before any scanning."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(f"CSS file not found: {self.path}")


class ConfigError(PurgeError):
    """
    A config file could not be found, parsed or validated.

    ``errors`` holds one human-readable line per validation problem.
    """

    def __init__(self, message: str, errors: Sequence[str] = ()):
        self.errors = list(errors)
        if self.errors:
            message = "\n".join([message, *(f"  ❌ {e}" for e in self.errors)])
        super().__init__(message)
