"""Exceptions raised by the caption injection pipeline."""

from __future__ import annotations

from pathlib import Path


class CaptionError(Exception):
    """Base class for pipeline errors."""


class InputDocumentError(CaptionError):
    """An input file could not be read, parsed, or has an unexpected shape."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class UsageError(CaptionError):
    """The command line did not describe a runnable job."""
