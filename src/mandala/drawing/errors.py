from __future__ import annotations

from pathlib import Path
from typing import Optional


class DrawingError(Exception):
    """Base class for non-fatal drawing failures reported to the host."""


class EmptyDrawing(DrawingError):
    def __init__(self, message: str = "No drawing to save.") -> None:
        super().__init__(message)


class EncodingFailure(DrawingError):
    pass


class WriteFailure(DrawingError):
    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path
