# python/pfmerge/errors.py
# Typed failures raised by the PF codec, accumulator and quality metrics
# Exists so callers can tell a missing file from a malformed one without string matching
# RELEVANT FILES: python/pfmerge/header.py, python/pfmerge/image.py, python/pfmerge/tools/merge.py

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class PfmError(Exception):
    """Base class for every error raised by pfmerge."""

    def __init__(self, message: str, path: Optional[PathLike] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class NotFound(PfmError, FileNotFoundError):
    """The input path does not exist or cannot be opened for reading."""


class FormatError(PfmError, ValueError):
    """Magic token mismatch, or a required header token is missing or unparsable."""


class TruncatedPayload(FormatError):
    """The pixel payload holds fewer floats than ``width * height * 3``."""

    def __init__(
        self,
        message: str,
        path: Optional[PathLike] = None,
        *,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ) -> None:
        super().__init__(message, path)
        self.expected = expected
        self.actual = actual


class GeometryMismatch(PfmError, ValueError):
    """Two images passed to accumulate or compare differ in width or height."""

    def __init__(self, expected, actual, path: Optional[PathLike] = None) -> None:
        super().__init__(
            f"image size mismatch: expected {expected[0]}x{expected[1]}, got {actual[0]}x{actual[1]}",
            path,
        )
        self.expected = tuple(expected)
        self.actual = tuple(actual)


class IoError(PfmError, OSError):
    """Writing an image to disk failed."""


class EmptyImage(PfmError, ValueError):
    """An operation that needs pixel data was given an empty image."""


__all__ = [
    "PfmError",
    "NotFound",
    "FormatError",
    "TruncatedPayload",
    "GeometryMismatch",
    "IoError",
    "EmptyImage",
]
