from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Union


class ScanError(Exception):
    """Base class for errors raised while discovering or scanning files."""

    KIND = "ScanError"

    def __init__(
        self,
        message: str,
        *,
        path: Optional[Union[str, Path]] = None,
        scanner: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None
        self.scanner = scanner

    def __str__(self) -> str:
        extra = []
        if self.path:
            extra.append(f"file={self.path}")
        if self.scanner:
            extra.append(f"scanner={self.scanner}")
        if not extra:
            return self.message
        return f"{self.message} ({', '.join(extra)})"


class NotFoundError(ScanError):
    """A required directory or input file does not exist. Fatal."""

    KIND = "NotFound"


class ScanIOError(ScanError):
    """A file could not be opened or read. Recoverable per file."""

    KIND = "IoError"


class ScanEncodingError(ScanError):
    """A file's content could not be decoded as text. Recoverable per file."""

    KIND = "EncodingError"


class PatternError(ScanError):
    """A built-in pattern failed to compile."""

    KIND = "PatternError"


def compile_pattern(pattern: str, flags: int = 0) -> "re.Pattern[str]":
    # Built-in patterns are compiled at import time so a bad one fails at startup.
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise PatternError(f"invalid pattern {pattern!r}: {exc}") from exc
