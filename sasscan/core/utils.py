from __future__ import annotations

import io
from pathlib import Path
from typing import Iterator, Optional, Tuple

import chardet  # type: ignore

from .errors import ScanEncodingError, ScanIOError


def read_bytes(path: Path, max_bytes: Optional[int] = None) -> bytes:
    # Oversized files are reported as unreadable rather than scanned truncated.
    try:
        with path.open("rb") as f:
            if max_bytes is None:
                return f.read()
            data = f.read(max_bytes + 1)
    except OSError as exc:
        raise ScanIOError(f"unable to read: {exc.strerror or exc}", path=path) from exc
    if len(data) > max_bytes:
        raise ScanIOError(f"file exceeds {max_bytes:,} bytes", path=path)
    return data


def decode_text(data: bytes, path: Path, detect_encoding: bool = False) -> str:
    """Decode file content as UTF-8.

    With ``detect_encoding`` a chardet guess is tried when strict UTF-8
    decoding fails. Content that still cannot be decoded raises
    :class:`ScanEncodingError` so the caller can record it against the file
    instead of scanning mangled text.
    """

    try:
        return data.decode("utf-8", errors="strict")
    except UnicodeDecodeError as exc:
        utf8_error = exc

    if detect_encoding:
        enc = chardet.detect(data).get("encoding")
        if enc:
            try:
                return data.decode(enc, errors="strict")
            except (LookupError, UnicodeDecodeError):
                pass
    raise ScanEncodingError(f"not valid UTF-8: {utf8_error.reason} at byte {utf8_error.start}", path=path)


def read_text(path: Path, detect_encoding: bool = False, max_bytes: Optional[int] = None) -> str:
    return decode_text(read_bytes(path, max_bytes), path, detect_encoding=detect_encoding)


def iter_lines(text: str) -> Iterator[str]:
    # Only "\n" ends a line; a trailing "\r" of a "\r\n" pair is dropped.
    buf = io.StringIO(text, newline="\n")
    for line in buf:
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        yield line


def iter_numbered_lines(text: str) -> Iterator[Tuple[int, str]]:
    return enumerate(iter_lines(text), start=1)


def count_lines(text: str) -> int:
    return sum(1 for _ in iter_lines(text))
