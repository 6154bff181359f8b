"""Recursive discovery of the files to scan."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .errors import NotFoundError, ScanIOError
from .models import FileRecord


def _utc_seconds(ts: float) -> datetime:
    return datetime.fromtimestamp(int(ts), tz=timezone.utc)


def make_record(path: Path) -> FileRecord:
    try:
        st = path.stat()
    except OSError as exc:
        raise ScanIOError(f"unable to stat: {exc.strerror or exc}", path=path) from exc
    # st_birthtime is missing on most Linux builds; fall back to ctime.
    created = getattr(st, "st_birthtime", st.st_ctime)
    return FileRecord(
        id=str(uuid.uuid4()),
        name=path.name,
        directory=str(path.parent),
        created_at=_utc_seconds(created),
        modified_at=_utc_seconds(st.st_mtime),
        size_bytes=st.st_size,
    )


def iter_files(root: Path) -> Iterator[Path]:
    """Yield every regular file under ``root``, depth first, entries sorted by name."""
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise ScanIOError(f"unable to list directory: {exc.strerror or exc}", path=root) from exc
    for p in entries:
        if p.is_file():
            yield p
        elif p.is_dir():
            yield from iter_files(p)


def iter_file_records(root: Path) -> Iterator[FileRecord]:
    if not root.is_dir():
        raise NotFoundError("input directory does not exist", path=root)
    for p in iter_files(root):
        yield make_record(p)
