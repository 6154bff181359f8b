from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import ScanError
from .utils import iter_numbered_lines, read_text


@dataclass(frozen=True)
class FileRecord:
    id: str
    name: str
    directory: str
    created_at: datetime
    modified_at: datetime
    size_bytes: int

    @property
    def path(self) -> Path:
        return Path(os.path.join(self.directory, self.name))


@dataclass(frozen=True)
class Finding:
    file_id: str
    scanner_name: str
    payload: str

    def as_row(self) -> Tuple[str, str, str]:
        return (self.file_id, self.scanner_name, self.payload)


class ScanContext:
    """Read-only view of one file shared by every scanner run against it.

    The content is read on first use and cached. A read or decode failure is
    remembered and every later access raises a fresh error of the same kind,
    so callers may annotate the one they catch without touching the others.
    """

    def __init__(
        self,
        record: FileRecord,
        *,
        detect_encoding: bool = False,
        max_bytes: Optional[int] = None,
    ) -> None:
        self.record = record
        self.path = record.path
        self.detect_encoding = detect_encoding
        self.max_bytes = max_bytes
        self._text: Optional[str] = None
        self._error: Optional[ScanError] = None

    @property
    def text(self) -> str:
        if self._error is not None:
            err = self._error
            raise type(err)(err.message, path=err.path) from err
        if self._text is None:
            try:
                self._text = read_text(
                    self.path, detect_encoding=self.detect_encoding, max_bytes=self.max_bytes
                )
            except ScanError as exc:
                self._error = exc
                raise type(exc)(exc.message, path=exc.path) from exc
        return self._text

    def lines(self) -> List[Tuple[int, str]]:
        return list(iter_numbered_lines(self.text))


@dataclass
class ScanStats:
    files: int = 0
    findings: int = 0
    errors: int = 0
    elapsed: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "files": self.files,
            "findings": self.findings,
            "errors": self.errors,
            "elapsed_seconds": round(self.elapsed, 3),
        }


@dataclass
class ScanResult:
    records: List[FileRecord] = field(default_factory=list)
    findings: List[Finding] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)

    def findings_for(self, file_id: str) -> List[Finding]:
        return [f for f in self.findings if f.file_id == file_id]

    def counts_by_scanner(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for f in self.findings:
            counts[f.scanner_name] = counts.get(f.scanner_name, 0) + 1
        return counts
