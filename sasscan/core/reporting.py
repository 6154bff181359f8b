from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from .config import (
    DETAIL_HEADER,
    DETAIL_STEM,
    INDEX_FILE,
    RECORD_DATE_FORMAT,
    REPORT_TIMESTAMP_FORMAT,
    SUMMARY_HEADER,
    SUMMARY_STEM,
)
from .errors import NotFoundError
from .models import Finding, ScanResult

# File names that are not valid UTF-8 reach us as surrogate escapes from the
# filesystem; they are written back as the original bytes.
REPORT_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class ReportPaths:
    summary: Path
    detail: Path
    index: Path


class Reporter:
    """Write the summary and detail tables of a scan as CSV.

    Rows are written with the ``csv`` module's minimal quoting, so payloads
    holding commas, quotes or whole multi-line SQL blocks read back unchanged
    with :func:`read_detail`.
    """

    def __init__(self, out_dir: Path) -> None:
        self.out_dir = out_dir

    def write_all(self, result: ScanResult, now: Optional[datetime] = None) -> ReportPaths:
        if not self.out_dir.is_dir():
            raise NotFoundError("output directory does not exist", path=self.out_dir)
        stamp = (now or datetime.now()).strftime(REPORT_TIMESTAMP_FORMAT)
        paths = ReportPaths(
            summary=self.out_dir / f"{SUMMARY_STEM}_{stamp}.csv",
            detail=self.out_dir / f"{DETAIL_STEM}_{stamp}.csv",
            index=self.out_dir / INDEX_FILE,
        )
        self.write_summary(result, paths.summary)
        self.write_detail(result.findings, paths.detail)

        index = {
            "summary": paths.summary.name,
            "detail": paths.detail.name,
            "stats": result.stats.to_dict(),
            "scanners": result.counts_by_scanner(),
        }
        paths.index.write_text(json.dumps(index, indent=2), encoding="utf-8")
        return paths

    def write_summary(self, result: ScanResult, path: Path) -> None:
        with path.open("w", newline="", encoding="utf-8", errors=REPORT_ERRORS) as f:
            writer = csv.writer(f)
            writer.writerow(SUMMARY_HEADER)
            for r in result.records:
                writer.writerow([
                    r.id,
                    r.name,
                    r.directory,
                    r.created_at.strftime(RECORD_DATE_FORMAT),
                    r.modified_at.strftime(RECORD_DATE_FORMAT),
                    str(r.size_bytes),
                ])

    def write_detail(self, findings: List[Finding], path: Path) -> None:
        with path.open("w", newline="", encoding="utf-8", errors=REPORT_ERRORS) as f:
            writer = csv.writer(f)
            writer.writerow(DETAIL_HEADER)
            for finding in findings:
                writer.writerow(finding.as_row())


def read_summary(path: Path) -> List[Dict[str, str]]:
    with path.open("r", newline="", encoding="utf-8", errors=REPORT_ERRORS) as f:
        return list(csv.DictReader(f))


def read_detail(path: Path) -> List[Finding]:
    with path.open("r", newline="", encoding="utf-8", errors=REPORT_ERRORS) as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header != DETAIL_HEADER:
            raise ValueError(f"unexpected detail header in {path}: {header}")
        return [Finding(file_id, scanner_name, payload) for file_id, scanner_name, payload in reader]
