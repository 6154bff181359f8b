"""Run configuration and report layout constants."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_LOGGER_NAME = "sasscan"
SLOW_SCAN_THRESHOLD_SECONDS = 2.0
DEFAULT_MAX_BYTES = 50_000_000

SUMMARY_STEM = "summary"
DETAIL_STEM = "detail"
INDEX_FILE = "index.json"
REPORT_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
RECORD_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SUMMARY_HEADER = ["uuid", "file_nm", "file_dir", "create_dt", "modify_dt", "size_bytes"]
DETAIL_HEADER = ["uuid", "func_nm", "result"]


@dataclass(frozen=True)
class ScanConfig:
    detect_encoding: bool = False
    show_progress: bool = True
    verbose: bool = False
    max_bytes: int = DEFAULT_MAX_BYTES
