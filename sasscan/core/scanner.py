from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Iterable, List, Optional

from tqdm import tqdm

from ..scanners.base import Scanner
from .config import DEFAULT_LOGGER_NAME, SLOW_SCAN_THRESHOLD_SECONDS, ScanConfig
from .errors import ScanError
from .loader import build_scanners, select_scanners
from .models import FileRecord, Finding, ScanContext, ScanResult
from .traversal import iter_file_records

STDERR_HANDLER_NAME = "sasscan-stderr"


def configure_logging(verbose: bool = False, logger_name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Return the ``sasscan`` logger, attaching a stderr handler on first use.

    Per-file scan problems (unreadable or undecodable files, slow files) are
    reported through this logger while the CSV reports carry the findings.
    WARNING shows skipped scanners only; ``verbose`` adds discovery and
    per-run INFO messages.
    """

    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    if any(h.get_name() == STDERR_HANDLER_NAME for h in logger.handlers):
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s"))
    handler.set_name(STDERR_HANDLER_NAME)
    logger.addHandler(handler)
    return logger


def error_payload(exc: ScanError) -> str:
    return f"ERROR({exc.KIND}): {exc.message}"


class ScanRunner:
    """Apply an ordered list of scanners to one file."""

    def __init__(
        self,
        *,
        config: Optional[ScanConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config or ScanConfig()
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.errors = 0

    def run(self, record: FileRecord, scanners: Iterable[Scanner]) -> List[Finding]:
        context = ScanContext(
            record,
            detect_encoding=self.config.detect_encoding,
            max_bytes=self.config.max_bytes,
        )
        findings: List[Finding] = []
        for scanner in scanners:
            name = scanner.describe()
            try:
                payloads = scanner.scan(context)
            except ScanError as exc:
                exc.scanner = name
                self.errors += 1
                self.logger.warning("Skipping %s for %s: %s", name, record.path, exc.message)
                payloads = [error_payload(exc)]
            findings.extend(Finding(record.id, name, p) for p in payloads)
        return findings


class DirectoryScanner:
    def __init__(
        self,
        root: Path,
        scanners: Optional[List[Scanner]] = None,
        *,
        selector: str = "all",
        known_names: Optional[List[str]] = None,
        config: Optional[ScanConfig] = None,
        logger: Optional[logging.Logger] = None,
        progress_desc: str = "Scanning files",
    ) -> None:
        self.root = root
        self.config = config or ScanConfig()
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        if self.config.verbose:
            self.logger.setLevel(logging.INFO)
        # The selector is checked here so a typo fails before any file is read.
        if scanners is not None:
            scanners = select_scanners(scanners, selector)
            self.selected = [s.describe() for s in scanners]
        else:
            self.selected = [s.describe() for s in select_scanners(build_scanners(), selector)]
        self.scanners = scanners
        self.known_names = known_names
        self.progress_desc = progress_desc
        self.runner = ScanRunner(config=self.config, logger=base_logger)
        self._slow_log_threshold = SLOW_SCAN_THRESHOLD_SECONDS

    def _resolve_scanners(self, records: List[FileRecord]) -> List[Scanner]:
        if self.scanners is not None:
            return list(self.scanners)
        names = self.known_names if self.known_names is not None else [r.name for r in records]
        return [s for s in build_scanners(names) if s.describe() in self.selected]

    def scan(self) -> ScanResult:
        start_time = time.perf_counter()
        result = ScanResult()
        self.runner.errors = 0
        result.records = list(iter_file_records(self.root))
        scanners = self._resolve_scanners(result.records)

        self.logger.info(
            "Discovered %d file(s) to scan with %d scanner(s)", len(result.records), len(scanners)
        )

        progress_bar = None
        if self.config.show_progress and result.records:
            progress_bar = tqdm(total=len(result.records), desc=self.progress_desc, unit="file")
        try:
            for record in result.records:
                if progress_bar is not None:
                    progress_bar.set_postfix_str(self._format_label(record), refresh=False)
                file_start = time.perf_counter()
                result.findings.extend(self.runner.run(record, scanners))
                self._maybe_log_slow_file(record, time.perf_counter() - file_start)
                if progress_bar is not None:
                    progress_bar.update(1)
        finally:
            if progress_bar is not None:
                progress_bar.close()

        result.stats.files = len(result.records)
        result.stats.findings = len(result.findings)
        result.stats.errors = self.runner.errors
        result.stats.elapsed = time.perf_counter() - start_time
        return result

    def _format_label(self, record: FileRecord) -> str:
        try:
            label = str(record.path.relative_to(self.root))
        except ValueError:
            label = str(record.path)
        if len(label) > 60:
            label = f"...{label[-57:]}"
        return label

    def _maybe_log_slow_file(self, record: FileRecord, duration: float) -> None:
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        if duration < self._slow_log_threshold:
            return
        self.logger.debug(
            "Slow scan for %s took %.2fs (size=%s bytes)",
            record.path,
            duration,
            f"{record.size_bytes:,}",
        )
