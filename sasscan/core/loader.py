from __future__ import annotations

from typing import Iterable, List

from ..scanners.aggregate import ExportCount, LineCount, NullCount, SqlBlockCount
from ..scanners.base import Scanner
from ..scanners.positional import DateFinder, FileNameReferenceFinder, LibnameFinder, PasswordFinder
from ..scanners.sql import SqlBlockExtract


def build_scanners(known_names: Iterable[str] = ()) -> List[Scanner]:
    """Return the scanner set in registration order.

    Findings for a file are reported in this order, so changing it changes
    the detail report.
    """
    return [
        LineCount(),
        SqlBlockCount(),
        SqlBlockExtract(),
        LibnameFinder(),
        PasswordFinder(),
        ExportCount(),
        NullCount(),
        DateFinder(),
        FileNameReferenceFinder(known_names),
    ]


def scanner_names() -> List[str]:
    return [s.describe() for s in build_scanners()]


def select_scanners(all_scanners: List[Scanner], selector: str) -> List[Scanner]:
    selector = (selector or "").strip().lower()
    if selector == "all" or selector == "*":
        return list(all_scanners)
    wanted = {t.strip() for t in selector.split(",") if t.strip()}
    available = [s.describe() for s in all_scanners]
    unknown = sorted(wanted - set(available))
    if unknown:
        raise ValueError(
            f"unknown scanner(s): {', '.join(unknown)}; available: {', '.join(available)}"
        )
    return [s for s in all_scanners if s.describe() in wanted]
