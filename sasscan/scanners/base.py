from __future__ import annotations

import re
from typing import List, Optional

from ..core.models import ScanContext


def format_position(line_number: int, text: str) -> str:
    return f"({line_number}, {text})"


class Scanner:
    """
    Base class for content scanners. Subclasses set NAME, the label written to
    the detail report, and implement ``scan``. Scanners only read the context
    they are given and return their payloads in emission order.
    """
    NAME: str = "base"

    def describe(self) -> str:
        return self.NAME

    def scan(self, context: ScanContext) -> List[str]:
        raise NotImplementedError("scan must be implemented in subclasses")


class ContentScanner(Scanner):
    """Scanner over the whole decoded file as one string."""

    def scan(self, context: ScanContext) -> List[str]:
        return self.scan_text(context.text)

    def scan_text(self, text: str) -> List[str]:
        raise NotImplementedError("scan_text must be implemented in subclasses")


class LineScanner(Scanner):
    """
    Scanner over numbered lines. The default ``match_line`` reports a line
    when any of REGEXES matches it; subclasses with other rules override it.
    """
    REGEXES: List["re.Pattern[str]"] = []

    def scan(self, context: ScanContext) -> List[str]:
        return self.scan_lines(context.lines())

    def scan_lines(self, lines) -> List[str]:
        payloads: List[str] = []
        for line_number, line in lines:
            payload = self.match_line(line_number, line)
            if payload is not None:
                payloads.append(payload)
        return payloads

    def match_line(self, line_number: int, line: str) -> Optional[str]:
        for rx in self.REGEXES:
            if rx.search(line):
                return format_position(line_number, line)
        return None
