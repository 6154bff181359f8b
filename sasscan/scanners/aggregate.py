from __future__ import annotations

import re
from typing import List

from ..core.errors import compile_pattern
from ..core.utils import count_lines
from .base import ContentScanner


class LineCount(ContentScanner):
    NAME = "line_count"

    def scan_text(self, text: str) -> List[str]:
        return [str(count_lines(text))]


class SqlBlockCount(ContentScanner):
    """Count ``PROC SQL ... QUIT;`` spans with one lazy full-text match.

    This can disagree with ``get_sql`` on unterminated or nested blocks; the
    two use different rules on purpose.
    """

    NAME = "sql_count"
    PATTERN = compile_pattern(r"PROC\s+SQL.*?QUIT;", re.IGNORECASE | re.DOTALL)

    def scan_text(self, text: str) -> List[str]:
        return [str(sum(1 for _ in self.PATTERN.finditer(text)))]


class TokenCount(ContentScanner):
    """Count non-overlapping occurrences of TOKEN in the uppercased content."""

    TOKEN = ""

    def scan_text(self, text: str) -> List[str]:
        return [str(text.upper().count(self.TOKEN))]


class ExportCount(TokenCount):
    NAME = "export_count"
    TOKEN = "EXPORT"


class NullCount(TokenCount):
    NAME = "null_count"
    TOKEN = "_NULL_"
