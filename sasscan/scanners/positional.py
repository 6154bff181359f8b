from __future__ import annotations

from typing import Iterable, List, Optional

from ..core.errors import compile_pattern
from .base import LineScanner, format_position

WHITESPACE_RE = compile_pattern(r"\s+")


class LibnameFinder(LineScanner):
    NAME = "get_libname"
    PREFIX = "LIBNAME"

    def match_line(self, line_number: int, line: str) -> Optional[str]:
        if line.upper().startswith(self.PREFIX):
            return format_position(line_number, line)
        return None


class PasswordFinder(LineScanner):
    """Flag literal ``password=`` assignments.

    Lines are compared with all whitespace removed and uppercased, and that
    normalised text is what gets reported. Macro-variable references such as
    ``password=&password.`` are placeholders, not credentials.
    """

    NAME = "get_password"
    MARKER = "PASSWORD="
    PLACEHOLDER = "&PASSWORD"

    def match_line(self, line_number: int, line: str) -> Optional[str]:
        normalised = WHITESPACE_RE.sub("", line.upper())
        if self.MARKER in normalised and self.PLACEHOLDER not in normalised:
            return format_position(line_number, normalised)
        return None


class DateFinder(LineScanner):
    NAME = "find_date"
    REGEXES = [
        compile_pattern(r"\b\d{4}-\d{2}-\d{2}\b"),  # ISO date, e.g. 2023-06-30
    ]


class FileNameReferenceFinder(LineScanner):
    """Report lines that mention any known file name.

    At most one finding per line: the first matching name ends the search.
    """

    NAME = "find_file_name"

    def __init__(self, known_names: Iterable[str] = ()) -> None:
        # Order preserved, duplicates and empty names dropped.
        self.known_names: List[str] = list(dict.fromkeys(n for n in known_names if n))

    def match_line(self, line_number: int, line: str) -> Optional[str]:
        for name in self.known_names:
            if name in line:
                return format_position(line_number, line)
        return None
