from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple, Union

from ..core.models import ScanContext
from .base import Scanner, format_position


@dataclass(frozen=True)
class Outside:
    pass


@dataclass
class InsideBlock:
    start: int
    buffer: List[str] = field(default_factory=list)


SqlState = Union[Outside, InsideBlock]


class SqlBlockExtract(Scanner):
    """Extract each ``PROC SQL`` ... ``QUIT;`` block with its starting line.

    Blocks are flat: a ``PROC SQL`` met inside a block is an ordinary line of
    that block. A block still open at end of file is dropped and shows up as
    an ``InsideBlock`` final state from :meth:`extract`.
    """

    NAME = "get_sql"
    OPEN_MARKER = "PROC SQL"
    CLOSE_MARKER = "QUIT;"

    def scan(self, context: ScanContext) -> List[str]:
        payloads, _ = self.extract(context.lines())
        return payloads

    def extract(self, lines: Iterable[Tuple[int, str]]) -> Tuple[List[str], SqlState]:
        payloads: List[str] = []
        state: SqlState = Outside()
        for line_number, line in lines:
            upper = line.upper()
            if isinstance(state, Outside):
                if self.OPEN_MARKER not in upper:
                    continue
                state = InsideBlock(start=line_number)
            state.buffer.append(line)
            if self.CLOSE_MARKER in upper:
                payloads.append(format_position(state.start, "\n".join(state.buffer)))
                state = Outside()
        return payloads, state
