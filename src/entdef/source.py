# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Character cursor shared by the definition scanner and the expression scanner.

Both scanners read the same source text; a :class:`Snapshot` taken from one
can be restored into the other, which is how a nested expression parse hands
its end position back to the definition scanner.
"""

from dataclasses import dataclass

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Snapshot:
    """An opaque capture of a cursor position.

    Attributes:
        position: 0-based character offset into the source.
        line: 1-based line number at that offset.
        column: 1-based column number at that offset.
    """

    position: int
    line: int
    column: int


class SourceCursor:
    """Position-tracking reader over a materialized source string."""

    def __init__(self, source: str, start: Snapshot | None = None) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._column = 1
        if start is not None:
            self.restore(start)

    @property
    def source(self) -> str:
        return self._source

    @property
    def line(self) -> int:
        return self._line

    @property
    def column(self) -> int:
        return self._column

    @property
    def position(self) -> int:
        return self._pos

    def snapshot(self) -> Snapshot:
        """Capture the current position so it can be restored later."""
        return Snapshot(self._pos, self._line, self._column)

    def restore(self, snapshot: Snapshot) -> None:
        """Rewind (or fast-forward) to a previously captured position."""
        self._pos = snapshot.position
        self._line = snapshot.line
        self._column = snapshot.column

    def progress(self) -> float:
        """Return the fraction of the source consumed so far, in [0, 1]."""
        if not self._source:
            return 1.0
        return min(self._pos / len(self._source), 1.0)

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _eof(self) -> bool:
        return self._pos >= len(self._source)

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self) -> str:
        """Return the character one position ahead, or '' at end of input."""
        if self._pos + 1 < len(self._source):
            return self._source[self._pos + 1]
        return ""

    def _advance(self) -> str:
        """Consume the current character, update position tracking, and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        # A "\r" ends a line unless it starts a "\r\n" pair.
        if ch == "\n" or ch == "\r" and self._current() != "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _advance_to(self, position: int) -> None:
        """Consume characters up to (not including) the given offset."""
        while self._pos < position:
            self._advance()
