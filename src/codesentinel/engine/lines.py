from __future__ import annotations

from bisect import bisect_right


class LineIndex:
    """
    Offset to line lookups for one buffer.

    Line numbers agree with "newlines before the offset, plus one", and lines
    are the pieces of `text.split("\\n")`, but each lookup is a binary search
    instead of a rescan of the prefix.
    """

    __slots__ = ("_lines", "_starts")

    def __init__(self, text: str) -> None:
        self._lines = text.split("\n")
        starts = [0]
        for line in self._lines[:-1]:
            starts.append(starts[-1] + len(line) + 1)
        self._starts = starts

    def __len__(self) -> int:
        return len(self._lines)

    def line_of(self, offset: int) -> int:
        """1-based line containing `offset`."""
        return bisect_right(self._starts, offset)

    def line_text(self, line: int) -> str:
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1]
        return ""

    def snippet_at(self, offset: int) -> tuple[int, str]:
        line = self.line_of(offset)
        return line, self.line_text(line).strip()
