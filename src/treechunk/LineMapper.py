import bisect
from typing import List, Optional


class LineMapper:
    """
    Maps byte offsets to (row, col) tuples and line numbers to byte offsets
    using precomputed newline positions.
    O(N) initialization, O(log N) lookups.
    """
    def __init__(self, contents: bytes):
        self.contents_len = len(contents)
        self.newlines: List[int] = []
        pos = contents.find(b"\n")
        while pos != -1:
            self.newlines.append(pos)
            pos = contents.find(b"\n", pos + 1)

    @property
    def line_count(self) -> int:
        """Number of lines; a trailing newline does not open an extra line."""
        if self.contents_len == 0:
            return 0
        count = len(self.newlines)
        if not self.newlines or self.newlines[-1] != self.contents_len - 1:
            count += 1
        return count

    def line_start(self, line: int) -> int:
        """Byte offset where 0-based `line` begins; `line_count` maps to the end of contents."""
        if line <= 0:
            return 0
        if line >= self.line_count:
            return self.contents_len
        return self.newlines[line - 1] + 1

    def find_nearest_newline(self, target: int, lo: int, hi: int) -> Optional[int]:
        """
        Return the byte index AFTER the newline closest to target in [lo, hi],
        or None if no newline.
        """
        if not self.newlines:
            return None

        # Candidate newlines satisfy lo <= i <= hi - 1; ties prefer the smaller index.
        start_idx = bisect.bisect_left(self.newlines, lo)
        end_idx = bisect.bisect_right(self.newlines, hi - 1)

        if start_idx >= end_idx:
            return None

        mid_idx = bisect.bisect_left(self.newlines, target, start_idx, end_idx)

        candidates = []
        if mid_idx > start_idx:
            candidates.append(self.newlines[mid_idx - 1])
        if mid_idx < end_idx:
            candidates.append(self.newlines[mid_idx])

        if len(candidates) == 1:
            return candidates[0] + 1

        c1, c2 = candidates
        if target - c1 <= c2 - target:
            return c1 + 1
        return c2 + 1

    def byte_to_point(self, offset: int) -> tuple[int, int]:
        """
        Convert a byte offset to a (row, column) tuple.
        Rows and Columns are 0-indexed.
        """
        if offset < 0 or offset > self.contents_len:
            raise ValueError(f"Offset {offset} out of bounds (0-{self.contents_len})")

        if offset == 0:
            return (0, 0)

        # Index of the first newline at or after offset == number of newlines before it.
        idx = bisect.bisect_left(self.newlines, offset)

        if idx == 0:
            return (0, offset)

        # The newline byte itself belongs to the previous row.
        col = offset - self.newlines[idx - 1] - 1
        return (idx, col)
