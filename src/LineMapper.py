from typing import Optional


class LineMapper:
    """
    Maps 0-based rows to byte spans using precomputed newline positions.
    O(N) initialization, O(1) lookups afterwards.
    """
    def __init__(self, contents: bytes):
        self.contents_len = len(contents)
        self.newlines = []
        pos = contents.find(b"\n")
        while pos != -1:
            self.newlines.append(pos)
            pos = contents.find(b"\n", pos + 1)

    @property
    def line_count(self) -> int:
        # A trailing newline does not open another line.
        if self.newlines and self.newlines[-1] == self.contents_len - 1:
            return len(self.newlines)
        return len(self.newlines) + 1

    def line_span(self, row: int) -> Optional[tuple[int, int]]:
        """
        Return the [start, end) byte span of `row` without its newline,
        or None if the row does not exist.
        """
        if row < 0 or row >= self.line_count:
            return None
        start = 0 if row == 0 else self.newlines[row - 1] + 1
        end = self.newlines[row] if row < len(self.newlines) else self.contents_len
        return (start, end)

    def rows_span(self, first_row: int, last_row: int) -> Optional[tuple[int, int]]:
        """[start, end) byte span covering rows first_row..last_row inclusive."""
        first = self.line_span(first_row)
        last = self.line_span(min(last_row, self.line_count - 1))
        if first is None or last is None:
            return None
        return (first[0], last[1])
