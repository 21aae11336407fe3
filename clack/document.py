"""Line-structured text storage for the editing core.

The document is kept as a list of lines (without their terminators) plus a
Fenwick tree over the line lengths, so converting between character offsets
and line numbers costs O(log n). Edits confined to one line update the tree
in place; edits that add or remove a line terminator rebuild it.
"""

from typing import Iterator

LINE_TERMINATOR = "\n"


class _LineIndex:
    """Fenwick tree of per-line character counts (terminators included)."""

    def __init__(self, lengths: list[int]):
        self._size = len(lengths)
        tree = [0] + list(lengths)
        for i in range(1, self._size + 1):
            parent = i + (i & -i)
            if parent <= self._size:
                tree[parent] += tree[i]
        self._tree = tree
        step = 1
        while step * 2 <= self._size:
            step *= 2
        self._top_step = step

    def add(self, row: int, delta: int) -> None:
        i = row + 1
        while i <= self._size:
            self._tree[i] += delta
            i += i & -i

    def prefix(self, count: int) -> int:
        """Total length of the first ``count`` lines."""
        total = 0
        i = count
        while i > 0:
            total += self._tree[i]
            i -= i & -i
        return total

    def lines_ending_at_or_before(self, offset: int) -> int:
        """Largest k such that the first k lines end at or before ``offset``."""
        pos = 0
        remaining = offset
        step = self._top_step
        while step:
            nxt = pos + step
            if nxt <= self._size and self._tree[nxt] <= remaining:
                pos = nxt
                remaining -= self._tree[nxt]
            step >>= 1
        return pos


class Document:
    """Mutable text addressed by absolute character offset or line number.

    There is always at least one line. Every line except the last ends with
    a terminator; the last line never does.
    """

    def __init__(self, text: str = ""):
        self._lines = text.split(LINE_TERMINATOR)
        self._length = len(text)
        self._rebuild_index()

    def _rebuild_index(self) -> None:
        lengths = [len(line) + 1 for line in self._lines]
        lengths[-1] -= 1
        self._index = _LineIndex(lengths)

    def _check_offset(self, idx: int) -> None:
        if not 0 <= idx <= self._length:
            raise IndexError(f"char index {idx} out of range 0..{self._length}")

    def __len__(self) -> int:
        return self._length

    def __str__(self) -> str:
        return LINE_TERMINATOR.join(self._lines)

    def __repr__(self) -> str:
        return f"Document({str(self)!r})"

    def len_chars(self) -> int:
        return self._length

    def len_lines(self) -> int:
        return len(self._lines)

    def char_to_line(self, idx: int) -> int:
        """Return the line containing ``idx``.

        An offset sitting on a terminator belongs to the line it ends; the
        offset one past the end of the document belongs to the last line.
        """
        self._check_offset(idx)
        row = self._index.lines_ending_at_or_before(idx)
        return min(row, len(self._lines) - 1)

    def line_to_char(self, row: int) -> int:
        """Return the offset of the first character of ``row``."""
        if not 0 <= row <= len(self._lines):
            raise IndexError(f"line {row} out of range 0..{len(self._lines)}")
        return self._index.prefix(row)

    def line(self, row: int) -> str:
        """Return line ``row`` including its terminator, if it has one."""
        text = self._lines[row]
        if row < len(self._lines) - 1:
            return text + LINE_TERMINATOR
        return text

    def line_len(self, row: int) -> int:
        """Character count of ``row`` including its terminator."""
        extra = 1 if row < len(self._lines) - 1 else 0
        return len(self._lines[row]) + extra

    def line_content_len(self, row: int) -> int:
        """Character count of ``row`` excluding its terminator."""
        return len(self._lines[row])

    def char(self, idx: int) -> str:
        if not 0 <= idx < self._length:
            raise IndexError(f"char index {idx} out of range 0..{self._length - 1}")
        row = self.char_to_line(idx)
        col = idx - self.line_to_char(row)
        text = self._lines[row]
        return text[col] if col < len(text) else LINE_TERMINATOR

    def chunks(self) -> Iterator[str]:
        """Yield the document's lines in order, terminators included."""
        last = len(self._lines) - 1
        for row, text in enumerate(self._lines):
            yield text + LINE_TERMINATOR if row < last else text

    def lines(self) -> Iterator[str]:
        return self.chunks()

    def insert(self, idx: int, text: str) -> None:
        """Insert ``text`` so that its first character lands at ``idx``."""
        self._check_offset(idx)
        if not text:
            return
        row = self.char_to_line(idx)
        col = idx - self.line_to_char(row)
        current = self._lines[row]
        merged = current[:col] + text + current[col:]
        self._length += len(text)
        if LINE_TERMINATOR in text:
            self._lines[row:row + 1] = merged.split(LINE_TERMINATOR)
            self._rebuild_index()
        else:
            self._lines[row] = merged
            self._index.add(row, len(text))

    def insert_char(self, idx: int, char: str) -> None:
        self.insert(idx, char)

    def remove(self, start: int, end: int) -> None:
        """Remove the characters in ``[start, end)``."""
        self._check_offset(start)
        self._check_offset(end)
        if start >= end:
            return
        first_row = self.char_to_line(start)
        last_row = self.char_to_line(end)
        first_col = start - self.line_to_char(first_row)
        last_col = end - self.line_to_char(last_row)
        self._length -= end - start
        if first_row == last_row:
            text = self._lines[first_row]
            self._lines[first_row] = text[:first_col] + text[last_col:]
            self._index.add(first_row, -(end - start))
        else:
            merged = self._lines[first_row][:first_col] + self._lines[last_row][last_col:]
            self._lines[first_row:last_row + 1] = [merged]
            self._rebuild_index()
