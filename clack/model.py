"""Text buffer and cursor engine for the typewriter."""

from enum import Enum
from typing import NamedTuple, Optional

from .config import TypewriterConfig
from .document import Document, LINE_TERMINATOR


class CursorPosition(NamedTuple):
    """Logical cursor coordinates, unpackable as ``(col, row)``."""
    column: int = 0
    row: int = 0


class InsertResult(Enum):
    """Outcome of typing a character."""
    INSERTED = "inserted"
    MARGIN_WARNING = "margin_warning"  # Inserted, and the line just reached the bell column
    MARGIN_BLOCKED = "margin_blocked"  # Rejected, the line is already at the bell column


class TextModel:
    """Document plus a single cursor, with all logical coordinate math.

    The cursor is an absolute character offset; rows and columns are derived
    from it through the document's line index.
    """
    document: Document
    cursor_idx: int
    config: TypewriterConfig

    def __init__(self, config: Optional[TypewriterConfig] = None, text: str = ""):
        self.config = config or TypewriterConfig()
        self.document = Document(text)
        self.cursor_idx = 0
        self.has_unsaved_changes = False
        # Highest page the cursor has reached, drives the paper feed effect
        self.last_page_number = 1
        # Bumped on every content mutation; cached counts are keyed on it
        self.revision = 0
        self._counts_revision: Optional[int] = None
        self._word_count = 0
        self._char_count = 0

    @classmethod
    def from_text(cls, text: str, config: Optional[TypewriterConfig] = None) -> "TextModel":
        """Create a model for freshly loaded content, cursor at the start."""
        return cls(config, text=text)

    @property
    def text(self) -> str:
        return str(self.document)

    def _mark_modified(self):
        self.revision += 1
        self.has_unsaved_changes = True

    # --- Mutation ---

    def insert_char(self, char: str) -> InsertResult:
        """Type one character at the cursor, honouring the margin stop."""
        _col, row = self.get_cursor_position()
        bell_column = self.config.bell_column
        if self.document.line_len(row) >= bell_column:
            return InsertResult.MARGIN_BLOCKED

        self.document.insert_char(self.cursor_idx, char)
        self.cursor_idx += 1
        self._mark_modified()

        if self.document.line_len(row) == bell_column:
            return InsertResult.MARGIN_WARNING
        return InsertResult.INSERTED

    def delete_char(self) -> bool:
        """Delete the character before the cursor (backspace)."""
        if self.cursor_idx == 0:
            return False
        self.document.remove(self.cursor_idx - 1, self.cursor_idx)
        self.cursor_idx -= 1
        self._mark_modified()
        return True

    def delete_char_forward(self) -> bool:
        """Delete the character under the cursor; the cursor stays put."""
        if self.cursor_idx >= len(self.document):
            return False
        self.document.remove(self.cursor_idx, self.cursor_idx + 1)
        self._mark_modified()
        return True

    def enter_key(self):
        """Start a new line. Never subject to the margin stop."""
        self.document.insert_char(self.cursor_idx, LINE_TERMINATOR)
        self.cursor_idx += 1
        self._mark_modified()

    # --- Queries ---

    def get_cursor_position(self) -> CursorPosition:
        row = self.document.char_to_line(self.cursor_idx)
        col = self.cursor_idx - self.document.line_to_char(row)
        return CursorPosition(col, row)

    def _refresh_counts(self):
        if self._counts_revision == self.revision:
            return
        text = str(self.document)
        self._char_count = len(text)
        # Maximal runs of non-whitespace, line boundaries included
        self._word_count = len(text.split())
        self._counts_revision = self.revision

    def get_char_count(self) -> int:
        self._refresh_counts()
        return self._char_count

    def get_word_count(self) -> int:
        self._refresh_counts()
        return self._word_count

    def page_of_row(self, row: int) -> int:
        return row // self.config.lines_per_page + 1

    def get_current_page(self) -> int:
        """1-based page number of the cursor's logical row."""
        _col, row = self.get_cursor_position()
        return self.page_of_row(row)

    def check_page_feed(self) -> bool:
        """Return True once each time the cursor reaches a new highest page."""
        current_page = self.get_current_page()
        if current_page > self.last_page_number:
            self.last_page_number = current_page
            return True
        return False

    def _line_end_column(self, row: int) -> int:
        # Content length, so the cursor lands before a trailing terminator
        return self.document.line_content_len(row)

    # --- Navigation ---

    def set_cursor(self, idx: int):
        """Relocate the cursor programmatically, clamped to the document."""
        self.cursor_idx = max(0, min(idx, len(self.document)))

    def move_left(self):
        if self.cursor_idx > 0:
            self.cursor_idx -= 1

    def move_right(self):
        if self.cursor_idx < len(self.document):
            self.cursor_idx += 1

    def move_cursor_up(self):
        col, row = self.get_cursor_position()
        if row == 0:
            return
        new_row = row - 1
        new_col = min(col, self._line_end_column(new_row))
        self.cursor_idx = self.document.line_to_char(new_row) + new_col

    def move_cursor_down(self) -> bool:
        """Move down one row; return True if that crossed into a later page."""
        col, row = self.get_cursor_position()
        if row >= self.document.len_lines() - 1:
            return False
        new_row = row + 1
        new_col = min(col, self._line_end_column(new_row))
        self.cursor_idx = self.document.line_to_char(new_row) + new_col

        old_page = self.page_of_row(row)
        new_page = self.page_of_row(new_row)
        if new_page > old_page:
            if new_page > self.last_page_number:
                self.last_page_number = new_page
            return True
        return False

    def move_to_line_start(self):
        _col, row = self.get_cursor_position()
        self.cursor_idx = self.document.line_to_char(row)

    def move_to_line_end(self):
        _col, row = self.get_cursor_position()
        self.cursor_idx = self.document.line_to_char(row) + self._line_end_column(row)

    def move_word_left(self):
        """Skip whitespace left of the cursor, then back to the start of the word."""
        if self.cursor_idx == 0:
            return
        doc = self.document
        idx = self.cursor_idx - 1

        while idx > 0 and doc.char(idx).isspace():
            idx -= 1

        while idx > 0 and not doc.char(idx - 1).isspace():
            idx -= 1

        self.cursor_idx = idx

    def move_word_right(self):
        """Skip the rest of the current word, then the whitespace after it."""
        doc = self.document
        max_idx = len(doc)
        if self.cursor_idx >= max_idx:
            return
        idx = self.cursor_idx

        while idx < max_idx and not doc.char(idx).isspace():
            idx += 1

        while idx < max_idx and doc.char(idx).isspace():
            idx += 1

        self.cursor_idx = idx
