from dataclasses import dataclass, field
from typing import Optional

from .config import Config
from .constants import EditorConstants
from .markup import StyleFlags, flatten_runs, parse_line
from .model import TextModel


@dataclass
class VisualLine:
    """One physically wrapped screen row of ``(char, style)`` cells."""
    cells: list[tuple[str, StyleFlags]] = field(default_factory=list)
    page_break: bool = False

    @property
    def text(self) -> str:
        return "".join(ch for ch, _ in self.cells)

    @property
    def styles(self) -> list[StyleFlags]:
        return [style for _, style in self.cells]

    def __len__(self) -> int:
        return len(self.cells)


def wrap_runs(cells: list[tuple[str, StyleFlags]], width: int) -> list[VisualLine]:
    """Greedily pack characters into rows of at most ``width`` cells.

    An empty line still occupies one (empty) row.
    """
    width = max(1, width)
    if not cells:
        return [VisualLine()]
    return [VisualLine(cells[start:start + width]) for start in range(0, len(cells), width)]


def create_page_break_line(page_num: int, width: int) -> VisualLine:
    """Create a centered page separator reading ``Page <n>``."""
    page_text = f" Page {page_num} "[:width]
    padding = (width - len(page_text)) // 2
    rule = EditorConstants.PAGE_BREAK_CHAR
    text = rule * padding + page_text + rule * (width - padding - len(page_text))
    return VisualLine([(ch, StyleFlags.MARKER) for ch in text], page_break=True)


class TerminalTextView:
    """Visual layout and pagination of a ``TextModel``.

    Nothing is kept between passes: ``render`` rebuilds the visual lines,
    the visual cursor and the scroll offset from the model every time.
    """
    num_rows: int  # Rows available to the paper, padding included
    num_columns: int  # Screen width
    lines: list[VisualLine]
    visual_cursor_y: int = 0
    visual_cursor_x: int = 0
    scroll_offset: int = 0

    def __init__(self, model: TextModel, config: Optional[Config] = None):
        self.model = model
        self.config = config or Config()
        self.num_rows = 24
        self.num_columns = 80
        self.typewriter_mode = True
        self.focus_mode = False
        self.double_spacing = False
        self.lines = []

    @property
    def effective_width(self) -> int:
        layout = self.config.layout
        paper_width = min(layout.paper_width, self.num_columns)
        return max(1, paper_width - 2 - layout.pad_left - layout.pad_right)

    @property
    def inner_height(self) -> int:
        layout = self.config.layout
        return max(1, self.num_rows - layout.pad_top - layout.pad_bottom)

    @property
    def cursor_screen_row(self) -> int:
        """Cursor row relative to the first visible row."""
        return self.visual_cursor_y - self.scroll_offset

    def render(self):
        width = self.effective_width
        lines_per_page = self.model.config.lines_per_page
        cursor_col, cursor_row = self.model.get_cursor_position()

        lines: list[VisualLine] = []
        visual_cursor_y = 0
        visual_cursor_x = 0

        for i, line in enumerate(self.model.document.lines()):
            runs = parse_line(line)
            cells = flatten_runs(runs)
            if self.focus_mode and i != cursor_row:
                cells = [(ch, style | StyleFlags.FADED) for ch, style in cells]

            start_index = len(lines)
            lines.extend(wrap_runs(cells, width))

            if i == cursor_row:
                visual_cursor_y = start_index + cursor_col // width
                visual_cursor_x = cursor_col % width
                # Cursor exactly at a wrap boundary addresses a row not yet built
                while visual_cursor_y >= len(lines):
                    lines.append(VisualLine())

            if self.double_spacing:
                lines.append(VisualLine())

            if (i + 1) % lines_per_page == 0:
                lines.append(VisualLine())
                lines.append(create_page_break_line((i + 1) // lines_per_page + 1, width))
                lines.append(VisualLine())

        self.lines = lines
        self.visual_cursor_y = visual_cursor_y
        self.visual_cursor_x = visual_cursor_x
        self.scroll_offset = self._compute_scroll_offset()

    def _compute_scroll_offset(self) -> int:
        inner_height = self.inner_height
        if self.typewriter_mode:
            # Carriage style: the cursor row stays pinned at the centre
            center_line = inner_height // 2
            if self.visual_cursor_y > center_line:
                return self.visual_cursor_y - center_line
            return 0
        # Follow scroll: just enough to keep the cursor on the last visible row
        if self.visual_cursor_y >= inner_height:
            return self.visual_cursor_y - inner_height + 1
        return 0

    def visible_lines(self) -> list[VisualLine]:
        return self.lines[self.scroll_offset:self.scroll_offset + self.inner_height]
