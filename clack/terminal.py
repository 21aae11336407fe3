"""Terminal interface using Blessed for display and Curtsies for input."""

import blessed
from typing import Optional, Sequence
import sys
import select

from .config import LayoutConfig
from .constants import EditorConstants
from .markup import StyleFlags
from .theme import RGB, Theme
from .view import VisualLine

# (fg, bg, bold, italic, dim)
CellAttrs = tuple[RGB, RGB, bool, bool, bool]


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._curtsies_active: bool = False
        # Virtual screen state for minimal updates
        self._last_lines: list[str] | None = None
        self._last_width: int | None = None

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        print(self.term.enter_fullscreen)
        print(self.term.hide_cursor)
        print(self.term.clear)
        self.is_fullscreen = True
        # Initialize curtsies input
        if self._curtsies_input is None:
            try:
                from curtsies import Input  # type: ignore
                # Enter raw mode immediately so reads work
                self._curtsies_input = Input(keynames='curtsies')  # type: ignore
                self._curtsies_input.__enter__()
                self._curtsies_active = True
            except Exception:
                # Justification: curtsies may fail to initialize without a
                # real tty (CI, pipes). Fall back to a no-input mode rather
                # than crashing.
                self._curtsies_input = None
                self._curtsies_active = False

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.normal + self.term.exit_fullscreen)
            print(self.term.normal_cursor)
            self.is_fullscreen = False
        # Close curtsies input if in use
        if self._curtsies_input is not None:
            try:
                if self._curtsies_active:
                    # Exit raw mode context
                    self._curtsies_input.__exit__(None, None, None)  # type: ignore
            except Exception:
                # Justification: teardown should never crash the app. Any
                # failure to exit raw mode is non-fatal at this point.
                pass
            finally:
                self._curtsies_input = None
                self._curtsies_active = False

    def invalidate_frame(self) -> None:
        """Invalidate cached frame so next update does a full clear.

        Use this after something other than ``update_frame`` has drawn to
        the screen, e.g. the help overlay.
        """
        self._last_lines = None
        self._last_width = None

    # --- Composition ---

    def sgr(self, attrs: CellAttrs) -> str:
        """Escape sequence selecting the given colours and attributes."""
        fg, bg, bold, italic, dim = attrs
        out = [self.term.normal]
        if bg is not None:
            out.append(self.term.on_color_rgb(*bg))
        if fg is not None:
            out.append(self.term.color_rgb(*fg))
        if bold:
            out.append(self.term.bold)
        if italic:
            out.append(self.term.italic)
        if dim:
            out.append(self.term.dim)
        return ''.join(out)

    def compose_segments(self, segments: Sequence[tuple[str, CellAttrs]], width: int) -> str:
        """Concatenate styled segments, truncated to ``width`` columns."""
        out = []
        used = 0
        for text, attrs in segments:
            text = text[:max(0, width - used)]
            if not text:
                continue
            out.append(self.sgr(attrs) + text)
            used += len(text)
        out.append(self.term.normal)
        return ''.join(out)

    @staticmethod
    def cell_attrs(style: StyleFlags, theme: Theme, page_break: bool = False) -> CellAttrs:
        fg = theme.base_fg
        dim = False
        if style & StyleFlags.MARKER or page_break:
            fg = theme.guide
        if style & StyleFlags.FADED:
            fg = theme.dim_text
            dim = True
        return (fg, theme.paper_bg, bool(style & StyleFlags.BOLD), bool(style & StyleFlags.ITALIC), dim)

    def compose_text_cells(
        self,
        line: Optional[VisualLine],
        width: int,
        theme: Theme,
        guide_column: Optional[int] = None,
    ) -> list[tuple[str, CellAttrs]]:
        """Styled segments for the text area of one paper row.

        Blank cells at ``guide_column`` show the margin guide.
        """
        plain: CellAttrs = (theme.base_fg, theme.paper_bg, False, False, False)
        guide: CellAttrs = (theme.guide, theme.paper_bg, False, False, True)
        cells = line.cells[:width] if line is not None else []
        page_break = line is not None and line.page_break

        segments: list[tuple[str, CellAttrs]] = []
        for x in range(width):
            if x < len(cells):
                ch, style = cells[x]
                attrs = self.cell_attrs(style, theme, page_break)
                if ord(ch) < 32 or ord(ch) == 127:
                    # Tabs and control characters would move the terminal cursor
                    ch = ' '
            elif x == guide_column and not page_break:
                ch, attrs = EditorConstants.MARGIN_GUIDE_CHAR, guide
            else:
                ch, attrs = ' ', plain
            # Merge runs of equal attributes into a single segment
            if segments and segments[-1][1] == attrs:
                segments[-1] = (segments[-1][0] + ch, attrs)
            else:
                segments.append((ch, attrs))
        return segments

    def compose_paper_row(
        self,
        line: Optional[VisualLine],
        layout: LayoutConfig,
        theme: Theme,
        text_width: int,
        left_margin: int,
        guide_column: Optional[int] = None,
    ) -> str:
        """One full screen row: desk, border, padding, text, padding, border."""
        width = self.width
        desk: CellAttrs = (theme.base_fg, theme.base_bg, False, False, False)
        paper: CellAttrs = (theme.base_fg, theme.paper_bg, False, False, False)
        border: CellAttrs = (theme.border, theme.paper_bg, False, False, False)
        border_char = EditorConstants.FANCY_BORDER_CHAR if layout.fancy_borders else EditorConstants.PLAIN_BORDER_CHAR

        segments: list[tuple[str, CellAttrs]] = [
            (' ' * left_margin, desk),
            (border_char, border),
            (' ' * layout.pad_left, paper),
        ]
        segments.extend(self.compose_text_cells(line, text_width, theme, guide_column))
        segments.append((' ' * layout.pad_right, paper))
        segments.append((border_char, border))
        used = left_margin + 2 + layout.pad_left + layout.pad_right + text_width
        segments.append((' ' * max(0, width - used), desk))
        return self.compose_segments(segments, width)

    # --- Output ---

    def update_frame(self, rows: list[str], cursor: Optional[tuple[int, int]] = None) -> None:
        """Diff against last frame and write only changed rows.

        Falls back to a full clear on first paint or when geometry changes.
        ``cursor`` is ``(y, x)`` in screen coordinates, or None to hide it.
        """
        need_full_clear = (
            self._last_lines is None
            or self._last_width != self.width
            or len(self._last_lines) != len(rows)
        )

        if need_full_clear:
            print(self.term.home + self.term.normal + self.term.clear, end='')
            self._last_lines = ["" for _ in range(len(rows))]
            self._last_width = self.width

        for y, row in enumerate(rows):
            if row != self._last_lines[y]:
                print(self.term.move(y, 0) + row, end='')
                self._last_lines[y] = row

        if cursor is None:
            print(self.term.hide_cursor, end='', flush=True)
        else:
            y, x = cursor
            print(self.term.move(y, x) + self.term.normal_cursor, end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name as a string, or None.
        """
        if self._curtsies_input is not None:
            # Use select on stdin to implement timeouts
            if timeout is None:
                evt = next(self._curtsies_input)  # blocks
                return str(evt)
            else:
                t = 0.0 if timeout == 0 else float(timeout)
                r, _, _ = select.select([sys.stdin], [], [], t)
                if not r:
                    return None
                evt = next(self._curtsies_input)
                return str(evt)
        # Curtsies is required; if not initialized, return None
        return None

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Rows available to the paper (excluding header and footer)."""
        return max(1, self.term.height - 2)
