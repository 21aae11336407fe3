"""Typewriter and layout configuration."""

from dataclasses import dataclass, field

from .constants import EditorConstants


@dataclass(frozen=True)
class TypewriterConfig:
    """Behaviour of the simulated machine."""
    bell_column: int = EditorConstants.BELL_COLUMN
    lines_per_page: int = EditorConstants.LINES_PER_PAGE
    page_feed_pause_ms: int = EditorConstants.PAGE_FEED_PAUSE_MS


@dataclass(frozen=True)
class LayoutConfig:
    """Presentation constants for the sheet of paper."""
    text_width: int = EditorConstants.TEXT_WIDTH
    pad_left: int = EditorConstants.PAD_LEFT
    pad_right: int = EditorConstants.PAD_RIGHT
    pad_top: int = EditorConstants.PAD_TOP
    pad_bottom: int = EditorConstants.PAD_BOTTOM
    show_margin_guide: bool = True
    fancy_borders: bool = True

    @property
    def paper_width(self) -> int:
        """Text width plus padding plus the two border columns."""
        return self.text_width + self.pad_left + self.pad_right + 2


@dataclass(frozen=True)
class Config:
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    typewriter: TypewriterConfig = field(default_factory=TypewriterConfig)
