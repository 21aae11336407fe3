"""Colour palettes for the paper, header and footer."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

RGB = Optional[tuple[int, int, int]]  # None means the terminal default


@dataclass(frozen=True)
class Theme:
    name: str
    base_bg: RGB
    base_fg: RGB
    paper_bg: RGB
    border: RGB
    header_bg: RGB
    header_fg: RGB
    accent: RGB  # App name badge, active toggles
    guide: RGB  # Markup characters and the margin guide
    dim_text: RGB  # Focus mode inactive lines
    status_ok: RGB
    status_bad: RGB

    @classmethod
    def dark(cls) -> "Theme":
        return cls(
            name="Dark",
            base_bg=None,
            base_fg=(255, 255, 255),
            paper_bg=None,
            border=(88, 88, 88),
            header_bg=(88, 88, 88),
            header_fg=(255, 255, 255),
            accent=(0, 95, 215),
            guide=(120, 120, 120),
            dim_text=(50, 50, 50),
            status_ok=(0, 175, 0),
            status_bad=(215, 0, 0),
        )

    @classmethod
    def light(cls) -> "Theme":
        return cls(
            name="Paper",
            base_bg=(30, 30, 30),  # Dark desk under the sheet
            base_fg=(0, 0, 0),
            paper_bg=(253, 246, 227),
            border=(180, 170, 150),
            header_bg=(238, 232, 213),
            header_fg=(0, 0, 0),
            accent=(38, 139, 210),
            guide=(147, 161, 161),
            dim_text=(200, 200, 190),
            status_ok=(133, 153, 0),
            status_bad=(220, 50, 47),
        )

    @classmethod
    def retro(cls) -> "Theme":
        amber = (255, 176, 0)
        dim_amber = (100, 70, 0)
        return cls(
            name="Retro",
            base_bg=(0, 0, 0),
            base_fg=amber,
            paper_bg=(0, 0, 0),
            border=dim_amber,
            header_bg=(40, 30, 0),
            header_fg=amber,
            accent=amber,
            guide=dim_amber,
            dim_text=dim_amber,
            status_ok=amber,
            status_bad=(215, 0, 0),
        )


class ThemeType(Enum):
    DARK = "dark"
    LIGHT = "light"
    RETRO = "retro"

    def next(self) -> "ThemeType":
        order = list(ThemeType)
        return order[(order.index(self) + 1) % len(order)]

    def theme(self) -> Theme:
        if self is ThemeType.LIGHT:
            return Theme.light()
        if self is ThemeType.RETRO:
            return Theme.retro()
        return Theme.dark()

    @classmethod
    def parse(cls, name: str) -> "ThemeType":
        """Map a preference string to a theme, defaulting to dark."""
        key = str(name).strip().lower()
        if key == "paper":
            return cls.LIGHT
        try:
            return cls(key)
        except ValueError:
            return cls.DARK
