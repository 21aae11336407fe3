"""Persistent user preferences.

Preferences are stored as a small JSON object in the user's config
directory. Anything missing or malformed falls back to its default so a
damaged file can never prevent the editor from starting.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .config import Config, TypewriterConfig
from .constants import EditorConstants

logger = logging.getLogger(__name__)

# Accepted ranges for the optional typewriter overrides
_INT_RANGES = {
    'bell_column': (20, 200),
    'lines_per_page': (10, 200),
    'page_feed_pause_ms': (0, 2000),
}


@dataclass
class UserPreferences:
    typewriter_mode: bool = True
    focus_mode: bool = False
    sound_enabled: bool = True
    double_spacing: bool = False
    theme: str = "dark"
    bell_column: Optional[int] = None
    lines_per_page: Optional[int] = None
    page_feed_pause_ms: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserPreferences":
        """Build preferences from decoded JSON, keeping only valid values."""
        prefs = cls()
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if validate_preference(f.name, value):
                setattr(prefs, f.name, value)
            else:
                logger.warning(f"Ignoring invalid preference {f.name}={value!r}")
        return prefs

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def to_config(self) -> Config:
        """Typewriter configuration with any stored overrides applied."""
        defaults = TypewriterConfig()
        typewriter = TypewriterConfig(
            bell_column=self.bell_column if self.bell_column is not None else defaults.bell_column,
            lines_per_page=self.lines_per_page if self.lines_per_page is not None else defaults.lines_per_page,
            page_feed_pause_ms=(
                self.page_feed_pause_ms if self.page_feed_pause_ms is not None
                else defaults.page_feed_pause_ms
            ),
        )
        return Config(typewriter=typewriter)


def validate_preference(key: str, value: Any) -> bool:
    """Return True if ``value`` is acceptable for preference ``key``."""
    if key in ('typewriter_mode', 'focus_mode', 'sound_enabled', 'double_spacing'):
        return isinstance(value, bool)
    if key == 'theme':
        return isinstance(value, str)
    if key in _INT_RANGES:
        if value is None:
            return True
        # bool is an int subclass but never a sensible count
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        low, high = _INT_RANGES[key]
        return low <= value <= high
    # Unknown keys are ignored by from_dict, accept them here
    return True


class PreferencesStore:
    """Reads and writes ``UserPreferences`` as JSON."""

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = Path(platformdirs.user_config_dir(EditorConstants.PREFERENCES_APP_NAME))
        self._config_dir = Path(config_dir)
        self._preferences_file = self._config_dir / EditorConstants.PREFERENCES_FILENAME

    @property
    def path(self) -> Path:
        return self._preferences_file

    def load(self) -> UserPreferences:
        """Load preferences, returning defaults if the file is absent or broken."""
        if not self._preferences_file.exists():
            return UserPreferences()

        try:
            with open(self._preferences_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Could not load preferences from {self._preferences_file}: {e}")
            return UserPreferences()

        if not isinstance(data, dict):
            logger.warning("Preferences file has invalid format (not an object), ignoring")
            return UserPreferences()

        return UserPreferences.from_dict(data)

    def save(self, prefs: UserPreferences) -> bool:
        """Save preferences atomically. Returns True on success."""
        temp_file = self._preferences_file.with_suffix('.tmp')
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(prefs.to_dict(), f, indent=2)
            temp_file.replace(self._preferences_file)
            return True
        except OSError as e:
            logger.warning(f"Could not save preferences to {self._preferences_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False
