"""Constants and configuration defaults for the clack editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    APP_NAME = "Clack"

    # Typewriter behaviour
    BELL_COLUMN = 72  # Soft right margin, like a mechanical margin stop
    LINES_PER_PAGE = 54  # Lines per printed page (US letter)
    PAGE_FEED_PAUSE_MS = 350  # Just long enough to feel the paper feed

    # Paper layout
    TEXT_WIDTH = 80
    PAD_LEFT = 2
    PAD_RIGHT = 2
    PAD_TOP = 1
    PAD_BOTTOM = 1

    # Visual separators
    PAGE_BREAK_CHAR = "─"
    FANCY_BORDER_CHAR = "│"
    PLAIN_BORDER_CHAR = "|"
    MARGIN_GUIDE_CHAR = "·"

    # Audio
    MAX_VOICES = 4  # Sounds allowed to play at the same time
    SOUND_QUEUE_SIZE = 16  # Pending sound requests before the oldest are dropped

    # File operations
    DEFAULT_FILENAME = "Untitled.md"

    # Preferences
    PREFERENCES_APP_NAME = "clack"
    PREFERENCES_FILENAME = "preferences.json"

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Status messages
    SAVED_MESSAGE = "Saved to {}"
    LOAD_ERROR_MESSAGE = "Error: Failed to load {}: {}"
    SAVE_ERROR_MESSAGE = "Error: Failed to save {}: {}"
    QUIT_CONFIRM_PROMPT = "Save file? (y, n) "
