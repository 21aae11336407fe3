"""Main editor controller for the typewriter."""

import errno
import logging
import os
import select
import shutil
import signal
import sys
import tempfile
import termios
import time
from typing import Optional

from .commands import CommandRegistry
from .config import Config
from .constants import EditorConstants
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .model import InsertResult, TextModel
from .preferences import PreferencesStore
from .sound import AudioEngine, Sound
from .terminal import CellAttrs, TerminalInterface
from .theme import Theme, ThemeType
from .view import TerminalTextView

logger = logging.getLogger(__name__)

HELP_LINES = [
    "",
    "WRITING                      NAVIGATION",
    "  Enter     New line           ←/→         Character left/right",
    "  Bksp      Delete back        ↑/↓         Line up/down",
    "  Del/^D    Delete forward     Ctrl/Alt-←/→ Word left/right",
    "                               Alt-B/F     Word left/right",
    "FILE                           Home/^A     Beginning of line",
    "  Ctrl-S    Save               End/^E      End of line",
    "  Ctrl-Q    Quit",
    "  Esc       Quit               MODES",
    "                                 F2        Focus mode",
    "                                 F3/^T     Typewriter scrolling",
    "                                 F4        Sound",
    "                                 F5        Theme",
    "                                 F6        Double spacing",
]


class Editor:
    """Typewriter session: owns the document, the layout and all modes."""

    def __init__(
        self,
        terminal: Optional[TerminalInterface] = None,
        preferences_store: Optional[PreferencesStore] = None,
        audio: Optional[AudioEngine] = None,
        config: Optional[Config] = None,
    ):
        """Initialize the editor components."""
        self.preferences_store = preferences_store or PreferencesStore()
        self.preferences = self.preferences_store.load()
        self.config = config or self.preferences.to_config()

        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.model = TextModel(self.config.typewriter)
        self.view = TerminalTextView(self.model, self.config)
        self.view.typewriter_mode = self.preferences.typewriter_mode
        self.view.focus_mode = self.preferences.focus_mode
        self.view.double_spacing = self.preferences.double_spacing
        self.theme_type = ThemeType.parse(self.preferences.theme)

        self.audio = audio or AudioEngine()
        self.audio.enabled = self.preferences.sound_enabled

        self.command_registry = CommandRegistry()  # Command pattern for key handling
        self.running = False
        # File handling
        self.filename: Optional[str] = None
        self.status_message: Optional[str] = None
        self.prompt_mode: Optional[str] = None  # None or 'quit_confirm'
        self.help_visible = False
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None

        self._play(Sound.STARTUP)

    # --- Session state ---

    @property
    def modified(self) -> bool:
        return self.model.has_unsaved_changes

    @modified.setter
    def modified(self, value: bool):
        self.model.has_unsaved_changes = value

    @property
    def sound_enabled(self) -> bool:
        return self.audio.enabled

    @property
    def theme(self) -> Theme:
        return self.theme_type.theme()

    def _play(self, sound: Sound):
        if self.sound_enabled:
            self.audio.trigger(sound)

    def _pause_for_page_feed(self):
        pause_ms = self.config.typewriter.page_feed_pause_ms
        if pause_ms > 0:
            time.sleep(pause_ms / 1000)

    def _save_preferences(self):
        self.preferences_store.save(self.preferences)

    # --- Editing ---

    def insert_text(self, char: str) -> bool:
        """Type a character; returns False if the margin stop rejected it."""
        result = self.model.insert_char(char)
        if result is InsertResult.MARGIN_BLOCKED:
            self._play(Sound.DING)
            return False

        self._play(Sound.SPACE if char == ' ' else Sound.KEY)
        if result is InsertResult.MARGIN_WARNING:
            self._play(Sound.DING)
        self.check_and_play_page_feed()
        return True

    def enter(self):
        self.model.enter_key()
        self._play(Sound.RETURN)
        self.check_and_play_page_feed()

    def backspace(self) -> bool:
        if not self.model.delete_char():
            return False
        self._play(Sound.BACKSPACE)
        return True

    def delete_forward(self) -> bool:
        if not self.model.delete_char_forward():
            return False
        self._play(Sound.BACKSPACE)
        return True

    def move_cursor_down(self):
        crossed_page = self.model.move_cursor_down()
        if crossed_page and self.sound_enabled:
            self.audio.trigger(Sound.FEED)
            self._pause_for_page_feed()

    def check_and_play_page_feed(self) -> bool:
        """Play the paper feed and pause if the cursor reached a new page."""
        if not self.model.check_page_feed():
            return False
        self._play(Sound.FEED)
        self._pause_for_page_feed()
        return True

    # --- Modes ---

    def toggle_typewriter_mode(self):
        self.view.typewriter_mode = not self.view.typewriter_mode
        self.preferences.typewriter_mode = self.view.typewriter_mode
        self._play(Sound.TOGGLE)
        self._save_preferences()

    def toggle_focus_mode(self):
        self.view.focus_mode = not self.view.focus_mode
        self.preferences.focus_mode = self.view.focus_mode
        self._play(Sound.TOGGLE)
        self._save_preferences()

    def toggle_double_spacing(self):
        self.view.double_spacing = not self.view.double_spacing
        self.preferences.double_spacing = self.view.double_spacing
        self._play(Sound.TOGGLE)
        self._save_preferences()

    def toggle_sound(self):
        self.audio.enabled = not self.audio.enabled
        self.preferences.sound_enabled = self.audio.enabled
        # Only audible when switching on
        self._play(Sound.TOGGLE)
        self._save_preferences()

    def cycle_theme(self):
        self.theme_type = self.theme_type.next()
        self.preferences.theme = self.theme_type.value
        self._play(Sound.TOGGLE)
        self._save_preferences()

    def show_help(self):
        """Show the help screen."""
        self.help_visible = True
        self._play(Sound.TOGGLE)

    def hide_help(self):
        """Hide the help screen and return to editor."""
        self.help_visible = False
        self.terminal.invalidate_frame()

    # --- Files ---

    def load_file(self, filename: str) -> bool:
        """Load a file into the editor.

        A missing file starts an empty document that will be saved under
        ``filename``. Other failures leave the current document in place
        and report the error in the status line.
        """
        try:
            with open(filename, 'r', encoding='utf-8', newline='') as f:
                content = f.read()
        except FileNotFoundError:
            logger.info(f"{filename} does not exist yet, starting a new document")
            content = ""
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to load {filename}: {e}")
            self.status_message = EditorConstants.LOAD_ERROR_MESSAGE.format(filename, e)
            return False

        self.model = TextModel.from_text(content, self.config.typewriter)
        self.view.model = self.model
        self.filename = filename
        return True

    def save_file(self, filename: Optional[str] = None) -> bool:
        """Save the current document to a file atomically.

        Args:
            filename: Path to save to; defaults to the current file, then
                to ``Untitled.md``.

        Returns:
            True if save succeeded, False otherwise
        """
        path = filename or self.filename or EditorConstants.DEFAULT_FILENAME
        temp_filename = None
        try:
            # Same directory as the target so the rename stays on one filesystem
            dir_name = os.path.dirname(path) or '.'
            suffix = os.path.splitext(path)[1]
            with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', newline='',
                                             dir=dir_name, suffix=suffix,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                for chunk in self.model.document.chunks():
                    temp_file.write(chunk)
                temp_file.flush()
                os.fsync(temp_file.fileno())  # Ensure data is written to disk

            self._apply_file_mode(temp_filename, path)
            os.replace(temp_filename, path)
        except (OSError, UnicodeEncodeError) as e:
            if getattr(e, 'errno', None) == errno.ENOSPC:
                reason = "No space left on device"
            elif isinstance(e, PermissionError):
                reason = "Permission denied"
            else:
                reason = str(e)
            logger.warning(f"Failed to save {path}: {e}")
            self.status_message = EditorConstants.SAVE_ERROR_MESSAGE.format(path, reason)
            if temp_filename and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError:
                    pass
            return False

        logger.info(f"Saved {path}")
        self.filename = path
        self.modified = False
        self.status_message = EditorConstants.SAVED_MESSAGE.format(path)
        return True

    @staticmethod
    def _apply_file_mode(temp_filename: str, path: str) -> None:
        """Give the temp file the permissions the saved file should end up with."""
        try:
            shutil.copymode(path, temp_filename)
        except FileNotFoundError:
            # New file: what open() would have created under the current umask
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(temp_filename, 0o666 & ~umask)

    def _handle_save(self):
        """Handle Ctrl-S save command."""
        self.save_file()

    # --- Input ---

    def _handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event.

        Args:
            key_event: KeyEvent object with parsed key information
        """
        # If help is visible, any key dismisses it
        if self.help_visible:
            self.hide_help()
            return

        # Handle prompt modes first
        if self._handle_prompt_mode(key_event):
            return

        # Clear status message on any keypress
        self.status_message = None

        was_modified = self.command_registry.execute(self, key_event)
        if was_modified:
            self.modified = True

    def _handle_prompt_mode(self, key_event: KeyEvent) -> bool:
        """Handle input in prompt mode.

        Returns:
            True if in prompt mode and event was handled
        """
        if self.prompt_mode == 'quit_confirm':
            self._handle_quit_confirm(key_event)
            return True
        return False

    def _handle_quit_confirm(self, key_event: KeyEvent):
        """Handle keypress during quit confirmation."""
        self.prompt_mode = None
        if key_event.key_type != KeyType.REGULAR:
            # Cancel quit
            return
        char = key_event.value.lower()
        if char == 'y':
            # Save and quit; a failed save keeps the session open
            if self.save_file():
                self.running = False
        elif char == 'n':
            # Quit without saving
            self.running = False

    # --- Drawing ---

    def _header_row(self) -> str:
        theme = self.theme
        bar: CellAttrs = (theme.header_fg, theme.header_bg, False, False, False)
        badge: CellAttrs = ((255, 255, 255), theme.accent, True, False, False)
        name = os.path.basename(self.filename) if self.filename else EditorConstants.DEFAULT_FILENAME
        segments = [
            (f" {EditorConstants.APP_NAME} ", badge),
            (f" {name}", bar),
        ]
        if self.modified:
            segments.append((" [+]", bar))
        width = self.terminal.width
        used = sum(len(text) for text, _ in segments)
        segments.append((' ' * max(0, width - used), bar))
        return self.terminal.compose_segments(segments, width)

    def _footer_row(self) -> str:
        theme = self.theme
        bar: CellAttrs = (theme.header_fg, theme.header_bg, False, False, False)

        def flag(label: str, on: bool):
            state: CellAttrs = (theme.status_ok if on else theme.status_bad, theme.header_bg, False, False, False)
            return [(f" {label}: ", bar), ("ON" if on else "OFF", state), (" |", bar)]

        if self.prompt_mode == 'quit_confirm':
            segments = [(f" {EditorConstants.QUIT_CONFIRM_PROMPT}", bar)]
        elif self.status_message:
            is_error = self.status_message.startswith("Error")
            color = theme.status_bad if is_error else theme.status_ok
            segments = [(f" {self.status_message}", (color, theme.header_bg, False, False, False))]
        else:
            segments = flag("TW", self.view.typewriter_mode)
            segments += flag("FOC", self.view.focus_mode)
            segments += flag("SND", self.sound_enabled)
            segments.append((
                f" {self.model.get_word_count()} w / {self.model.get_char_count()} c"
                f" | Pg {self.model.get_current_page()}"
                f" | F1:Help F2:Foc F3:TW F4:Snd F5:Thm F6:Dbl",
                bar,
            ))
        width = self.terminal.width
        used = sum(len(text) for text, _ in segments)
        segments.append((' ' * max(0, width - used), bar))
        return self.terminal.compose_segments(segments, width)

    def compose_frame(self) -> tuple[list[str], Optional[tuple[int, int]]]:
        """Build every screen row and the screen cursor position."""
        layout = self.config.layout
        view = self.view
        view.num_rows = self.terminal.height
        view.num_columns = self.terminal.width
        view.render()

        text_width = view.effective_width
        paper_width = text_width + 2 + layout.pad_left + layout.pad_right
        left_margin = max(0, (self.terminal.width - paper_width) // 2)
        guide_column = None
        if layout.show_margin_guide and self.config.typewriter.bell_column < text_width:
            guide_column = self.config.typewriter.bell_column

        def paper_row(line=None):
            return self.terminal.compose_paper_row(line, layout, self.theme, text_width, left_margin, guide_column)

        rows = [self._header_row()]
        rows.extend(paper_row() for _ in range(layout.pad_top))
        visible = view.visible_lines()
        for y in range(view.inner_height):
            rows.append(paper_row(visible[y] if y < len(visible) else None))
        rows.extend(paper_row() for _ in range(layout.pad_bottom))
        # Very short terminals: keep the footer on the last row
        rows = rows[:self.terminal.height + 1]
        rows.append(self._footer_row())

        if self.prompt_mode == 'quit_confirm':
            cursor = (len(rows) - 1, 1 + len(EditorConstants.QUIT_CONFIRM_PROMPT))
        else:
            y = 1 + layout.pad_top + view.cursor_screen_row
            x = left_margin + 1 + layout.pad_left + view.visual_cursor_x
            cursor = (y, x) if 0 <= view.cursor_screen_row < view.inner_height else None
        return rows, cursor

    def _draw(self):
        """Draw the current editor state to terminal."""
        if self.help_visible:
            self._draw_help()
            return
        rows, cursor = self.compose_frame()
        self.terminal.update_frame(rows, cursor)

    def _draw_help(self):
        """Draw the help screen."""
        term = self.terminal.term

        print(term.normal + term.clear, end='')

        title = f"{EditorConstants.APP_NAME.upper()} HELP"
        width = self.terminal.width
        print(f"{term.move(1, max(0, (width - len(title)) // 2))}{term.bold}{title}{term.normal}", end='')

        height = self.terminal.height + 2
        content_start_y = max(3, (height - len(HELP_LINES)) // 2)
        max_line_length = max(len(line) for line in HELP_LINES)
        left_margin = max(0, (width - max_line_length) // 2)
        for i, line in enumerate(HELP_LINES):
            print(f"{term.move(content_start_y + i, left_margin)}{line}", end='')

        print(f"{term.move(height - 1, 0)} Press any key to continue", end='')
        print(term.hide_cursor, end='', flush=True)
        # Next editor frame must repaint everything
        self.terminal.invalidate_frame()

    # --- Main loop ---

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def run(self):
        """Run the main editor loop."""
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self.terminal.setup()
        self.running = True

        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)

        try:
            with self.terminal.term.cbreak():
                # Disable flow control AFTER entering cbreak mode so Ctrl-S and Ctrl-Q arrive
                old_settings = None
                try:
                    old_settings = termios.tcgetattr(sys.stdin)
                    new_settings = list(old_settings)
                    new_settings[0] &= ~(termios.IXON | termios.IXOFF)
                    termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
                except (termios.error, AttributeError, OSError):
                    old_settings = None

                need_draw = True
                while self.running:
                    if need_draw:
                        self._draw()
                        need_draw = False

                    ready, _, _ = select.select([0, self._resize_pipe_r], [], [])

                    if self._resize_pipe_r in ready:
                        os.read(self._resize_pipe_r, 1024)
                        self.terminal.invalidate_frame()
                        need_draw = True
                    elif 0 in ready:
                        key_event = self.keyboard.get_key_event(timeout=0)
                        if key_event:
                            self._handle_key_event(key_event)
                            need_draw = True

                if old_settings:
                    try:
                        termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
                    except (termios.error, OSError):
                        pass

        except KeyboardInterrupt:
            # Ctrl-C leaves without the save prompt
            logger.info("Interrupted")
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self._resize_pipe_r = self._resize_pipe_w = None
            self.terminal.cleanup()
            self.audio.close()
