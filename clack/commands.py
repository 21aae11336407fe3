"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .keyboard import KeyType

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command

        Returns:
            True if the command modified the document
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Movement commands don't modify the document."""
        self._move(editor, key_event)
        return False

    @abstractmethod
    def _move(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the movement."""
        pass


class LeftCharCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.model.move_left()


class RightCharCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.model.move_right()


class UpLineCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.model.move_cursor_up()


class DownLineCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.move_cursor_down()


class LeftWordCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.model.move_word_left()


class RightWordCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.model.move_word_right()


class BeginningOfLineCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.model.move_to_line_start()


class EndOfLineCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.model.move_to_line_end()


class EditCommand(EditorCommand):
    """Base class for editing commands.

    ``_edit`` returns whether the document actually changed, so a rejected
    insert or a backspace at the start of the document is not reported as
    a modification.
    """

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        return bool(self._edit(editor, key_event))

    @abstractmethod
    def _edit(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Perform the edit."""
        pass


class BackspaceCommand(EditCommand):
    def _edit(self, editor, key_event):
        return editor.backspace()


class DeleteCharCommand(EditCommand):
    def _edit(self, editor, key_event):
        return editor.delete_forward()


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.enter()
        return True


class InsertTextCommand(EditCommand):
    def _edit(self, editor, key_event):
        char = key_event.value
        # Filter out control characters and multi-character key names
        if len(char) != 1 or (ord(char) < 32 and char != '\t') or ord(char) == 127:
            return False
        return editor.insert_text(char)


class SystemCommand(EditorCommand):
    """Base class for system commands like save, quit, mode toggles."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """System commands don't modify document content directly."""
        self._execute_system(editor, key_event)
        return False

    @abstractmethod
    def _execute_system(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the system action."""
        pass


class QuitCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        if editor.modified:
            editor.prompt_mode = 'quit_confirm'
        else:
            editor.running = False


class SaveCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor._handle_save()


class HelpCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.show_help()


class ToggleTypewriterCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.toggle_typewriter_mode()


class ToggleFocusCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.toggle_focus_mode()


class ToggleSoundCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.toggle_sound()


class CycleThemeCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.cycle_theme()


class ToggleDoubleSpacingCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.toggle_double_spacing()


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        self.register((KeyType.SPECIAL, 'left'), LeftCharCommand())
        self.register((KeyType.SPECIAL, 'right'), RightCharCommand())
        self.register((KeyType.SPECIAL, 'up'), UpLineCommand())
        self.register((KeyType.SPECIAL, 'down'), DownLineCommand())

        # Word movement: Ctrl/Alt arrows and Emacs-style Alt-B/F
        self.register((KeyType.CTRL, 'left'), LeftWordCommand())
        self.register((KeyType.CTRL, 'right'), RightWordCommand())
        self.register((KeyType.ALT, 'left'), LeftWordCommand())
        self.register((KeyType.ALT, 'right'), RightWordCommand())
        self.register((KeyType.ALT, 'b'), LeftWordCommand())
        self.register((KeyType.ALT, 'f'), RightWordCommand())

        # Line movement
        self.register((KeyType.SPECIAL, 'home'), BeginningOfLineCommand())
        self.register((KeyType.SPECIAL, 'end'), EndOfLineCommand())
        self.register((KeyType.CTRL, 'a'), BeginningOfLineCommand())
        self.register((KeyType.CTRL, 'e'), EndOfLineCommand())

        # Editing commands
        self.register((KeyType.SPECIAL, 'backspace'), BackspaceCommand())
        self.register((KeyType.SPECIAL, 'delete'), DeleteCharCommand())
        self.register((KeyType.CTRL, 'd'), DeleteCharCommand())
        self.register((KeyType.SPECIAL, 'enter'), InsertNewlineCommand())

        # Modes
        self.register((KeyType.SPECIAL, 'f2'), ToggleFocusCommand())
        self.register((KeyType.SPECIAL, 'f3'), ToggleTypewriterCommand())
        self.register((KeyType.CTRL, 't'), ToggleTypewriterCommand())
        self.register((KeyType.SPECIAL, 'f4'), ToggleSoundCommand())
        self.register((KeyType.SPECIAL, 'f5'), CycleThemeCommand())
        self.register((KeyType.SPECIAL, 'f6'), ToggleDoubleSpacingCommand())

        # System commands
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.SPECIAL, 'escape'), QuitCommand())
        self.register((KeyType.CTRL, 's'), SaveCommand())

        # Help command - F1 only
        self.register((KeyType.SPECIAL, 'f1'), HelpCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the document was modified
        """
        if key_event.is_alt:
            command = self.get_command(KeyType.ALT, key_event.value)
        else:
            command = self.get_command(key_event.key_type, key_event.value)

        if command:
            return command.execute(editor, key_event)

        # Handle regular text input
        if key_event.key_type == KeyType.REGULAR:
            return InsertTextCommand().execute(editor, key_event)

        return False
