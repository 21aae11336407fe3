"""Clack - a distraction-free typewriter for the terminal."""

from .document import Document
from .model import TextModel, CursorPosition, InsertResult
from .markup import StyleFlags, StyledRun, parse_line
from .view import TerminalTextView, VisualLine

__all__ = [
    'Document',
    'TextModel',
    'CursorPosition',
    'InsertResult',
    'StyleFlags',
    'StyledRun',
    'parse_line',
    'TerminalTextView',
    'VisualLine',
]
