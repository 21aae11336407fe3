"""Test loading and atomic saving of documents."""

import errno
import os
import stat
from unittest.mock import Mock, patch

from clack.config import Config
from clack.editor import Editor
from clack.preferences import PreferencesStore
from clack.terminal import TerminalInterface


def create_editor(tmp_path):
    audio = Mock()
    audio.enabled = True
    return Editor(
        terminal=Mock(spec=TerminalInterface),
        preferences_store=PreferencesStore(tmp_path / "config"),
        audio=audio,
        config=Config(),
    )


def type_text(editor, text):
    for ch in text:
        if ch == "\n":
            editor.enter()
        else:
            editor.insert_text(ch)


def test_save_file_creates_file(tmp_path):
    editor = create_editor(tmp_path)
    type_text(editor, "First line\nSecond line")
    target = tmp_path / "doc.md"

    assert editor.save_file(str(target)) is True
    assert target.read_text(encoding="utf-8") == "First line\nSecond line"
    assert editor.filename == str(target)
    assert editor.modified is False
    assert editor.status_message == f"Saved to {target}"


def test_save_overwrites_existing(tmp_path):
    target = tmp_path / "doc.md"
    target.write_text("Old content", encoding="utf-8")
    editor = create_editor(tmp_path)
    type_text(editor, "New")

    assert editor.save_file(str(target))
    assert target.read_text(encoding="utf-8") == "New"


def test_round_trip_preserves_line_endings(tmp_path):
    source = tmp_path / "windows.txt"
    original = "one\r\ntwo\r\n\r\nthree\n"
    source.write_bytes(original.encode("utf-8"))

    editor = create_editor(tmp_path)
    assert editor.load_file(str(source))
    target = tmp_path / "copy.txt"
    assert editor.save_file(str(target))
    assert target.read_bytes() == original.encode("utf-8")


def test_round_trip_unicode(tmp_path):
    source = tmp_path / "unicode.md"
    original = "naïve café — ünïcødé ✓\n# Überschrift\n"
    source.write_text(original, encoding="utf-8")

    editor = create_editor(tmp_path)
    editor.load_file(str(source))
    editor.save_file()
    assert source.read_text(encoding="utf-8") == original


def test_load_file_sets_state(tmp_path):
    source = tmp_path / "doc.md"
    source.write_text("Line 1\nLine 2", encoding="utf-8")
    editor = create_editor(tmp_path)
    type_text(editor, "scratch")

    assert editor.load_file(str(source)) is True
    assert editor.filename == str(source)
    assert editor.model.text == "Line 1\nLine 2"
    assert editor.model.cursor_idx == 0
    assert editor.modified is False
    assert editor.view.model is editor.model


def test_load_missing_file_starts_empty(tmp_path):
    editor = create_editor(tmp_path)
    path = str(tmp_path / "new.md")
    assert editor.load_file(path) is True
    assert editor.model.text == ""
    assert editor.filename == path
    assert editor.status_message is None


def test_load_invalid_utf8_reports_error(tmp_path):
    source = tmp_path / "binary.bin"
    source.write_bytes(b"\xff\xfe\x00bad")
    editor = create_editor(tmp_path)
    type_text(editor, "keep me")

    assert editor.load_file(str(source)) is False
    assert editor.status_message.startswith(f"Error: Failed to load {source}:")
    assert editor.filename is None
    assert editor.model.text == "keep me"


def test_save_defaults_to_untitled(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    editor = create_editor(tmp_path)
    type_text(editor, "draft")

    assert editor.save_file() is True
    assert (tmp_path / "Untitled.md").read_text(encoding="utf-8") == "draft"
    assert editor.filename == "Untitled.md"


def test_save_to_missing_directory_fails(tmp_path):
    editor = create_editor(tmp_path)
    type_text(editor, "text")
    target = tmp_path / "missing" / "doc.md"

    assert editor.save_file(str(target)) is False
    assert editor.status_message.startswith(f"Error: Failed to save {target}:")
    assert editor.modified is True
    assert editor.filename is None


def test_failed_replace_keeps_original_and_cleans_up(tmp_path):
    target = tmp_path / "doc.md"
    target.write_text("original", encoding="utf-8")
    editor = create_editor(tmp_path)
    type_text(editor, "replacement")

    with patch("clack.editor.os.replace", side_effect=OSError(errno.EIO, "I/O error")):
        assert editor.save_file(str(target)) is False

    assert target.read_text(encoding="utf-8") == "original"
    assert sorted(os.listdir(tmp_path)) == ["doc.md"]


def test_disk_full_message(tmp_path):
    editor = create_editor(tmp_path)
    target = tmp_path / "doc.md"

    with patch("clack.editor.os.replace", side_effect=OSError(errno.ENOSPC, "No space left")):
        assert editor.save_file(str(target)) is False

    assert editor.status_message == f"Error: Failed to save {target}: No space left on device"


def test_save_keeps_existing_permissions(tmp_path):
    target = tmp_path / "doc.md"
    target.write_text("original", encoding="utf-8")
    os.chmod(target, 0o644)
    editor = create_editor(tmp_path)
    type_text(editor, "replacement")

    assert editor.save_file(str(target)) is True
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o644


def test_new_file_permissions_follow_umask(tmp_path):
    editor = create_editor(tmp_path)
    type_text(editor, "text")
    target = tmp_path / "new.md"

    old_umask = os.umask(0o027)
    try:
        assert editor.save_file(str(target)) is True
    finally:
        os.umask(old_umask)
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o640


def test_ctrl_s_saves_current_file(tmp_path):
    from clack.keyboard import KeyEvent, KeyType

    target = tmp_path / "doc.md"
    editor = create_editor(tmp_path)
    editor.load_file(str(target))
    type_text(editor, "hello")

    editor._handle_key_event(KeyEvent(KeyType.CTRL, 's', '\x13', is_ctrl=True))
    assert target.read_text(encoding="utf-8") == "hello"
    assert editor.status_message == f"Saved to {target}"
