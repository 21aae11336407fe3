"""Test typing characters and the margin stop."""

from clack.config import TypewriterConfig
from clack.model import TextModel, InsertResult


def create_test_model(text="", **config):
    """Create a test model with the given content and typewriter settings."""
    return TextModel(TypewriterConfig(**config), text=text)


def test_insert_advances_cursor():
    model = create_test_model()
    for ch in "hello":
        assert model.insert_char(ch) == InsertResult.INSERTED
    assert model.text == "hello"
    assert model.cursor_idx == 5
    assert model.has_unsaved_changes


def test_insert_in_middle():
    model = create_test_model("helo")
    model.set_cursor(3)
    model.insert_char("l")
    assert model.text == "hello"
    assert model.cursor_idx == 4


def test_margin_warning_on_reaching_bell_column():
    model = create_test_model()
    for _ in range(71):
        assert model.insert_char("x") == InsertResult.INSERTED
    # The 72nd character is accepted but rings the bell
    assert model.insert_char("x") == InsertResult.MARGIN_WARNING
    assert len(model.text) == 72


def test_margin_blocks_past_bell_column():
    model = create_test_model("x" * 72)
    model.set_cursor(72)
    revision = model.revision

    assert model.insert_char("y") == InsertResult.MARGIN_BLOCKED
    assert model.text == "x" * 72
    assert model.cursor_idx == 72
    assert model.revision == revision
    assert not model.has_unsaved_changes


def test_margin_counts_the_line_terminator():
    # "abc\n" is four characters long with its terminator
    model = create_test_model("abc\nz", bell_column=5)
    model.set_cursor(3)
    assert model.insert_char("d") == InsertResult.MARGIN_WARNING
    assert model.insert_char("e") == InsertResult.MARGIN_BLOCKED
    assert model.text == "abcd\nz"


def test_margin_is_per_line():
    model = create_test_model(bell_column=3)
    for ch in "abc":
        model.insert_char(ch)
    assert model.insert_char("d") == InsertResult.MARGIN_BLOCKED
    model.enter_key()
    assert model.insert_char("d") == InsertResult.INSERTED
    assert model.text == "abc\nd"


def test_enter_ignores_margin():
    model = create_test_model("x" * 72)
    model.set_cursor(72)
    model.enter_key()
    assert model.text == "x" * 72 + "\n"
    assert model.cursor_idx == 73
    assert model.get_cursor_position() == (0, 1)


def test_enter_splits_line():
    model = create_test_model("hello world")
    model.set_cursor(5)
    model.enter_key()
    assert model.text == "hello\n world"
    assert model.get_cursor_position() == (0, 1)


def test_cursor_stays_in_bounds_through_edits():
    model = create_test_model()
    script = "ab\ncd" + "\b" * 7 + "xyz\n\b\bq"
    for ch in script:
        if ch == "\b":
            model.delete_char()
        elif ch == "\n":
            model.enter_key()
        else:
            model.insert_char(ch)
        assert 0 <= model.cursor_idx <= len(model.document)
    assert model.text == "xyq"
    assert model.cursor_idx == 3


def test_from_text_starts_clean():
    model = TextModel.from_text("loaded\ncontent")
    assert model.cursor_idx == 0
    assert not model.has_unsaved_changes
    assert model.last_page_number == 1
