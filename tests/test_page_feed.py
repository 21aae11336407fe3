"""Test page numbering and paper feed detection."""

from clack.config import TypewriterConfig
from clack.model import TextModel


def test_current_page_after_enters():
    model = TextModel()
    for _ in range(53):
        model.enter_key()
    assert model.get_current_page() == 1
    model.enter_key()
    assert model.get_current_page() == 2
    for _ in range(54):
        model.enter_key()
    assert model.get_current_page() == 3


def test_page_feed_signals_once_per_page():
    model = TextModel()
    for _ in range(53):
        model.enter_key()
        assert model.check_page_feed() is False

    model.enter_key()
    assert model.check_page_feed() is True
    assert model.last_page_number == 2
    assert model.check_page_feed() is False
    model.insert_char("x")
    assert model.check_page_feed() is False


def test_page_feed_does_not_repeat_after_moving_back():
    model = TextModel(TypewriterConfig(lines_per_page=2))
    for _ in range(2):
        model.enter_key()
    assert model.check_page_feed() is True

    model.set_cursor(0)
    assert model.get_current_page() == 1
    assert model.last_page_number == 2

    model.set_cursor(len(model.document))
    assert model.check_page_feed() is False


def test_move_down_reports_page_crossing():
    model = TextModel(TypewriterConfig(lines_per_page=3), text="a\nb\nc\nd\ne")
    assert model.move_cursor_down() is False
    assert model.move_cursor_down() is False
    assert model.move_cursor_down() is True
    assert model.last_page_number == 2
    # Already raised, so the feed check stays quiet
    assert model.check_page_feed() is False


def test_move_down_reports_revisited_page():
    model = TextModel(TypewriterConfig(lines_per_page=1), text="a\nb")
    assert model.move_cursor_down() is True
    model.move_cursor_up()
    assert model.move_cursor_down() is True
    assert model.last_page_number == 2
