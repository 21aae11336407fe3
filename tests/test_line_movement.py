"""Test character, line and vertical cursor movement."""

from clack.model import TextModel


def create_test_model(text, cursor=0):
    model = TextModel(text=text)
    model.set_cursor(cursor)
    return model


def test_left_right_at_boundaries():
    model = create_test_model("ab")
    model.move_left()
    assert model.cursor_idx == 0
    model.move_right()
    model.move_right()
    model.move_right()
    assert model.cursor_idx == 2


def test_cursor_position_on_terminator():
    model = create_test_model("ab\ncd", 2)
    assert model.get_cursor_position() == (2, 0)
    model.move_right()
    assert model.get_cursor_position() == (0, 1)


def test_move_down_preserves_column():
    model = create_test_model("hello\nworld", 3)
    model.move_cursor_down()
    assert model.get_cursor_position() == (3, 1)


def test_move_down_clamps_to_shorter_line():
    model = create_test_model("hello world\nhi\nlast", 9)
    model.move_cursor_down()
    # Clamped before the terminator of "hi\n"
    assert model.get_cursor_position() == (2, 1)
    assert model.cursor_idx == 14


def test_move_up_clamps_to_shorter_line():
    model = create_test_model("ab\nlonger line", 10)
    model.move_cursor_up()
    assert model.get_cursor_position() == (2, 0)


def test_vertical_moves_at_boundaries_are_noops():
    model = create_test_model("one\ntwo", 1)
    model.move_cursor_up()
    assert model.cursor_idx == 1
    model.set_cursor(5)
    assert model.move_cursor_down() is False
    assert model.cursor_idx == 5


def test_line_start_and_end():
    model = create_test_model("first\nsecond\nthird", 9)
    model.move_to_line_start()
    assert model.cursor_idx == 6
    model.move_to_line_end()
    # Lands just before the terminator
    assert model.cursor_idx == 12
    assert model.get_cursor_position() == (6, 1)


def test_line_end_on_last_line():
    model = create_test_model("first\nlast", 6)
    model.move_to_line_end()
    assert model.cursor_idx == 10


def test_set_cursor_is_clamped():
    model = create_test_model("abc")
    model.set_cursor(100)
    assert model.cursor_idx == 3
    model.set_cursor(-4)
    assert model.cursor_idx == 0


def test_navigation_does_not_mark_modified():
    model = create_test_model("one\ntwo")
    model.move_cursor_down()
    model.move_word_right()
    model.move_to_line_end()
    assert not model.has_unsaved_changes
