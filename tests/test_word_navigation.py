"""Test word-wise cursor movement."""

import pytest
from clack.model import TextModel


def create_test_model(text, cursor=0):
    model = TextModel(text=text)
    model.set_cursor(cursor)
    return model


def test_word_right_landings():
    model = create_test_model("hello world test")
    model.move_word_right()
    assert model.cursor_idx == 6
    model.move_word_right()
    assert model.cursor_idx == 12
    model.move_word_right()
    assert model.cursor_idx == 16
    model.move_word_right()  # Already at the end
    assert model.cursor_idx == 16


def test_word_left_landings():
    model = create_test_model("hello world test", 16)
    model.move_word_left()
    assert model.cursor_idx == 12
    model.move_word_left()
    assert model.cursor_idx == 6
    model.move_word_left()
    assert model.cursor_idx == 0
    model.move_word_left()  # Already at the start
    assert model.cursor_idx == 0


def test_word_left_from_middle_of_word():
    model = create_test_model("hello world", 8)
    model.move_word_left()
    assert model.cursor_idx == 6


def test_word_right_from_middle_of_word():
    model = create_test_model("hello world", 2)
    model.move_word_right()
    assert model.cursor_idx == 6


def test_word_right_crosses_lines():
    model = create_test_model("one\n  two", 0)
    model.move_word_right()
    assert model.cursor_idx == 6
    assert model.get_cursor_position() == (2, 1)


def test_word_left_skips_whitespace_runs():
    model = create_test_model("alpha   \n\n  beta", 12)
    model.move_word_left()
    assert model.cursor_idx == 0


@pytest.mark.parametrize("cursor", [0, 3, 6, 9, 12, 16])
def test_word_moves_stay_in_bounds(cursor):
    model = create_test_model("hello world test", cursor)
    model.move_word_right()
    assert 0 <= model.cursor_idx <= 16
    model.move_word_left()
    assert 0 <= model.cursor_idx <= 16
