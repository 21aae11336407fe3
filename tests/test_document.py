"""Test the line-indexed document storage."""

import pytest
from clack.document import Document


def test_empty_document_has_one_line():
    doc = Document()
    assert len(doc) == 0
    assert doc.len_lines() == 1
    assert doc.line(0) == ""
    assert doc.char_to_line(0) == 0
    assert doc.line_to_char(0) == 0


def test_last_line_has_no_terminator():
    doc = Document("one\ntwo\n")
    assert doc.len_lines() == 3
    assert doc.line(0) == "one\n"
    assert doc.line(1) == "two\n"
    assert doc.line(2) == ""
    assert doc.line_len(0) == 4
    assert doc.line_content_len(0) == 3
    assert doc.line_len(2) == 0


def test_char_to_line_terminator_belongs_to_its_line():
    doc = Document("ab\ncd")
    assert doc.char_to_line(0) == 0
    assert doc.char_to_line(2) == 0  # On the terminator
    assert doc.char_to_line(3) == 1
    assert doc.char_to_line(5) == 1  # One past the end


def test_line_to_char():
    doc = Document("ab\ncde\n\nf")
    assert [doc.line_to_char(row) for row in range(doc.len_lines() + 1)] == [0, 3, 7, 8, 9]


def test_char_lookup():
    doc = Document("ab\ncd")
    assert doc.char(1) == "b"
    assert doc.char(2) == "\n"
    assert doc.char(4) == "d"
    with pytest.raises(IndexError):
        doc.char(5)


def test_insert_within_line_updates_index():
    doc = Document("hello\nworld")
    doc.insert(5, "!!")
    assert str(doc) == "hello!!\nworld"
    assert doc.line_to_char(1) == 8
    assert doc.char_to_line(8) == 1
    assert len(doc) == 13


def test_insert_terminator_splits_line():
    doc = Document("hello world")
    doc.insert_char(5, "\n")
    assert doc.len_lines() == 2
    assert doc.line(0) == "hello\n"
    assert doc.line(1) == " world"
    assert doc.char_to_line(6) == 1


def test_insert_multiline_text():
    doc = Document("ac")
    doc.insert(1, "1\n2\n3")
    assert str(doc) == "a1\n2\n3c"
    assert doc.len_lines() == 3
    assert doc.line_to_char(2) == 5


def test_remove_within_line():
    doc = Document("hello\nworld")
    doc.remove(1, 3)
    assert str(doc) == "hlo\nworld"
    assert doc.line_to_char(1) == 4


def test_remove_terminator_joins_lines():
    doc = Document("ab\ncd")
    doc.remove(2, 3)
    assert str(doc) == "abcd"
    assert doc.len_lines() == 1


def test_remove_across_several_lines():
    doc = Document("one\ntwo\nthree")
    doc.remove(2, 10)
    assert str(doc) == "onree"
    assert doc.len_lines() == 1


def test_out_of_range_offsets_raise():
    doc = Document("abc")
    with pytest.raises(IndexError):
        doc.insert(4, "x")
    with pytest.raises(IndexError):
        doc.remove(0, 5)
    with pytest.raises(IndexError):
        doc.char_to_line(-1)
    with pytest.raises(IndexError):
        doc.line_to_char(2)


def test_chunks_round_trip_exactly():
    text = "first\r\nsecond\n\nlast line"
    doc = Document(text)
    assert "".join(doc.chunks()) == text


def test_many_edits_keep_index_consistent():
    doc = Document()
    expected = ""
    for i in range(200):
        ch = "\n" if i % 7 == 0 else chr(ord("a") + i % 26)
        pos = (i * 31) % (len(expected) + 1)
        doc.insert_char(pos, ch)
        expected = expected[:pos] + ch + expected[pos:]
        if i % 5 == 0 and expected:
            cut = (i * 17) % len(expected)
            doc.remove(cut, cut + 1)
            expected = expected[:cut] + expected[cut + 1:]

    assert str(doc) == expected
    lines = expected.split("\n")
    start = 0
    for row, line in enumerate(lines):
        assert doc.line_to_char(row) == start
        assert doc.char_to_line(start) == row
        start += len(line) + 1
