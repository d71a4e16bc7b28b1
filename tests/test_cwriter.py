import io
import os

import pytest

from termbars.cwriter import (
    NotTTYError,
    Writer,
    cursor_up_and_erase,
    get_size,
    is_terminal,
)


def test_cursor_up_and_erase_sequence():
    assert cursor_up_and_erase(99) == "\x1b[99A\x1b[J"


def test_write_is_buffered_until_flush():
    out = io.StringIO()
    writer = Writer(out)
    assert writer.write("hello\n") == 6
    assert out.getvalue() == ""
    writer.flush(1)
    assert out.getvalue() == "hello\n"


def test_flush_defers_cursor_move_to_next_flush():
    out = io.StringIO()
    writer = Writer(out)
    writer.write("one\ntwo\n")
    writer.flush(2)
    assert out.getvalue() == "one\ntwo\n"
    writer.write("three\n")
    writer.flush(1)
    assert out.getvalue() == "one\ntwo\n" + cursor_up_and_erase(2) + "three\n"


def test_flush_with_zero_lines_emits_no_escape():
    out = io.StringIO()
    writer = Writer(out)
    writer.write("a\n")
    writer.flush(0)
    writer.write("b\n")
    writer.flush(0)
    assert out.getvalue() == "a\nb\n"


def test_string_output_is_not_terminal():
    writer = Writer(io.StringIO())
    assert writer.is_terminal() is False
    with pytest.raises(NotTTYError):
        writer.get_term_size()


def test_regular_file_is_not_terminal(tmp_path):
    with open(tmp_path / "out.txt", "w") as handle:
        writer = Writer(handle)
        assert writer.is_terminal() is False
        writer.write("line\n")
        writer.flush(1)
    assert (tmp_path / "out.txt").read_text() == "line\n"


def test_pipe_is_not_terminal():
    read_fd, write_fd = os.pipe()
    try:
        assert is_terminal(read_fd) is False
        with pytest.raises(OSError):
            get_size(read_fd)
    finally:
        os.close(read_fd)
        os.close(write_fd)


def test_term_size_error_is_os_error_with_message():
    writer = Writer(io.StringIO())
    with pytest.raises(OSError, match="not a terminal"):
        writer.get_term_size()