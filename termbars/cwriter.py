"""Console writer that redraws its previous output in place."""

from __future__ import annotations

import io
import os
from typing import TextIO

_ESC_OPEN = "\x1b["
_CUU_AND_ED = "A\x1b[J"


class NotTTYError(OSError):
    """Raised when a terminal operation is asked of something that is not one."""

    def __init__(self, message: str = "not a terminal") -> None:
        super().__init__(message)


def cursor_up_and_erase(lines: int) -> str:
    """Return the escape sequence moving the cursor up and erasing below it."""
    return f"{_ESC_OPEN}{lines}{_CUU_AND_ED}"


def get_size(fd: int) -> tuple[int, int]:
    """Return the (width, height) of the terminal behind ``fd``."""
    size = os.get_terminal_size(fd)
    return size.columns, size.lines


def is_terminal(fd: int) -> bool:
    """Report whether ``fd`` refers to a terminal."""
    try:
        return os.isatty(fd)
    except (OSError, ValueError):
        return False


class Writer:
    """Buffered writer that moves the cursor up over the previous flush.

    Each flush writes the buffered text and then queues a cursor-up-and-erase
    sequence for the given number of lines, so the next flush overwrites it.
    """

    def __init__(self, out: TextIO) -> None:
        self._out = out
        self._buffer = io.StringIO()
        try:
            fd = out.fileno()
        except (AttributeError, OSError, ValueError):
            fd = -1
        self._fd = fd
        self._terminal = fd >= 0 and is_terminal(fd)

    def write(self, data: str) -> int:
        """Buffer ``data`` until the next flush."""
        return self._buffer.write(data)

    def is_terminal(self) -> bool:
        """Report whether the underlying output is a terminal."""
        return self._terminal

    def get_term_size(self) -> tuple[int, int]:
        """Return the (width, height) of the underlying terminal."""
        if not self._terminal:
            raise NotTTYError()
        return get_size(self._fd)

    def flush(self, lines: int) -> None:
        """Write out the buffer; the caller passes the number of lines written."""
        data = self._buffer.getvalue()
        self._buffer = io.StringIO()
        self._out.write(data)
        flush = getattr(self._out, "flush", None)
        if flush is not None:
            flush()
        # some terminals interpret 'cursor up 0' as 'cursor up 1'
        if lines > 0:
            self._buffer.write(cursor_up_and_erase(lines))