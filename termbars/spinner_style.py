"""Spinner filler: one animated frame placed within the bar's width."""

from __future__ import annotations

import copy
import enum
from typing import Callable, Optional, Sequence, TextIO

from wcwidth import wcswidth, wcwidth

from termbars.bar_style import check_requested_width
from termbars.filler import BarFiller, Statistics

Meta = Callable[[str], str]

_DEFAULT_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")


def _text_width(text: str) -> int:
    width = wcswidth(text)
    if width >= 0:
        return width
    return sum(max(wcwidth(char), 0) for char in text)


class SpinnerPosition(enum.Enum):
    """Where the spinner frame sits within the available width."""

    MIDDLE = 0
    LEFT = 1
    RIGHT = 2


class SpinnerStyle:
    """Immutable builder of a spinner filler."""

    def __init__(self, *frames: str) -> None:
        self._frames: tuple[str, ...] = tuple(frames) if frames else _DEFAULT_FRAMES
        self._position = SpinnerPosition.MIDDLE
        self._meta: Optional[Meta] = None

    def _clone(self) -> SpinnerStyle:
        return copy.copy(self)

    def position_left(self) -> SpinnerStyle:
        clone = self._clone()
        clone._position = SpinnerPosition.LEFT
        return clone

    def position_right(self) -> SpinnerStyle:
        clone = self._clone()
        clone._position = SpinnerPosition.RIGHT
        return clone

    def meta(self, fn: Meta) -> SpinnerStyle:
        clone = self._clone()
        clone._meta = fn
        return clone

    def build(self) -> SpinnerFiller:
        return SpinnerFiller(self._frames, self._meta, self._position)


class SpinnerFiller(BarFiller):
    """Filler built by SpinnerStyle; advances one frame per render."""

    def __init__(
        self,
        frames: Sequence[str],
        meta: Optional[Meta] = None,
        position: SpinnerPosition = SpinnerPosition.MIDDLE,
    ) -> None:
        if not frames:
            raise ValueError("at least one spinner frame is required")
        self._frames = list(frames)
        self._meta = meta
        self._position = position
        self._count = 0

    def _place(self, frame: str, pad: int) -> str:
        if self._position is SpinnerPosition.LEFT:
            return frame + " " * pad
        if self._position is SpinnerPosition.RIGHT:
            return " " * pad + frame
        return " " * (pad // 2) + frame + " " * (pad // 2 + pad % 2)

    def fill(self, out: TextIO, stat: Statistics) -> None:
        width = check_requested_width(stat.requested_width, stat.available_width)
        frame = self._frames[self._count % len(self._frames)]
        frame_width = _text_width(frame)
        self._count += 1
        if width < frame_width:
            return
        shown = self._meta(frame) if self._meta is not None else frame
        out.write(self._place(shown, width - frame_width))