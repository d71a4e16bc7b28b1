"""Bar fillers: what a bar draws between its decorators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, TextIO


@dataclass
class Statistics:
    """Snapshot of a bar's state handed to fillers and decorators."""

    id: int = 0
    available_width: int = 0
    requested_width: int = 0
    total: int = 0
    current: int = 0
    refill: int = 0
    completed: bool = False
    aborted: bool = False


class BarFiller(ABC):
    """Renders the body of a bar."""

    @abstractmethod
    def fill(self, out: TextIO, stat: Statistics) -> None:
        """Write the rendered filler for ``stat`` to ``out``."""


class FillerFunc(BarFiller):
    """Adapts a plain function to the BarFiller interface."""

    def __init__(self, func: Callable[[TextIO, Statistics], None]) -> None:
        self._func = func

    def fill(self, out: TextIO, stat: Statistics) -> None:
        self._func(out, stat)


def _empty_fill(out: TextIO, stat: Statistics) -> None:
    """Render a zero-width body."""
    out.write("")


class _NopStyle:
    def build(self) -> BarFiller:
        return FillerFunc(_empty_fill)


def nop_style() -> _NopStyle:
    """Return a style whose built filler draws nothing."""
    return _NopStyle()