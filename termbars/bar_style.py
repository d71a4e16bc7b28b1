"""The classic bar filler: bounds, filler, tip, padding and refill."""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Optional, TextIO

from wcwidth import wcswidth, wcwidth

from termbars.filler import BarFiller, Statistics

Meta = Callable[[str], str]

_ELLIPSIS = "…"


class _Part(enum.Enum):
    LBOUND = "lbound"
    RBOUND = "rbound"
    REFILLER = "refiller"
    FILLER = "filler"
    TIP = "tip"
    PADDING = "padding"


_DEFAULT_STYLE = {
    _Part.LBOUND: "[",
    _Part.RBOUND: "]",
    _Part.REFILLER: "+",
    _Part.FILLER: "=",
    _Part.TIP: ">",
    _Part.PADDING: "-",
}


def _text_width(text: str) -> int:
    width = wcswidth(text)
    if width >= 0:
        return width
    return sum(max(wcwidth(char), 0) for char in text)


def check_requested_width(requested: int, available: int) -> int:
    """Return the requested width if it fits, otherwise the available one."""
    if requested < 1 or requested > available:
        return available
    return requested


def percentage_round(total: int, current: int, width: int) -> int:
    """Scale ``current`` of ``total`` onto ``width`` columns, rounding half away from zero."""
    if total <= 0:
        return 0
    if current >= total:
        return width
    scaled = width * current
    rounded = (2 * abs(scaled) + total) // (2 * total)
    return rounded if scaled >= 0 else -rounded


@dataclass(frozen=True)
class _Component:
    text: str
    width: int

    @classmethod
    def of(cls, text: str) -> _Component:
        return cls(text, _text_width(text))


def _repeat(component: _Component, limit: int, fill_count: int) -> tuple[str, int]:
    room = limit - fill_count
    if component.width <= 0 or room < component.width:
        return "", fill_count
    count = room // component.width
    return component.text * count, fill_count + count * component.width


class BarStyle:
    """Immutable builder of a bar filler; every setter returns a new style."""

    def __init__(self) -> None:
        self._style: dict[_Part, str] = dict(_DEFAULT_STYLE)
        self._meta: dict[_Part, Meta] = {}
        self._tip_frames: tuple[str, ...] = (_DEFAULT_STYLE[_Part.TIP],)
        self._tip_on_complete = False
        self._reverse = False

    def _clone(self) -> BarStyle:
        clone = copy.copy(self)
        clone._style = dict(self._style)
        clone._meta = dict(self._meta)
        return clone

    def _with_part(self, part: _Part, text: str) -> BarStyle:
        clone = self._clone()
        clone._style[part] = text
        return clone

    def _with_meta(self, part: _Part, fn: Meta) -> BarStyle:
        clone = self._clone()
        clone._meta[part] = fn
        return clone

    def lbound(self, bound: str) -> BarStyle:
        return self._with_part(_Part.LBOUND, bound)

    def lbound_meta(self, fn: Meta) -> BarStyle:
        return self._with_meta(_Part.LBOUND, fn)

    def rbound(self, bound: str) -> BarStyle:
        return self._with_part(_Part.RBOUND, bound)

    def rbound_meta(self, fn: Meta) -> BarStyle:
        return self._with_meta(_Part.RBOUND, fn)

    def filler(self, filler: str) -> BarStyle:
        return self._with_part(_Part.FILLER, filler)

    def filler_meta(self, fn: Meta) -> BarStyle:
        return self._with_meta(_Part.FILLER, fn)

    def refiller(self, refiller: str) -> BarStyle:
        return self._with_part(_Part.REFILLER, refiller)

    def refiller_meta(self, fn: Meta) -> BarStyle:
        return self._with_meta(_Part.REFILLER, fn)

    def padding(self, padding: str) -> BarStyle:
        return self._with_part(_Part.PADDING, padding)

    def padding_meta(self, fn: Meta) -> BarStyle:
        return self._with_meta(_Part.PADDING, fn)

    def tip(self, *args: str) -> BarStyle:
        """Set the tip frames; they cycle on every render. No frames keeps the current ones."""
        clone = self._clone()
        if args:
            clone._tip_frames = tuple(args)
        return clone

    def tip_meta(self, fn: Meta) -> BarStyle:
        return self._with_meta(_Part.TIP, fn)

    def tip_on_complete(self) -> BarStyle:
        clone = self._clone()
        clone._tip_on_complete = True
        return clone

    def reverse(self) -> BarStyle:
        clone = self._clone()
        clone._reverse = True
        return clone

    def build(self) -> BarStyleFiller:
        return BarStyleFiller(
            parts={part: _Component.of(text) for part, text in self._style.items()},
            metas=dict(self._meta),
            tip_frames=[_Component.of(frame) for frame in self._tip_frames],
            tip_on_complete=self._tip_on_complete,
            reverse=self._reverse,
        )


class BarStyleFiller(BarFiller):
    """Filler built by BarStyle."""

    def __init__(
        self,
        parts: Mapping[_Part, _Component],
        metas: Mapping[_Part, Meta],
        tip_frames: Iterable[_Component],
        tip_on_complete: bool = False,
        reverse: bool = False,
    ) -> None:
        self._parts = dict(parts)
        self._metas = dict(metas)
        self._tip_frames = list(tip_frames)
        if not self._tip_frames:
            raise ValueError("at least one tip frame is required")
        self._tip_on_complete = tip_on_complete
        self._reverse = reverse
        self._tip_count = 0

    def _emit(self, out: TextIO, part: _Part, text: str) -> None:
        meta: Optional[Meta] = self._metas.get(part)
        out.write(meta(text) if meta is not None else text)

    def fill(self, out: TextIO, stat: Statistics) -> None:
        lbound = self._parts[_Part.LBOUND]
        rbound = self._parts[_Part.RBOUND]
        width = check_requested_width(stat.requested_width, stat.available_width)
        # brackets don't count as progress
        width -= lbound.width + rbound.width
        if width < 0:
            return

        self._emit(out, _Part.LBOUND, lbound.text)
        if width == 0:
            self._emit(out, _Part.RBOUND, rbound.text)
            return

        tip = filling = refilling = ""
        fill_count = 0
        cur_width = percentage_round(stat.total, stat.current, width)

        if cur_width != 0:
            if not stat.completed or self._tip_on_complete:
                frame = self._tip_frames[self._tip_count % len(self._tip_frames)]
                self._tip_count += 1
                tip = frame.text
                fill_count += frame.width
            ref_width = 0
            if stat.refill != 0:
                ref_width = percentage_round(stat.total, stat.refill, width)
                cur_width -= ref_width
                ref_width += cur_width
            filling, fill_count = _repeat(self._parts[_Part.FILLER], cur_width, fill_count)
            refilling, fill_count = _repeat(self._parts[_Part.REFILLER], ref_width, fill_count)

        padding, fill_count = _repeat(self._parts[_Part.PADDING], width, fill_count)
        ellipsis, fill_count = _repeat(_Component(_ELLIPSIS, 1), width, fill_count)
        padding += ellipsis

        sections = [
            (_Part.REFILLER, refilling),
            (_Part.FILLER, filling),
            (_Part.TIP, tip),
            (_Part.PADDING, padding),
        ]
        if self._reverse:
            sections.reverse()
        for part, text in sections:
            if text:
                self._emit(out, part, text)
        self._emit(out, _Part.RBOUND, rbound.text)