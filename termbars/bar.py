"""A single progress bar: its state, how it draws and how it is updated.

Decorators are duck-typed beyond :class:`Decorator`. A decorator may offer
``unwrap()`` (it wraps another), ``sync()`` (returns a width-sync channel or
``None``), ``ewma_update(n, iter_dur)`` and ``on_shutdown()``.
"""

from __future__ import annotations

import dataclasses
import io
import re
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from wcwidth import wcswidth, wcwidth

from termbars.bar_style import BarStyle
from termbars.filler import BarFiller, Statistics

_ELLIPSIS = "…"
_ANSI_RE = re.compile(
    "[\u001b\u009b][\\[\\]()#;?]*"
    "(?:(?:(?:[a-zA-Z\\d]*(?:;[a-zA-Z\\d]*)*)?\u0007)"
    "|(?:(?:\\d{1,4}(?:;\\d{0,4})*)?[\\dA-PRZcf-ntqry=><~]))"
)


def _text_width(text: str) -> int:
    width = wcswidth(text)
    if width >= 0:
        return width
    return sum(max(wcwidth(char), 0) for char in text)


def _strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def _truncate(text: str, width: int, tail: str = _ELLIPSIS) -> str:
    if _text_width(text) <= width:
        return text
    limit = width - _text_width(tail)
    kept = []
    used = 0
    for char in text:
        char_width = max(wcwidth(char), 0)
        if used + char_width > limit:
            break
        kept.append(char)
        used += char_width
    return "".join(kept) + tail


def unwrap(decorator: Any) -> Any:
    """Follow ``unwrap()`` through wrapping decorators to the innermost one."""
    while callable(getattr(decorator, "unwrap", None)):
        decorator = decorator.unwrap()
    return decorator


class Decorator(ABC):
    """Produces a piece of text shown beside a bar."""

    @abstractmethod
    def decor(self, stat: Statistics) -> tuple[str, int]:
        """Return the text to show and its width in terminal cells."""


def _no_extension(stat: Statistics, *rows: str) -> list:
    return list(rows)


def _default_filler() -> BarFiller:
    return BarStyle().build()


@dataclass
class BarState:
    """Mutable state of a bar. Completion is triggered on reaching a positive total."""

    total: int = 0
    filler: BarFiller = field(default_factory=_default_filler)
    id: int = 0
    priority: int = 0
    req_width: int = 0
    current: int = 0
    refill: int = 0
    shutdown: int = 0
    trim_space: bool = False
    aborted: bool = False
    trigger_complete: Optional[bool] = None
    rm_on_complete: bool = False
    no_pop: bool = False
    auto_refresh: bool = False
    decorators: list = field(default_factory=lambda: [[], []])
    ewma_decorators: list = field(default_factory=list)
    extender: Callable[..., list] = _no_extension
    wait_bar: Any = None

    def __post_init__(self) -> None:
        if self.trigger_complete is None:
            self.trigger_complete = self.total > 0

    def completed(self) -> bool:
        """Report whether completion was triggered and current reached total."""
        return bool(self.trigger_complete) and self.current == self.total

    def new_statistics(self, width: int) -> Statistics:
        """Snapshot the state for rendering at ``width`` columns."""
        return Statistics(
            id=self.id,
            available_width=width,
            requested_width=self.req_width,
            total=self.total,
            current=self.current,
            refill=self.refill,
            completed=self.completed(),
            aborted=self.aborted,
        )

    def draw(self, stat: Statistics) -> str:
        """Render the bar line, decorators included, ending with a newline."""
        stat = dataclasses.replace(stat)
        sides = []
        for decorators in self.decorators:
            parts = []
            for decorator in decorators:
                # every decorator is called, for the sake of width synchronization
                text, width = decorator.decor(stat)
                room = stat.available_width - width
                if room >= 0:
                    parts.append(text)
                    stat.available_width = room
                elif stat.available_width > 0:
                    parts.append(_truncate(_strip_ansi(text), stat.available_width))
                    stat.available_width = 0
            sides.append("".join(parts))

        space = ""
        if not (self.trim_space or stat.available_width < 2):
            stat.available_width -= 2
            space = " "

        body = io.StringIO()
        self.filler.fill(body, stat)
        return f"{sides[0]}{space}{body.getvalue()}{space}{sides[1]}\n"

    def sync_table(self) -> tuple[list, list]:
        """Return the width-sync channels of the left and right decorators."""
        table = []
        for decorators in self.decorators:
            row = []
            for decorator in decorators:
                sync = getattr(decorator, "sync", None)
                channel = sync() if callable(sync) else None
                if channel is not None:
                    row.append(channel)
            table.append(row)
        return table[0], table[1]


@dataclass
class RenderFrame:
    """One rendered frame of a bar."""

    rows: list = field(default_factory=list)
    shutdown: int = 0
    rm_on_complete: bool = False
    no_pop: bool = False
    error: Optional[Exception] = None


class Bar:
    """A thread-safe progress bar.

    Once the bar completes or is aborted it stops running and further updates
    are ignored. With ``auto_refresh`` set in its state, a completed bar keeps
    running until one more frame has been rendered; ``on_complete`` is then
    called with the bar to ask for that early render.
    """

    def __init__(
        self,
        state: BarState,
        *,
        on_complete: Optional[Callable[["Bar"], None]] = None,
    ) -> None:
        self._state = state
        self.priority = state.priority
        self._lock = threading.RLock()
        self._done = threading.Event()
        self._on_complete = on_complete

    def _cancel(self) -> None:
        with self._lock:
            if self._done.is_set():
                return
            state = self._state
            for decorators in state.decorators:
                for decorator in decorators:
                    listener = getattr(unwrap(decorator), "on_shutdown", None)
                    if callable(listener):
                        listener()
            # a bar may be stopped from outside without abort() being called
            state.aborted = not state.completed()
            self._done.set()

    def _trigger_completion(self) -> None:
        self._state.trigger_complete = True
        if self._state.auto_refresh:
            if self._on_complete is not None:
                self._on_complete(self)
        else:
            self._cancel()

    def _check_complete(self) -> None:
        state = self._state
        if state.trigger_complete and state.current >= state.total:
            state.current = state.total
            self._trigger_completion()

    def id(self) -> int:
        with self._lock:
            return self._state.id

    def current(self) -> int:
        """Return the sum of all increments."""
        with self._lock:
            return self._state.current

    def aborted(self) -> bool:
        with self._lock:
            return self._state.aborted

    def completed(self) -> bool:
        with self._lock:
            return self._state.completed()

    def running(self) -> bool:
        return not self._done.is_set()

    def set_refill(self, amount: int) -> None:
        """Mark ``amount`` (at most current) as refilled, e.g. after a retry."""
        with self._lock:
            if self._done.is_set():
                return
            self._state.refill = min(amount, self._state.current)

    def traverse_decorators(self, callback: Callable[[Any], None]) -> None:
        """Call ``callback`` on every decorator, unwrapped."""
        with self._lock:
            if self._done.is_set():
                return
            for decorators in self._state.decorators:
                for decorator in decorators:
                    callback(unwrap(decorator))

    def enable_trigger_complete(self) -> None:
        """Enable completion; completes right away if current already reached total."""
        with self._lock:
            state = self._state
            if self._done.is_set() or state.trigger_complete:
                return
            if state.current >= state.total:
                state.current = state.total
                self._trigger_completion()
            else:
                state.trigger_complete = True

    def set_total(self, total: int, complete: bool) -> None:
        """Set the total; a negative one means current. No-op once completion is enabled."""
        with self._lock:
            state = self._state
            if self._done.is_set() or state.trigger_complete:
                return
            state.total = state.current if total < 0 else total
            if complete:
                state.current = state.total
                self._trigger_completion()

    def set_current(self, current: int) -> None:
        if current < 0:
            return
        with self._lock:
            if self._done.is_set():
                return
            self._state.current = current
            self._check_complete()

    def increment(self) -> None:
        self.incr_by(1)

    def incr_by(self, n: int) -> None:
        with self._lock:
            if self._done.is_set():
                return
            self._state.current += n
            self._check_complete()

    def ewma_increment(self, iter_dur: Any) -> None:
        self.ewma_incr_by(1, iter_dur)

    def ewma_incr_by(self, n: int, iter_dur: Any) -> None:
        """Increment by ``n`` and feed ``iter_dur`` of one iteration to EWMA decorators."""
        with self._lock:
            if self._done.is_set():
                return
            for decorator in self._state.ewma_decorators:
                decorator.ewma_update(n, iter_dur)
            self._state.current += n
            self._check_complete()

    def ewma_set_current(self, current: int, iter_dur: Any) -> None:
        """Set current and feed the difference to EWMA decorators."""
        if current < 0:
            return
        with self._lock:
            if self._done.is_set():
                return
            n = current - self._state.current
            for decorator in self._state.ewma_decorators:
                decorator.ewma_update(n, iter_dur)
            self._state.current = current
            self._check_complete()

    def abort(self, drop: bool) -> None:
        """Abort unless already complete; ``drop`` removes the bar as well."""
        with self._lock:
            state = self._state
            if self._done.is_set() or state.aborted or state.completed():
                return
            state.aborted = True
            state.rm_on_complete = drop
            self._trigger_completion()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the bar stops running; False if ``timeout`` ran out first."""
        return self._done.wait(timeout)

    def render(self, width: int) -> RenderFrame:
        """Render one frame at ``width`` columns."""
        with self._lock:
            state = self._state
            frame = RenderFrame()
            stat = state.new_statistics(width)
            try:
                line = state.draw(stat)
            except Exception as exc:
                frame.error = exc
                return frame
            try:
                frame.rows = state.extender(stat, line)
            except Exception as exc:
                frame.rows = [line]
                frame.error = exc
            if state.aborted or state.completed():
                frame.shutdown = state.shutdown
                frame.rm_on_complete = state.rm_on_complete
                frame.no_pop = state.no_pop
                # post increment makes sure on-complete decorators get rendered
                state.shutdown += 1
                if state.auto_refresh:
                    self._cancel()
            return frame