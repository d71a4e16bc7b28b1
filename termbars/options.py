"""Options that alter the behaviour of a bar or of a bar container.

A bar option is a callable applied to a bar's state. The state is expected
to carry these attributes: ``id``, ``priority``, ``req_width``,
``decorators`` (a two-item list: left and right decorator lists),
``ewma_decorators``, ``filler``, ``extender``, ``wait_bar``,
``rm_on_complete``, ``trim_space`` and ``no_pop``.

A container option is a callable applied to a :class:`ContainerSettings`.
"""

from __future__ import annotations

import io
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence, TextIO

from termbars.filler import BarFiller, FillerFunc, Statistics

BarOption = Callable[[Any], None]
ContainerOption = Callable[["ContainerSettings"], None]
Extender = Callable[..., list]

DEFAULT_REFRESH_RATE = 0.15
DEFAULT_QUEUE_LEN = 128


class _Discard(io.TextIOBase):
    """Text sink that drops everything written to it."""

    def writable(self) -> bool:
        return True

    def write(self, data: str) -> int:
        return len(data)


def _unwrap(decorator: Any) -> Any:
    while callable(getattr(decorator, "unwrap", None)):
        decorator = decorator.unwrap()
    return decorator


def _is_ewma(decorator: Any) -> bool:
    return callable(getattr(_unwrap(decorator), "ewma_update", None))


def _inspect(decorators: Iterable[Any]) -> list:
    return [d for d in decorators if d is not None]


def _set_decorators(side: int, decorators: Sequence[Any]) -> BarOption:
    chosen = _inspect(decorators)

    def option(state: Any) -> None:
        state.ewma_decorators.extend(_unwrap(d) for d in chosen if _is_ewma(d))
        state.decorators[side] = list(chosen)

    return option


def prepend_decorators(*args: Any) -> BarOption:
    """Place decorators on the bar's left side; ``None`` entries are skipped."""
    return _set_decorators(0, args)


def append_decorators(*args: Any) -> BarOption:
    """Place decorators on the bar's right side; ``None`` entries are skipped."""
    return _set_decorators(1, args)


def bar_id(id: int) -> BarOption:
    """Set the bar's id."""

    def option(state: Any) -> None:
        state.id = id

    return option


def bar_width(width: int) -> BarOption:
    """Set the bar's width independently of its container."""

    def option(state: Any) -> None:
        state.req_width = width

    return option


def bar_queue_after(bar: Any) -> BarOption:
    """Queue the bar being built after ``bar``; it takes its place once done."""

    def option(state: Any) -> None:
        state.wait_bar = bar

    return option


def bar_remove_on_complete() -> BarOption:
    """Remove both the filler and the decorators on completion."""

    def option(state: Any) -> None:
        state.rm_on_complete = True

    return option


def bar_filler_clear_on_complete() -> BarOption:
    """Clear the filler on completion."""
    return bar_filler_on_complete("")


def bar_filler_on_complete(message: str) -> BarOption:
    """Replace the filler with ``message`` on completion."""

    def middle(base: BarFiller) -> BarFiller:
        def fill(out: TextIO, stat: Statistics) -> None:
            if stat.completed:
                out.write(message)
            else:
                base.fill(out, stat)

        return FillerFunc(fill)

    return bar_filler_middleware(middle)


def bar_filler_middleware(
    middle: Optional[Callable[[BarFiller], BarFiller]],
) -> Optional[BarOption]:
    """Wrap the bar's current filler with ``middle``; ``None`` gives no option."""
    if middle is None:
        return None

    def option(state: Any) -> None:
        state.filler = middle(state.filler)

    return option


def bar_priority(priority: int) -> BarOption:
    """Set the bar's priority; zero is the highest and puts the bar on top."""

    def option(state: Any) -> None:
        state.priority = priority

    return option


def bar_extender(filler: Optional[BarFiller], rev: bool) -> Optional[BarOption]:
    """Extend the bar with the lines ``filler`` writes, above it when ``rev``."""
    if filler is None:
        return None
    extender = make_extender(filler, rev)

    def option(state: Any) -> None:
        state.extender = extender

    return option


def make_extender(filler: BarFiller, rev: bool) -> Extender:
    """Build a function appending the complete lines ``filler`` writes to the rows.

    A trailing line without a newline is dropped. With ``rev`` the resulting
    rows, the given ones included, come out in reverse order.
    """

    def extend(stat: Statistics, *rows: str) -> list:
        buffer = io.StringIO()
        filler.fill(buffer, stat)
        result = list(rows)
        result.extend(
            line for line in buffer.getvalue().splitlines(keepends=True) if line.endswith("\n")
        )
        if rev:
            result.reverse()
        return result

    return extend


def bar_filler_trim() -> BarOption:
    """Drop the spaces around the filler."""

    def option(state: Any) -> None:
        state.trim_space = True

    return option


def bar_no_pop() -> BarOption:
    """Keep the bar in place when the container pops completed bars."""

    def option(state: Any) -> None:
        state.no_pop = True

    return option


def bar_optional(option: Optional[BarOption], cond: bool) -> Optional[BarOption]:
    """Return ``option`` only when ``cond`` is true."""
    return option if cond else None


def bar_opt_on(option: Optional[BarOption], predicate: Callable[[], bool]) -> Optional[BarOption]:
    """Return ``option`` only when ``predicate()`` is true."""
    return option if predicate() else None


def bar_func_optional(
    option: Callable[[], Optional[BarOption]], cond: bool
) -> Optional[BarOption]:
    """Call ``option`` and return its result only when ``cond`` is true."""
    return option() if cond else None


def bar_func_opt_on(
    option: Callable[[], Optional[BarOption]], predicate: Callable[[], bool]
) -> Optional[BarOption]:
    """Call ``option`` and return its result only when ``predicate()`` is true."""
    return option() if predicate() else None


@dataclass
class ContainerSettings:
    """Settings of a bar container, altered by container options."""

    wait_group: Any = None
    req_width: int = 0
    queue_len: int = DEFAULT_QUEUE_LEN
    refresh_rate: float = DEFAULT_REFRESH_RATE
    manual_refresh: Any = None
    render_delay: Any = None
    shutdown_notifier: Any = None
    output: TextIO = field(default_factory=lambda: sys.stdout)
    debug_output: TextIO = field(default_factory=_Discard)
    auto_refresh: bool = False
    pop_completed: bool = False


def with_wait_group(wg: Any) -> ContainerOption:
    """Join waiting on ``wg`` (any object with ``wait()``) into the container's wait."""

    def option(settings: ContainerSettings) -> None:
        settings.wait_group = wg

    return option


def with_width(width: int) -> ContainerOption:
    """Set the container width, inherited by bars that set none."""

    def option(settings: ContainerSettings) -> None:
        settings.req_width = width

    return option


def with_queue_len(length: int) -> ContainerOption:
    """Set the size of the render queue; ideally the number of bars at once."""

    def option(settings: ContainerSettings) -> None:
        settings.queue_len = length

    return option


def with_refresh_rate(seconds: float) -> ContainerOption:
    """Override the default refresh interval of 0.15 seconds."""

    def option(settings: ContainerSettings) -> None:
        settings.refresh_rate = seconds

    return option


def with_manual_refresh(queue: Any) -> ContainerOption:
    """Refresh only when a value arrives on ``queue``."""

    def option(settings: ContainerSettings) -> None:
        settings.manual_refresh = queue

    return option


def with_render_delay(event: Any) -> ContainerOption:
    """Delay rendering until ``event`` is set."""

    def option(settings: ContainerSettings) -> None:
        settings.render_delay = event

    return option


def with_shutdown_notifier(queue: Any) -> ContainerOption:
    """Put the list of remaining bars on ``queue`` at shutdown."""

    def option(settings: ContainerSettings) -> None:
        settings.shutdown_notifier = queue

    return option


def with_output(out: Optional[TextIO]) -> ContainerOption:
    """Set the output; ``None`` discards everything."""
    target = out if out is not None else _Discard()

    def option(settings: ContainerSettings) -> None:
        settings.output = target

    return option


def with_debug_output(out: Optional[TextIO]) -> ContainerOption:
    """Set the debug output; ``None`` discards everything."""
    target = out if out is not None else _Discard()

    def option(settings: ContainerSettings) -> None:
        settings.debug_output = target

    return option


def with_auto_refresh() -> ContainerOption:
    """Force auto refresh whatever the output is."""

    def option(settings: ContainerSettings) -> None:
        settings.auto_refresh = True

    return option


def pop_completed_mode() -> ContainerOption:
    """Move completed bars to the top and stop rendering them."""

    def option(settings: ContainerSettings) -> None:
        settings.pop_completed = True

    return option


def container_optional(
    option: Optional[ContainerOption], cond: bool
) -> Optional[ContainerOption]:
    """Return ``option`` only when ``cond`` is true."""
    return option if cond else None


def container_opt_on(
    option: Optional[ContainerOption], predicate: Callable[[], bool]
) -> Optional[ContainerOption]:
    """Return ``option`` only when ``predicate()`` is true."""
    return option if predicate() else None


def container_func_optional(
    option: Callable[[], Optional[ContainerOption]], cond: bool
) -> Optional[ContainerOption]:
    """Call ``option`` and return its result only when ``cond`` is true."""
    return option() if cond else None


def container_func_opt_on(
    option: Callable[[], Optional[ContainerOption]], predicate: Callable[[], bool]
) -> Optional[ContainerOption]:
    """Call ``option`` and return its result only when ``predicate()`` is true."""
    return option() if predicate() else None