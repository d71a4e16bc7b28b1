# termbars

Building blocks for terminal progress bars. A bar has a filler in the
middle, such as `[===>---]` or a spinner, and decorators on either side.
A console writer redraws the bar's lines in place.

## Modules

- `termbars.cwriter`: a buffered console writer.
  - `Writer(out).write(text)` buffers text.
  - `Writer.flush(lines)` writes the buffer to `out`. When `lines > 0` it
    then queues `cursor_up_and_erase(lines)` at the start of the next
    buffer. The next flush therefore overwrites those lines.
  - `Writer.is_terminal()` tells whether `out` is a terminal.
  - `Writer.get_term_size()` returns `(width, height)`. It raises
    `NotTTYError` when `out` is not a terminal.
  - The module-level `is_terminal(fd)` and `get_size(fd)` work on a file
    descriptor.
- `termbars.filler`:
  - `Statistics`, the snapshot a filler or decorator draws from: `id`,
    `available_width`, `requested_width`, `total`, `current`, `refill`,
    `completed` and `aborted`.
  - The `BarFiller` interface, with `fill(out, stat)`.
  - `FillerFunc`, which adapts a plain function to `BarFiller`.
  - `nop_style()`, whose `build()` gives a filler that draws nothing.
- `termbars.bar_style`: `BarStyle`, the classic bar.
  - Its parts are set with `lbound`, `rbound`, `filler`, `refiller`,
    `padding` and `tip(*frames)`. Several tip frames cycle, one per render.
  - Each part has a matching `*_meta(fn)` hook that wraps the part's text,
    for example in colour codes.
  - `tip_on_complete()` keeps the tip on a finished bar.
  - `reverse()` draws the bar right to left.
  - `build()` returns a `BarStyleFiller`.
  - Widths are measured in terminal cells, so wide characters count as
    two. Space that no whole part fits into is padded with `…`.
  - The helpers `check_requested_width` and `percentage_round` are public.
- `termbars.spinner_style`: `SpinnerStyle(*frames)`, a spinner filler.
  - Braille frames are the default.
  - The frame is centred. `position_left()` and `position_right()` move it
    to either side, and `meta(fn)` wraps the frame.
  - The place is kept as a `SpinnerPosition`.
- `termbars.options`: bar options and container options.
  - Bar options are callables applied to a `BarState`:
    - `prepend_decorators`, `append_decorators`
    - `bar_id`, `bar_width`, `bar_priority`, `bar_queue_after`
    - `bar_remove_on_complete`
    - `bar_filler_on_complete`, `bar_filler_clear_on_complete`
    - `bar_filler_middleware`, `bar_extender`, `make_extender`
    - `bar_filler_trim`, `bar_no_pop`
  - Container options are callables applied to a `ContainerSettings`:
    - `with_width`, `with_output`, `with_debug_output`
    - `with_refresh_rate`, `with_manual_refresh`, `with_auto_refresh`
    - `with_render_delay`, `with_shutdown_notifier`
    - `with_queue_len`, `with_wait_group`
    - `pop_completed_mode`
  - The `bar_optional`, `bar_opt_on`, `bar_func_optional` and
    `bar_func_opt_on` helpers return an option only when a condition
    holds. So do their `container_*` counterparts. Otherwise they return
    `None`.
- `termbars.bar`:
  - `Decorator`, whose `decor(stat)` returns the text and its width.
  - `BarState`. Its `draw(stat)` gives the full line, and `new_statistics`,
    `completed` and `sync_table` are its other methods.
  - `RenderFrame`.
  - The thread-safe `Bar`.
  - `unwrap(decorator)`.

## Driving a bar

```python
import sys

from termbars.bar import Bar, BarState, Decorator
from termbars.bar_style import BarStyle
from termbars.cwriter import Writer
from termbars.options import append_decorators, prepend_decorators


class Label(Decorator):
    def __init__(self, text):
        self.text = text

    def decor(self, stat):
        return self.text, len(self.text)


class Percent(Decorator):
    def decor(self, stat):
        text = f"{stat.current * 100 // max(stat.total, 1)} %"
        return text, len(text)


state = BarState(total=100, filler=BarStyle().tip("<").reverse().build())
prepend_decorators(Label("copy:"))(state)
append_decorators(Percent())(state)
bar = Bar(state)

writer = Writer(sys.stdout)
for _ in range(100):
    bar.increment()
    frame = bar.render(60)
    for row in frame.rows:
        writer.write(row)
    writer.flush(len(frame.rows))
```

### Moving the bar

- `increment()`, `incr_by(n)` and `set_current(current)` move the bar
  forward.
- `ewma_increment(iter_dur)`, `ewma_incr_by(n, iter_dur)` and
  `ewma_set_current(current, iter_dur)` do the same. They also call
  `ewma_update(n, iter_dur)` on the decorators that offer it.

### Totals and completion

- A bar built with a positive total completes once `current` reaches it.
- For a bar whose total is zero or unknown, `set_total(total, complete)`
  sets the total. A negative total means the current value.
- `enable_trigger_complete()` lets such a bar complete on its own. After
  that call, `set_total` has no effect.

### Other controls

- `set_refill(amount)` marks part of the bar as redone. That part is drawn
  with the refiller.
- `abort(drop)` stops a bar that is not yet complete.
- `traverse_decorators(callback)` calls `callback` on every decorator,
  unwrapped.
- `completed()`, `aborted()`, `running()`, `current()` and `id()` report
  on the bar.
- `wait(timeout)` blocks until the bar stops running. It returns `False`
  if the timeout ran out first.

### After the bar stops

Once a bar stops running, further updates are ignored. `render(width)`
still draws it.

By default a bar stops as soon as it completes. If its state has
`auto_refresh` set, it stops only after one more frame has been rendered.
The `on_complete` callback given to `Bar` is called at completion to ask
for that frame.

## What this package does not do

The package has no container that manages many bars together. Nothing in
it:

- keeps a refresh timer,
- orders bars by priority,
- runs queued bars after one another,
- pops completed bars,
- writes all bars to the terminal.

`ContainerSettings` only holds the settings such a container would use.
The rendering loop is yours to write, as in the example above.

There are also no ready-made decorators such as names, percentages,
counters, speed or ETA. Write your own by subclassing `Decorator`.