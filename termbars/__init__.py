"""Terminal progress bars: fillers, spinner and bar styles, bar options, bars and a console writer."""

__version__ = "0.1.0"

__all__ = ["bar", "bar_style", "cwriter", "filler", "options", "spinner_style"]