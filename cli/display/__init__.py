"""Display module for rendering schedule output.

- ScheduleRenderer: Rich-based agenda, booking and month views
- console: Shared Rich console instance
- Formatting functions for day labels and time ranges
"""

from cli.display.console import console
from cli.display.formatters import format_day_label, format_time_range, kind_style
from cli.display.rich_renderer import ScheduleRenderer

__all__ = [
    "console",
    "ScheduleRenderer",
    "format_day_label",
    "format_time_range",
    "kind_style",
]
