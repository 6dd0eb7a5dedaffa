"""Rich-based schedule renderer for terminal display."""

from datetime import date

from rich.console import Console
from rich.table import Table
from rich.text import Text

from cli.display.console import console as shared_console
from cli.display.formatters import format_day_label, format_time_range, kind_style
from schedule_feed.aggregation import CalendarWeek, WeekGroup, group_by_day
from schedule_feed.models.event import EventModel


class ScheduleRenderer:
    """Render schedule views using Rich.

    - Headers: bold
    - Day labels: cyan
    - Times: dim
    - Titles: colored by event kind
    - Locations: dim italic
    """

    def __init__(self, console: Console | None = None):
        self.console = console or shared_console

    def render_agenda(
        self,
        events: list[EventModel],
        title: str | None = None,
        subtitle: str | None = None,
        today: date | None = None,
    ) -> None:
        """Render events grouped by day (agenda view).

        Args:
            events: Events sorted by date and time.
            title: Optional title for the display header.
            subtitle: Optional subtitle (e.g. date range info).
            today: Reference date for relative day labels.
        """
        if not events:
            self.render_empty()
            return

        self._print_header(title, subtitle)
        today = today or date.today()

        for event_date, day_events in group_by_day(events).items():
            self.console.print(f"\n[cyan]{format_day_label(event_date, today)}[/cyan]")
            for event in day_events:
                self._render_agenda_event(event)

        self._print_footer(len(events))

    def render_bookings(self, weeks: list[WeekGroup], title: str | None = None) -> None:
        """Render events nested by ISO week, day and time slot."""
        if not weeks:
            self.render_empty("No bookings found")
            return

        self._print_header(title, None)
        total = 0
        for week in weeks:
            self.console.print(f"\n[bold]{week.key}[/bold]")
            for day in week.days:
                self.console.print(f"  [cyan]{day.date.strftime('%a %Y-%m-%d')}[/cyan]")
                for slot in day.slots:
                    titles = ", ".join(e.title for e in slot.events)
                    line = Text("    ")
                    line.append(f"{slot.label:<16}", style="dim")
                    line.append(titles)
                    self.console.print(line)
                    total += len(slot.events)

        self._print_footer(total)

    def render_month(self, weeks: list[CalendarWeek], title: str | None = None) -> None:
        """Render a month grid with ISO week numbers."""
        table = Table(title=title, show_header=True, header_style="bold", show_lines=True)
        table.add_column("KW", style="dim", justify="right")
        for day_name in ("Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"):
            table.add_column(day_name)

        for week in weeks:
            cells = [str(week.number)]
            for day in week.days:
                cell = Text(str(day.date.day), style="bold" if day.in_month else "dim")
                for event in day.events:
                    cell.append(f"\n{event.start:%H:%M} {event.title}", style=kind_style(event))
                cells.append(cell)
            table.add_row(*cells)

        self.console.print(table)

    def render_empty(self, message: str | None = None) -> None:
        """Render an empty state message."""
        msg = message or "No events found"
        self.console.print(f"\n[dim]{msg}[/dim]\n")

    def _print_header(self, title: str | None, subtitle: str | None) -> None:
        self.console.print()
        self.console.print("━" * 40)
        if title:
            header_text = f"  {title}"
            if subtitle:
                header_text += f" [dim]({subtitle})[/dim]"
            self.console.print(f"[bold]{header_text}[/bold]")
        self.console.print("━" * 40)

    def _print_footer(self, count: int) -> None:
        self.console.print()
        self.console.print("─" * 40)
        event_word = "event" if count == 1 else "events"
        self.console.print(f"[dim]{count} {event_word}[/dim]")
        self.console.print()

    def _render_agenda_event(self, event: EventModel) -> None:
        line = Text()
        line.append("  ")
        line.append(f"{format_time_range(event):<14}", style="dim")
        line.append(event.title, style=kind_style(event))
        line.append(f" [{event.duration_label}]", style="dim")
        if event.location:
            line.append(f" ({event.location})", style="italic dim")
        self.console.print(line)
