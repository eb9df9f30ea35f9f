from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.text import Text

from .models import DetailedRecord, ScheduleKind, ScheduleRecord
from .utils import format_minute


def schedule_text(record: ScheduleRecord) -> Text:
    """
    One record as styled text:

        ○ DETAILED [1a2b3c4d] Dentist
          Time: 2025-02-01 09:30
          Content: Bring insurance card
          Created: 2025-01-20 18:02

    Done records are struck through.
    """
    text = Text()
    if record.is_done:
        text.append("✔", style="green")
    else:
        text.append("○", style="yellow")
    text.append(" ")
    text.append(
        record.kind.value.upper(),
        style="cyan" if record.kind == ScheduleKind.TODO else "magenta",
    )
    text.append(" [")
    text.append(record.id, style="white")
    text.append("] ")
    text.append(record.title, style="bold")

    if isinstance(record, DetailedRecord):
        text.append("\n  ")
        text.append("Time:", style="blue")
        text.append(f" {format_minute(record.date_time)}")
        text.append("\n  ")
        text.append("Content:", style="blue")
        text.append(f" {record.content}")
    text.append("\n  ")
    text.append("Created:", style="blue")
    text.append(f" {format_minute(record.created_at)}")

    if record.is_done:
        text.stylize("strike")
    return text


class Renderer:
    """Terminal output for the CLI: status lines and schedule listings."""

    def __init__(self, color: bool = True, out: Optional[Console] = None, err: Optional[Console] = None) -> None:
        options = dict(no_color=not color, highlight=False, emoji=False, markup=False)
        self.out = out or Console(**options)
        self.err = err or Console(stderr=True, **options)

    def success(self, message: str) -> None:
        self.out.print(Text(f"✅ {message}", style="green"), soft_wrap=True)

    def info(self, message: str, style: str = "blue") -> None:
        self.out.print(Text(message, style=style), soft_wrap=True)

    def warning(self, message: str) -> None:
        self.err.print(Text(f"⚠️ Warning: {message}", style="yellow"), soft_wrap=True)

    def error(self, message: str) -> None:
        self.err.print(Text(f"❌ Error: {message}", style="red"), soft_wrap=True)

    def schedules(self, records: Sequence[ScheduleRecord]) -> None:
        if not records:
            self.info("No schedules to display.")
            return
        for record in records:
            self.out.print(schedule_text(record), soft_wrap=True)
            self.out.print()
