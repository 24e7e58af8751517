"""
SysInventory Console Formatter
Renders report sections with rich. Severity arrives on the data; this module only maps it to a style.
"""
from datetime import timedelta
from typing import Any, Iterable, NamedTuple, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from sysinventory.core.exceptions import FailureKind
from sysinventory.core.schemas import ReportOutcome, Severity

SEVERITY_STYLES = {
    Severity.OK: "bold green",
    Severity.CAUTION: "bold yellow",
    Severity.CRITICAL: "bold red",
}

FAILURE_LABELS = {
    FailureKind.PERMISSION_DENIED: "permission denied",
    FailureKind.INTERFACE_UNAVAILABLE: "interface unavailable",
    FailureKind.ERROR: "collector failed",
}

BYTE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


class Flagged(NamedTuple):
    """A value a collector marked as noteworthy."""
    value: Any
    severity: Severity


def format_bytes(n: Optional[float]) -> str:
    """Binary units (1 KB = 1024 B), two decimals."""
    if n is None:
        return "unknown"
    value = float(n)
    for unit in BYTE_UNITS:
        if abs(value) < 1024 or unit == BYTE_UNITS[-1]:
            return f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} {BYTE_UNITS[-1]}"


def format_percent(value: Optional[float]) -> str:
    return "unknown" if value is None else f"{value:.2f}%"


def format_duration(delta: timedelta) -> str:
    total = int(delta.total_seconds())
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{days}d {hours:02d}h {minutes:02d}m {seconds:02d}s"


class ReportFormatter:
    """Streams titled sections to the console as key/value lists or tables."""

    def __init__(self, console: Optional[Console] = None, color: bool = True):
        self.color = color
        self.console = console or Console(no_color=not color, highlight=False, soft_wrap=False)

    def _cell(self, cell: Any) -> Text:
        if isinstance(cell, Flagged):
            text = "" if cell.value is None else str(cell.value)
            if cell.severity in (Severity.CAUTION, Severity.CRITICAL):
                text = f"{text} [{cell.severity.value.upper()}]"
            return Text(text, style=SEVERITY_STYLES[cell.severity] if self.color else "")
        return Text("" if cell is None else str(cell))

    def banner(self, host: str, timestamp: str) -> None:
        self.console.print(Text(f"System Inventory Report - {host} - {timestamp}", style="bold cyan"))

    def key_values(self, title: str, rows: Iterable[Tuple[str, Any]]) -> None:
        table = Table(box=box.SIMPLE_HEAVY, title=title, title_justify="left", show_header=False)
        table.add_column("Field", style="bold", overflow="fold", no_wrap=False)
        table.add_column("Value", overflow="fold", no_wrap=False)
        for label, value in rows:
            table.add_row(label, self._cell(value))
        self.console.print(table)

    def table(self, title: str, columns: Sequence[str], rows: Iterable[Sequence[Any]],
              empty_message: str = "(none)") -> None:
        rows = list(rows)
        if not rows:
            self.console.print(Text(f"{title}: {empty_message}", style="bold"))
            return
        table = Table(box=box.SIMPLE_HEAVY, title=title, title_justify="left")
        for name in columns:
            table.add_column(name, overflow="fold", no_wrap=False)
        for row in rows:
            table.add_row(*(self._cell(cell) for cell in row))
        self.console.print(table)

    def section_failed(self, title: str, kind: FailureKind, reason: str) -> None:
        self.console.print(Text(f"[!] {title}: {FAILURE_LABELS[kind]} ({reason})",
                                style="bold yellow" if self.color else ""))

    def summary(self, outcome: ReportOutcome) -> None:
        if outcome.status == "complete":
            self.console.print(Text(f"Report complete: {len(outcome.succeeded)} sections collected.",
                                    style="bold green" if self.color else ""))
            return
        label = "Partial failure" if outcome.status == "partial" else "Total failure"
        names = ", ".join(f.title for f in outcome.failed)
        self.console.print(Text(
            f"{label}: {len(outcome.failed)} of {len(outcome.failed) + len(outcome.succeeded)} sections failed ({names})",
            style="bold red" if self.color else "",
        ))
