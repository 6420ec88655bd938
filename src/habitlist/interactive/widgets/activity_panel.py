"""Activity panel listing what happened to the task list this session."""

from __future__ import annotations

from datetime import datetime

from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import RichLog


class ActivityPanel(Widget):
    """Scrolling log of task events and storage warnings."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.border_title = "Activity"

    def compose(self) -> ComposeResult:
        yield RichLog(id="activity-log", highlight=False, markup=True, auto_scroll=True)

    def write_line(self, text: str, style: str | None = None) -> None:
        log = self.query_one("#activity-log", RichLog)
        stamp = datetime.now().strftime("%H:%M:%S")
        if style:
            log.write(f"[dim]{stamp}[/dim] [{style}]{text}[/{style}]")
        else:
            log.write(f"[dim]{stamp}[/dim] {text}")

    def write_error(self, error: str) -> None:
        self.write_line(f"ERROR: {error}", style="bold red")

    def write_success(self, message: str) -> None:
        self.write_line(f"✓ {message}", style="bold green")

    def write_warning(self, message: str) -> None:
        self.write_line(f"⚠ {message}", style="bold yellow")
