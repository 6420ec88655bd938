"""Modal for creating or editing a task."""

from __future__ import annotations

from datetime import date
from typing import Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Grid, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select

from ...state.errors import ValidationError
from ...state.tasks import DEFAULT_DATE_FORMAT, Priority, Task, TaskPayload, build_task, format_date


class TaskFormModal(ModalScreen[Optional[TaskPayload]]):
    """Modal form returning a validated TaskPayload, or None when cancelled."""

    DEFAULT_CSS = """
    TaskFormModal {
        align: center middle;
    }

    TaskFormModal > Vertical {
        width: 70;
        height: auto;
        background: $panel;
        border: thick $primary;
        padding: 1 2;
    }

    TaskFormModal #form-title {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        margin-bottom: 1;
    }

    TaskFormModal .field-label {
        margin-top: 1;
        text-style: bold;
    }

    TaskFormModal Grid {
        width: 100%;
        height: auto;
        grid-size: 2;
        grid-gutter: 1;
        margin-top: 1;
    }

    TaskFormModal Button {
        width: 100%;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(
        self,
        date_format: str = DEFAULT_DATE_FORMAT,
        task: Optional[Task] = None,
        today: Optional[date] = None,
    ) -> None:
        super().__init__()
        self.date_format = date_format
        self.editing_task = task
        self.today = today or date.today()

    def compose(self) -> ComposeResult:
        task = self.editing_task
        due = task.due_date if task else self.today
        with Vertical():
            yield Label("✏️ Edit Task" if task else "➕ Add New Task", id="form-title")
            yield Label("Task Description", classes="field-label")
            yield Input(
                value=task.description if task else "",
                placeholder="What do you want to accomplish?",
                id="description-input",
            )
            yield Label("Due Date", classes="field-label")
            yield Input(value=format_date(due, self.date_format), placeholder=self.date_format, id="date-input")
            yield Label("Priority Level", classes="field-label")
            yield Select(
                [(f"{p.icon} {p.value}", p) for p in Priority],
                value=task.priority if task else Priority.CHILL,
                allow_blank=False,
                id="priority-select",
            )
            with Grid():
                yield Button("Cancel", variant="default", id="cancel-button")
                yield Button("🔄 Update Task" if task else "➕ Add Task", variant="primary", id="submit-button")

    def on_mount(self) -> None:
        """Focus the description when mounted."""
        self.query_one("#description-input", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "cancel-button":
            self.dismiss(None)
        elif event.button.id == "submit-button":
            self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _submit(self) -> None:
        payload = TaskPayload(
            description=self.query_one("#description-input", Input).value,
            due_date=self.query_one("#date-input", Input).value,
            priority=self.query_one("#priority-select", Select).value,
        )
        try:
            build_task(payload, self.date_format, today=self.today)
        except ValidationError as exc:
            self.notify(str(exc), title="Oops!", severity="error")
            self.query_one("#description-input", Input).focus()
            return
        self.dismiss(payload)
