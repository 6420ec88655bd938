"""Task list widget for interactive mode."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Label, ListItem, ListView

from ...state.tasks import DEFAULT_DATE_FORMAT, Task


class TaskListWidget(Widget):
    """Widget displaying the task list in storage order."""

    DEFAULT_CSS = """
    TaskListWidget Vertical {
        height: 100%;
    }

    TaskListWidget Button {
        width: 100%;
        margin: 0 0 1 0;
    }

    TaskListWidget ListView {
        height: 1fr;
    }

    TaskListWidget #empty-state {
        width: 100%;
        content-align: center middle;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("e", "edit_selected", "Edit"),
        Binding("d", "delete_selected", "Delete"),
    ]

    def __init__(self, *args, date_format: str = DEFAULT_DATE_FORMAT, **kwargs):
        super().__init__(*args, **kwargs)
        self.date_format = date_format
        self.tasks: Tuple[Task, ...] = ()
        self.editing_index: Optional[int] = None
        self.border_title = "📋 Your Tasks (0)"

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Button("➕ Add Task", variant="success", id="new-task-button")
            yield Label("🎯 No tasks yet! Add your first task to get started", id="empty-state")
            yield ListView(id="task-list-view")

    def update_tasks(self, tasks: Sequence[Task], editing_index: Optional[int] = None) -> None:
        self.tasks = tuple(tasks)
        self.editing_index = editing_index
        self.border_title = f"📋 Your Tasks ({len(self.tasks)})"

        self.query_one("#empty-state", Label).display = not self.tasks

        list_view = self.query_one("#task-list-view", ListView)
        previous = list_view.index
        list_view.clear()
        for index, task in enumerate(self.tasks):
            list_view.append(ListItem(Label(self.render_task(task, index == editing_index))))
        if self.tasks and previous is not None:
            list_view.index = min(previous, len(self.tasks) - 1)

    def render_task(self, task: Task, editing: bool = False) -> Text:
        text = Text()
        text.append(f"{task.priority.icon} ", style=task.priority.color)
        text.append(task.description)
        text.append(f"  📅 {task.formatted_date(self.date_format)}", style="dim")
        text.append(f"  [{task.priority.value}]", style=task.priority.color)
        if editing:
            text.append("  ✏️ editing", style="bold yellow")
            text.stylize("bold underline", 0, len(task.priority.icon) + 1 + len(task.description))
        return text

    @property
    def selected_index(self) -> Optional[int]:
        index = self.query_one("#task-list-view", ListView).index
        if index is None or index >= len(self.tasks):
            return None
        return index

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press for new task."""
        if event.button.id == "new-task-button":
            self.post_message(self.NewTaskRequested())
            event.stop()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Selecting a task opens it for editing."""
        index = event.list_view.index
        if index is not None and index < len(self.tasks):
            self.post_message(self.EditRequested(index))

    def action_edit_selected(self) -> None:
        if self.selected_index is not None:
            self.post_message(self.EditRequested(self.selected_index))

    def action_delete_selected(self) -> None:
        if self.selected_index is not None:
            self.post_message(self.DeleteRequested(self.selected_index))

    class NewTaskRequested(Message):
        """Message sent when new task button is pressed."""

    class EditRequested(Message):
        """Message sent when a task is chosen for editing."""

        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    class DeleteRequested(Message):
        """Message sent when a task should be deleted."""

        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index
