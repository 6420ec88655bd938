"""Textual application for interactive mode."""

from __future__ import annotations

import logging
from typing import Optional

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from .widgets import ActivityPanel, TaskFormModal, TaskListWidget
from ..config import Config
from ..state.errors import HabitListError, InvalidCursor, NotReady, ValidationError
from ..state.events import (
    EditCancelled,
    EditModeEntered,
    ManagerEvent,
    SaveCompleted,
    SaveFailed,
    TaskDeleted,
    TaskSubmitted,
)
from ..state.manager import TaskListManager
from ..state.store import JsonFileStore
from ..state.tasks import TaskPayload

logger = logging.getLogger(__name__)


class HabitListApp(App):
    """Daily habit tracker TUI."""

    TITLE = "Daily Habit Tracker"
    SUB_TITLE = "Build better habits, one day at a time"

    CSS = """
    Screen {
        layout: grid;
        grid-size: 1 2;
        grid-rows: 3fr 1fr;
    }

    #task-list-widget {
        border: tall $primary;
        padding: 0 1;
    }

    #activity-panel {
        border: tall $primary;
        padding: 0;
        overflow-y: auto;
    }
    """

    BINDINGS = [
        Binding("n", "new_task", "New Task"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: Optional[Config] = None,
        manager: Optional[TaskListManager] = None,
        *args,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.config = config if config is not None else Config()
        if manager is None:
            manager = TaskListManager(
                JsonFileStore(self.config.store_path),
                key=self.config.store_key,
                date_format=self.config.date_format,
            )
        self.manager = manager
        self._unsubscribe = self.manager.subscribe(self._handle_manager_event)

    def compose(self) -> ComposeResult:
        yield Header()
        self.task_list = TaskListWidget(date_format=self.manager.date_format, id="task-list-widget")
        self.activity = ActivityPanel(id="activity-panel")
        yield self.task_list
        yield self.activity
        yield Footer()

    async def on_mount(self) -> None:
        result = await self.manager.initialize()
        self._refresh_tasks()
        if result.warning is not None:
            self.activity.write_warning(f"Failed to load tasks: {escape(str(result.warning))}")
            self.notify(
                "Saved tasks could not be loaded; starting with an empty list.",
                title="Error",
                severity="error",
            )
        else:
            self.activity.write_line(f"Loaded {len(result.tasks)} task(s)")
        self.task_list.query_one("#task-list-view").focus()

    # ------------------------------------------------------------------ #
    # Manager events
    # ------------------------------------------------------------------ #
    def _handle_manager_event(self, event: ManagerEvent) -> None:
        if isinstance(event, EditModeEntered):
            self.notify("Make your changes and click Update", title="Edit Mode! ✏️", timeout=2)
            self.activity.write_line(f"Editing: {escape(event.task.description)}")
        elif isinstance(event, EditCancelled):
            self.activity.write_line("Edit cancelled", style="dim")
        elif isinstance(event, TaskSubmitted):
            verb = "Added" if event.created else "Updated"
            self.activity.write_success(f"{verb}: {escape(event.task.description)}")
        elif isinstance(event, TaskDeleted):
            self.notify(
                f'"{event.task.description}" has been removed',
                title="Task Deleted! 🗑️",
                severity="warning",
                timeout=2.5,
            )
            self.activity.write_line(f"Deleted: {escape(event.task.description)}", style="red")
        elif isinstance(event, SaveFailed):
            self.notify("Failed to save tasks. Please try again.", title="Error", severity="error")
            self.activity.write_error(escape(str(event.error)))
        elif isinstance(event, SaveCompleted):
            logger.debug("Save #%d completed (%d tasks)", event.generation, event.count)

        if not isinstance(event, (SaveCompleted, SaveFailed)):
            self._refresh_tasks()

    def _refresh_tasks(self) -> None:
        self.task_list.update_tasks(self.manager.tasks, editing_index=self.manager.edit_cursor)

    def _report(self, exc: HabitListError) -> None:
        if isinstance(exc, NotReady):
            self.notify("Still loading your tasks, try again in a moment.", severity="warning")
        elif isinstance(exc, InvalidCursor):
            self.manager.cancel_edit()
            self.notify("That task no longer exists.", severity="warning")
        elif isinstance(exc, ValidationError):
            self.notify(str(exc), title="Oops!", severity="error")
        else:
            self.notify(str(exc), title="Error", severity="error")
        self._refresh_tasks()

    # ------------------------------------------------------------------ #
    # Widget messages / actions
    # ------------------------------------------------------------------ #
    def on_task_list_widget_new_task_requested(self, event: TaskListWidget.NewTaskRequested) -> None:
        self.action_new_task()

    def on_task_list_widget_edit_requested(self, event: TaskListWidget.EditRequested) -> None:
        self.run_worker(self._edit_task(event.index), exclusive=True)

    def on_task_list_widget_delete_requested(self, event: TaskListWidget.DeleteRequested) -> None:
        try:
            self.manager.delete(event.index)
        except HabitListError as exc:
            self._report(exc)

    def action_new_task(self) -> None:
        """Show the form for a new task."""
        self.run_worker(self._new_task(), exclusive=True)

    async def action_quit(self) -> None:
        """Wait for pending saves, then exit."""
        await self.manager.flush()
        self._unsubscribe()
        self.exit()

    async def _new_task(self) -> None:
        if not self.manager.ready:
            self._report(NotReady("Tasks have not finished loading yet"))
            return
        payload = await self.push_screen_wait(TaskFormModal(self.manager.date_format))
        if payload is not None:
            self._submit(payload, None)

    async def _edit_task(self, index: int) -> None:
        try:
            task = self.manager.begin_edit(index)
        except HabitListError as exc:
            self._report(exc)
            return

        payload = await self.push_screen_wait(TaskFormModal(self.manager.date_format, task=task))
        if payload is None:
            self.manager.cancel_edit()
            return
        self._submit(payload, index)

    def _submit(self, payload: TaskPayload, cursor: Optional[int]) -> None:
        try:
            self.manager.submit(payload, cursor)
        except HabitListError as exc:
            self._report(exc)
