"""habitlist CLI entry point."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, TypeVar

import click

from . import __version__
from .config import Config
from .state.errors import HabitListError
from .state.events import ManagerEvent, SaveFailed
from .state.manager import TaskListManager
from .state.store import JsonFileStore
from .state.tasks import Priority, Task, TaskPayload
from .utils.logger import setup_logging

T = TypeVar("T")

PRIORITY_CHOICES = click.Choice([p.value for p in Priority], case_sensitive=False)


class CliState:
    """Objects shared between subcommands."""

    def __init__(self, config: Config, store_path: Optional[str]) -> None:
        self.config = config
        self.store_path = store_path or str(config.store_path)

    def build_manager(self) -> TaskListManager:
        return TaskListManager(
            JsonFileStore(self.store_path),
            key=self.config.store_key,
            date_format=self.config.date_format,
        )


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option("--store", "store_path", default=None, help="Path of the JSON store file (overrides config)")
@click.pass_context
def main(ctx: click.Context, store_path: Optional[str]) -> None:
    """habitlist - Daily habit and task tracker."""
    config = Config()
    ctx.obj = CliState(config, store_path)
    if ctx.invoked_subcommand is None:
        _start_tui(ctx.obj)
    else:
        setup_logging(config.log_level, config.log_file, console=True)


def _start_tui(state: CliState) -> None:
    """Helper to launch the Textual TUI."""
    setup_logging(state.config.log_level, state.config.log_file)
    try:
        from .interactive import HabitListApp
    except Exception as exc:  # pragma: no cover - defensive fallback
        click.echo(f"Unable to start interactive mode: {exc}")
        return

    app = HabitListApp(config=state.config, manager=state.build_manager())
    app.run()


def _run(state: CliState, operation: Callable[[TaskListManager], T]) -> T:
    """Load the list, apply one operation, and wait for its save to land."""

    async def runner() -> T:
        manager = state.build_manager()
        failures: list[SaveFailed] = []

        def on_event(event: ManagerEvent) -> None:
            if isinstance(event, SaveFailed):
                failures.append(event)

        manager.subscribe(on_event)
        result = await manager.initialize()
        if result.warning is not None:
            click.echo(f"Warning: {result.warning}", err=True)
        outcome = operation(manager)
        await manager.flush()
        for failure in failures:
            click.echo(f"Warning: failed to save tasks: {failure.error}", err=True)
        return outcome

    try:
        return asyncio.run(runner())
    except HabitListError as exc:
        raise click.ClickException(str(exc)) from exc


def _format_task(position: int, task: Task, date_format: str) -> str:
    return (
        f"{position:>3}. {task.priority.icon} {task.description}  "
        f"📅 {task.formatted_date(date_format)}  [{task.priority.value}]"
    )


@main.command()
@click.pass_obj
def tui(state: CliState) -> None:
    """Start the Textual TUI."""
    _start_tui(state)


@main.command(name="list")
@click.option("--by-priority", is_flag=True, help="Show the most urgent tasks first")
@click.pass_obj
def list_tasks(state: CliState, by_priority: bool) -> None:
    """List all tasks."""
    tasks = _run(state, lambda manager: manager.tasks)
    if not tasks:
        click.echo("No tasks yet! Add your first task to get started.")
        return

    entries = list(enumerate(tasks, start=1))
    if by_priority:
        entries.sort(key=lambda entry: -entry[1].priority.rank)
    click.echo(f"Your Tasks ({len(tasks)})")
    for position, task in entries:
        click.echo(_format_task(position, task, state.config.date_format))


@main.command()
@click.argument("description")
@click.option("--date", "due_date", default=None, help="Due date (ISO or display format, default today)")
@click.option("--priority", type=PRIORITY_CHOICES, default=Priority.CHILL.value, show_default=True)
@click.pass_obj
def add(state: CliState, description: str, due_date: Optional[str], priority: str) -> None:
    """Add a new task."""
    payload = TaskPayload(description=description, due_date=due_date, priority=priority)
    result = _run(state, lambda manager: manager.submit(payload))
    task = result.tasks[result.index]
    click.echo(f"Task added: {_format_task(result.index + 1, task, state.config.date_format).strip()}")


@main.command()
@click.argument("position", type=int)
@click.argument("description")
@click.option("--date", "due_date", default=None, help="Due date (default: keep the current one)")
@click.option("--priority", type=PRIORITY_CHOICES, default=None, help="Priority (default: keep the current one)")
@click.pass_obj
def edit(state: CliState, position: int, description: str, due_date: Optional[str], priority: Optional[str]) -> None:
    """Replace the task at POSITION (1-based)."""

    def operation(manager: TaskListManager):
        current = manager.begin_edit(position - 1)
        payload = TaskPayload(
            description=description,
            due_date=due_date if due_date is not None else current.due_date,
            priority=priority if priority is not None else current.priority,
        )
        return manager.submit_edit(payload)

    result = _run(state, operation)
    task = result.tasks[result.index]
    click.echo(f"Task updated: {_format_task(position, task, state.config.date_format).strip()}")


@main.command()
@click.argument("position", type=int)
@click.pass_obj
def delete(state: CliState, position: int) -> None:
    """Delete the task at POSITION (1-based)."""
    removed = _run(state, lambda manager: manager.delete(position - 1))
    click.echo(f'Task deleted: "{removed.description}" has been removed')


if __name__ == "__main__":
    main()
