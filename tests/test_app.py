import asyncio
from datetime import date

from textual.widgets import Input, ListView

from habitlist.config import Config
from habitlist.interactive import HabitListApp
from habitlist.interactive.widgets import TaskFormModal
from habitlist.state.manager import TaskListManager
from habitlist.state.tasks import Priority, Task, TaskPayload, decode_snapshot, encode_snapshot

from .fakes import FakeStore

TASKS = (
    Task("Journal", date(2024, 1, 1), Priority.CHILL),
    Task("Run 5k", date(2024, 1, 2), Priority.URGENT),
)


class RecordingApp(HabitListApp):
    """HabitListApp that remembers the toasts it showed."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.notices = []

    def notify(self, message, *args, **kwargs):
        self.notices.append((kwargs.get("title", ""), str(message)))
        super().notify(message, *args, **kwargs)

    @property
    def notice_titles(self):
        return [title for title, _ in self.notices]


def seeded_app(store: FakeStore) -> RecordingApp:
    return RecordingApp(config=Config(), manager=TaskListManager(store))


async def select_row(app: HabitListApp, pilot, index: int) -> None:
    list_view = app.task_list.query_one("#task-list-view", ListView)
    list_view.focus()
    list_view.index = index
    await pilot.pause()


def test_app_loads_tasks_on_mount() -> None:
    store = FakeStore({"TASKS": encode_snapshot(TASKS)})

    async def scenario():
        app = HabitListApp(config=Config(), manager=TaskListManager(store))
        async with app.run_test() as pilot:
            await pilot.pause()
            return app.manager.tasks, app.task_list.tasks, app.task_list.border_title

    manager_tasks, shown, title = asyncio.run(scenario())
    assert manager_tasks == TASKS
    assert shown == TASKS
    assert "(2)" in str(title)
    assert store.saved == []


def test_app_uses_the_manager_it_is_given_before_load() -> None:
    store = FakeStore({"TASKS": encode_snapshot(TASKS[:1])})
    manager = TaskListManager(store)
    assert len(manager) == 0

    async def scenario():
        app = HabitListApp(config=Config(), manager=manager)
        async with app.run_test() as pilot:
            await pilot.pause()
            return app.manager, len(app.task_list.query_one("#task-list-view", ListView).children)

    used, rows = asyncio.run(scenario())
    assert used is manager
    assert store.load_calls == 1
    assert manager.tasks == TASKS[:1]
    assert rows == 1


def test_app_reflects_manager_mutations() -> None:
    store = FakeStore({"TASKS": encode_snapshot(TASKS)})

    async def scenario():
        app = HabitListApp(config=Config(), manager=TaskListManager(store))
        async with app.run_test() as pilot:
            await pilot.pause()
            app.manager.begin_edit(1)
            await pilot.pause()
            editing = app.task_list.editing_index
            app.manager.delete(0)
            app.manager.submit(TaskPayload("Stretch", "2024-01-03", "Normal"))
            await app.manager.flush()
            await pilot.pause()
            return editing, app.task_list.tasks, app.task_list.editing_index

    editing, shown, editing_after = asyncio.run(scenario())
    assert editing == 1
    assert [t.description for t in shown] == ["Run 5k", "Stretch"]
    assert editing_after is None
    assert len(store.saved) == 2


def test_edit_key_prefills_form_and_enter_updates_task() -> None:
    store = FakeStore({"TASKS": encode_snapshot(TASKS)})

    async def scenario():
        app = seeded_app(store)
        async with app.run_test() as pilot:
            await pilot.pause()
            await select_row(app, pilot, 1)
            await pilot.press("e")
            await pilot.pause()
            modal = app.screen
            opened = isinstance(modal, TaskFormModal)
            description = modal.query_one("#description-input", Input)
            prefilled = description.value
            cursor = app.manager.edit_cursor
            description.value = "Run 10k"
            await pilot.press("enter")
            await pilot.pause()
            await app.manager.flush()
            closed = not isinstance(app.screen, TaskFormModal)
            return app, opened, prefilled, cursor, closed

    app, opened, prefilled, cursor, closed = asyncio.run(scenario())
    assert opened
    assert prefilled == "Run 5k"
    assert cursor == 1
    assert closed
    assert "Edit Mode! ✏️" in app.notice_titles
    assert app.manager.edit_cursor is None
    assert app.manager.tasks == (TASKS[0], Task("Run 10k", date(2024, 1, 2), Priority.URGENT))
    assert decode_snapshot(store.data["TASKS"]) == app.manager.tasks


def test_escape_cancels_edit_without_saving() -> None:
    store = FakeStore({"TASKS": encode_snapshot(TASKS)})

    async def scenario():
        app = seeded_app(store)
        async with app.run_test() as pilot:
            await pilot.pause()
            await select_row(app, pilot, 0)
            await pilot.press("e")
            await pilot.pause()
            cursor = app.manager.edit_cursor
            await pilot.press("escape")
            await pilot.pause()
            await app.manager.flush()
            closed = not isinstance(app.screen, TaskFormModal)
            return app, cursor, closed

    app, cursor, closed = asyncio.run(scenario())
    assert cursor == 0
    assert closed
    assert app.manager.edit_cursor is None
    assert app.manager.tasks == TASKS
    assert store.saved == []


def test_delete_key_removes_selected_task_and_shows_toast() -> None:
    store = FakeStore({"TASKS": encode_snapshot(TASKS)})

    async def scenario():
        app = seeded_app(store)
        async with app.run_test() as pilot:
            await pilot.pause()
            await select_row(app, pilot, 0)
            await pilot.press("d")
            await pilot.pause()
            await app.manager.flush()
            return app

    app = asyncio.run(scenario())
    assert app.manager.tasks == TASKS[1:]
    assert decode_snapshot(store.data["TASKS"]) == TASKS[1:]
    assert ("Task Deleted! 🗑️", '"Journal" has been removed') in app.notices


def test_new_task_with_blank_description_keeps_form_open() -> None:
    store = FakeStore({"TASKS": encode_snapshot(TASKS)})

    async def scenario():
        app = seeded_app(store)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("n")
            await pilot.pause()
            await pilot.press("enter")
            await pilot.pause()
            still_open = isinstance(app.screen, TaskFormModal)
            tasks_after_blank = app.manager.tasks

            app.screen.query_one("#description-input", Input).value = "Stretch"
            await pilot.press("enter")
            await pilot.pause()
            await app.manager.flush()
            return app, still_open, tasks_after_blank

    app, still_open, tasks_after_blank = asyncio.run(scenario())
    assert still_open
    assert tasks_after_blank == TASKS
    assert ("Oops!", "Task cannot be empty!") in app.notices
    assert [t.description for t in app.manager.tasks] == ["Journal", "Run 5k", "Stretch"]
    assert app.manager.tasks[-1].priority is Priority.CHILL
    assert app.manager.tasks[-1].due_date == date.today()
    assert len(store.saved) == 1


def test_edit_form_submits_to_the_task_it_opened() -> None:
    store = FakeStore({"TASKS": encode_snapshot(TASKS)})

    async def scenario():
        app = seeded_app(store)
        async with app.run_test() as pilot:
            await pilot.pause()
            await select_row(app, pilot, 1)
            await pilot.press("e")
            await pilot.pause()
            modal = app.screen
            # The task goes away while its form is still open.
            app.manager.delete(1)
            await pilot.pause()
            modal.query_one("#description-input", Input).value = "Run 10k"
            await pilot.press("enter")
            await pilot.pause()
            await app.manager.flush()
            return app

    app = asyncio.run(scenario())
    assert app.manager.tasks == TASKS[:1]
    assert decode_snapshot(store.data["TASKS"]) == TASKS[:1]
    assert len(store.saved) == 1
    assert ("", "That task no longer exists.") in app.notices
