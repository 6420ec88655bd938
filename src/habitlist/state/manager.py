"""Task list lifecycle: load once, mutate in memory, save on change."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Set, Tuple

from .errors import CorruptSnapshot, HabitListError, InvalidCursor, NotReady, StoreUnavailable
from .events import (
    EditCancelled,
    EditModeEntered,
    ManagerEvent,
    SaveCompleted,
    SaveFailed,
    SnapshotLoaded,
    TaskDeleted,
    TaskSubmitted,
)
from .store import StoreAdapter
from .tasks import DEFAULT_DATE_FORMAT, Task, TaskPayload, build_task, decode_snapshot, encode_snapshot

logger = logging.getLogger(__name__)

DEFAULT_STORE_KEY = "TASKS"

Listener = Callable[[ManagerEvent], None]


@dataclass(frozen=True)
class LoadResult:
    tasks: Tuple[Task, ...]
    warning: Optional[HabitListError] = None


@dataclass(frozen=True)
class SubmitResult:
    tasks: Tuple[Task, ...]
    index: int
    created: bool


class TaskListManager:
    """Owns the canonical task list and the edit cursor.

    The list is loaded exactly once by ``initialize``. After that every
    ``submit`` and ``delete`` replaces the whole list synchronously and
    schedules one background save of the list as it stood at that moment.
    Saves are written one at a time in the order they were scheduled, so the
    stored value always converges to the most recent mutation.

    ``initialize`` never saves. An empty list is only written back when a
    user mutation produced it, so a slow first load can not be clobbered by
    the empty startup state.
    """

    def __init__(
        self,
        store: StoreAdapter,
        key: str = DEFAULT_STORE_KEY,
        date_format: str = DEFAULT_DATE_FORMAT,
    ) -> None:
        self.store = store
        self.key = key
        self.date_format = date_format

        self._tasks: Tuple[Task, ...] = ()
        self._edit_cursor: Optional[int] = None
        self._load_result: Optional[LoadResult] = None
        self._loading = False

        self._generation = 0
        self._save_lock: Optional[asyncio.Lock] = None
        self._pending: Set[asyncio.Task] = set()
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------ #
    # State accessors
    # ------------------------------------------------------------------ #
    @property
    def tasks(self) -> Tuple[Task, ...]:
        return self._tasks

    @property
    def edit_cursor(self) -> Optional[int]:
        return self._edit_cursor

    @property
    def ready(self) -> bool:
        return self._load_result is not None

    @property
    def pending_saves(self) -> int:
        return len(self._pending)

    def __len__(self) -> int:
        return len(self._tasks)

    # ------------------------------------------------------------------ #
    # Events
    # ------------------------------------------------------------------ #
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: ManagerEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, type(event).__name__)

    # ------------------------------------------------------------------ #
    # Load
    # ------------------------------------------------------------------ #
    async def initialize(self) -> LoadResult:
        """Load the persisted list. Never schedules a save."""
        if self._load_result is not None:
            return self._load_result
        if self._loading:
            raise NotReady("Initial load is already in progress")

        self._loading = True
        warning: Optional[HabitListError] = None
        tasks: Tuple[Task, ...] = ()
        try:
            raw = await self.store.load(self.key)
            if raw is not None:
                tasks = decode_snapshot(raw)
        except CorruptSnapshot as exc:
            logger.warning("Discarding unreadable snapshot under %s: %s", self.key, exc)
            warning = exc
        except StoreUnavailable as exc:
            logger.warning("Failed to load tasks: %s", exc)
            warning = exc
        finally:
            self._loading = False

        self._tasks = tasks
        self._edit_cursor = None
        self._load_result = LoadResult(tasks=tasks, warning=warning)
        logger.info("Loaded %d task(s) from %s", len(tasks), self.key)
        self._emit(SnapshotLoaded(tasks=tasks, warning=warning))
        return self._load_result

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #
    def submit(self, payload: TaskPayload, cursor: Optional[int] = None) -> SubmitResult:
        """Create a task (cursor None) or replace the task at cursor."""
        self._require_ready()
        task = build_task(payload, self.date_format)

        if cursor is None:
            tasks = self._tasks + (task,)
            index = len(tasks) - 1
            created = True
        else:
            self._check_index(cursor)
            tasks = self._tasks[:cursor] + (task,) + self._tasks[cursor + 1 :]
            index = cursor
            created = False

        self._tasks = tasks
        self._edit_cursor = None
        logger.info("%s task #%d (%s)", "Created" if created else "Updated", index, task.priority.value)
        self._schedule_save()
        self._emit(TaskSubmitted(index=index, task=task, created=created))
        return SubmitResult(tasks=tasks, index=index, created=created)

    def submit_edit(self, payload: TaskPayload) -> SubmitResult:
        """Submit against the current edit cursor (creates when not editing)."""
        return self.submit(payload, self._edit_cursor)

    def begin_edit(self, index: int) -> Task:
        """Enter edit mode for the task at index."""
        self._require_ready()
        self._check_index(index)
        self._edit_cursor = index
        task = self._tasks[index]
        self._emit(EditModeEntered(index=index, task=task))
        return task

    def cancel_edit(self) -> None:
        """Leave edit mode without changing the list."""
        if self._edit_cursor is None:
            return
        index = self._edit_cursor
        self._edit_cursor = None
        self._emit(EditCancelled(index=index))

    def delete(self, index: int) -> Task:
        """Remove the task at index and clear the edit cursor."""
        self._require_ready()
        self._check_index(index)
        removed = self._tasks[index]
        self._tasks = self._tasks[:index] + self._tasks[index + 1 :]
        self._edit_cursor = None
        logger.info("Deleted task #%d", index)
        self._schedule_save()
        self._emit(TaskDeleted(index=index, task=removed))
        return removed

    # ------------------------------------------------------------------ #
    # Saving
    # ------------------------------------------------------------------ #
    async def flush(self) -> None:
        """Wait for every scheduled save to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def _schedule_save(self) -> asyncio.Task:
        self._generation += 1
        generation = self._generation
        snapshot = self._tasks
        task = asyncio.get_running_loop().create_task(self._write(generation, snapshot))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _write(self, generation: int, snapshot: Tuple[Task, ...]) -> bool:
        # The lock is FIFO, so saves land in the order they were scheduled.
        async with self._lock():
            try:
                await self.store.save(self.key, encode_snapshot(snapshot))
            except StoreUnavailable as exc:
                logger.warning("Save #%d failed: %s", generation, exc)
                self._emit(SaveFailed(generation=generation, error=exc))
                return False
        logger.debug("Save #%d stored %d task(s)", generation, len(snapshot))
        self._emit(SaveCompleted(generation=generation, count=len(snapshot)))
        return True

    def _lock(self) -> asyncio.Lock:
        # Created on first use so it belongs to the loop the saves run on.
        if self._save_lock is None:
            self._save_lock = asyncio.Lock()
        return self._save_lock

    # ------------------------------------------------------------------ #
    # Guards
    # ------------------------------------------------------------------ #
    def _require_ready(self) -> None:
        if self._load_result is None:
            raise NotReady("Tasks have not finished loading yet")

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._tasks):
            raise InvalidCursor(index, len(self._tasks))
