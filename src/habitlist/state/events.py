"""Events emitted by the task list manager."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import HabitListError
from .tasks import Task


class ManagerEvent:
    """Base class for manager events."""


@dataclass(frozen=True)
class SnapshotLoaded(ManagerEvent):
    tasks: Tuple[Task, ...]
    warning: Optional[HabitListError] = None


@dataclass(frozen=True)
class EditModeEntered(ManagerEvent):
    """A task was selected for editing; carries its values to prefill the form."""

    index: int
    task: Task


@dataclass(frozen=True)
class EditCancelled(ManagerEvent):
    index: int


@dataclass(frozen=True)
class TaskSubmitted(ManagerEvent):
    index: int
    task: Task
    created: bool


@dataclass(frozen=True)
class TaskDeleted(ManagerEvent):
    index: int
    task: Task


@dataclass(frozen=True)
class SaveCompleted(ManagerEvent):
    generation: int
    count: int


@dataclass(frozen=True)
class SaveFailed(ManagerEvent):
    generation: int
    error: HabitListError
