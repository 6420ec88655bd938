"""State management modules."""

from .errors import CorruptSnapshot, HabitListError, InvalidCursor, NotReady, StoreUnavailable, ValidationError
from .manager import LoadResult, SubmitResult, TaskListManager
from .persistence import Persistence
from .store import JsonFileStore, StoreAdapter
from .tasks import Priority, Task, TaskPayload

__all__ = [
    "CorruptSnapshot",
    "HabitListError",
    "InvalidCursor",
    "JsonFileStore",
    "LoadResult",
    "NotReady",
    "Persistence",
    "Priority",
    "StoreAdapter",
    "StoreUnavailable",
    "SubmitResult",
    "Task",
    "TaskListManager",
    "TaskPayload",
    "ValidationError",
]
