"""Error taxonomy for the task list."""

from __future__ import annotations


class HabitListError(Exception):
    """Base error for task list operations."""


class ValidationError(HabitListError):
    """Submitted task payload is invalid (e.g. blank description)."""


class InvalidCursor(HabitListError):
    """Index does not address a task in the current list."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Index {index} is out of range for a list of {size} task(s)")
        self.index = index
        self.size = size


class StoreUnavailable(HabitListError):
    """Durable store could not be read or written."""


class CorruptSnapshot(HabitListError):
    """Persisted snapshot could not be parsed into a task list."""


class NotReady(HabitListError):
    """Mutation attempted before the initial load completed."""
