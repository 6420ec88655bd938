"""Task values, payload validation and snapshot encoding."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .errors import CorruptSnapshot, ValidationError

DEFAULT_DATE_FORMAT = "%m/%d/%Y"
ISO_DATE_FORMAT = "%Y-%m-%d"


class Priority(Enum):
    CHILL = "Chill"
    NORMAL = "Normal"
    URGENT = "Urgent"

    @property
    def rank(self) -> int:
        """Ordering rank, Chill lowest."""
        return _PRIORITY_RANKS[self]

    @property
    def icon(self) -> str:
        return _PRIORITY_ICONS[self]

    @property
    def color(self) -> str:
        return _PRIORITY_COLORS[self]

    @classmethod
    def parse(cls, raw: Union["Priority", str, None]) -> "Priority":
        """Resolve a priority from its value text (case-insensitive)."""
        if raw is None:
            return cls.CHILL
        if isinstance(raw, Priority):
            return raw
        text = str(raw).strip()
        for member in cls:
            if member.value.lower() == text.lower():
                return member
        raise ValidationError(f"Unknown priority: {raw!r}")


_PRIORITY_RANKS = {Priority.CHILL: 0, Priority.NORMAL: 1, Priority.URGENT: 2}
_PRIORITY_ICONS = {Priority.CHILL: "🌱", Priority.NORMAL: "⚡", Priority.URGENT: "🔥"}
_PRIORITY_COLORS = {Priority.CHILL: "#999999", Priority.NORMAL: "#666666", Priority.URGENT: "bold white"}


@dataclass(frozen=True)
class Task:
    """A single task. Immutable; edits replace the whole value."""

    description: str
    due_date: date
    priority: Priority = Priority.CHILL

    def formatted_date(self, date_format: str = DEFAULT_DATE_FORMAT) -> str:
        """Due date rendered for display."""
        return format_date(self.due_date, date_format)

    def to_dict(self) -> Dict[str, str]:
        """Convert to the snapshot dictionary shape."""
        return {
            "description": self.description,
            "date": self.due_date.strftime(ISO_DATE_FORMAT),
            "priority": self.priority.value,
        }

    @staticmethod
    def from_dict(data: Dict) -> "Task":
        """Create from a snapshot dictionary, raising CorruptSnapshot on bad shape."""
        if not isinstance(data, dict):
            raise CorruptSnapshot(f"Expected a task object, got {type(data).__name__}")

        description = data.get("description")
        if not isinstance(description, str) or not description.strip():
            raise CorruptSnapshot("Task description must be a non-empty string")

        raw_priority = data.get("priority")
        try:
            priority = Priority(raw_priority)
        except ValueError as exc:
            raise CorruptSnapshot(f"Unknown priority in snapshot: {raw_priority!r}") from exc

        raw_date = data.get("date")
        if not isinstance(raw_date, str):
            raise CorruptSnapshot("Task date must be a string")
        try:
            due_date = datetime.strptime(raw_date, ISO_DATE_FORMAT).date()
        except ValueError as exc:
            raise CorruptSnapshot(f"Invalid task date in snapshot: {raw_date!r}") from exc

        return Task(description=description, due_date=due_date, priority=priority)


DateInput = Union[date, datetime, str, None]


@dataclass(frozen=True)
class TaskPayload:
    """Form values supplied by a presentation collaborator."""

    description: str
    due_date: DateInput = None
    priority: Union[Priority, str, None] = Priority.CHILL


def format_date(value: date, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    return value.strftime(date_format)


def parse_due_date(value: DateInput, date_format: str = DEFAULT_DATE_FORMAT, today: Optional[date] = None) -> date:
    """Resolve a payload date.

    Accepts a date/datetime, ISO text, or text in the display format.
    None or blank text means today.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return today or date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    for fmt in (ISO_DATE_FORMAT, date_format):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationError(f"Unrecognised date: {value!r}")


def build_task(payload: TaskPayload, date_format: str = DEFAULT_DATE_FORMAT, today: Optional[date] = None) -> Task:
    """Validate a payload and build the Task it describes."""
    description = payload.description.strip() if isinstance(payload.description, str) else ""
    if not description:
        raise ValidationError("Task cannot be empty!")

    return Task(
        description=description,
        due_date=parse_due_date(payload.due_date, date_format, today=today),
        priority=Priority.parse(payload.priority),
    )


def encode_snapshot(tasks: Iterable[Task]) -> str:
    """Serialize the whole list into one snapshot value."""
    return json.dumps([task.to_dict() for task in tasks], ensure_ascii=False)


def decode_snapshot(value: object) -> Tuple[Task, ...]:
    """Parse a snapshot value back into tasks, raising CorruptSnapshot on any bad shape."""
    if not isinstance(value, str):
        raise CorruptSnapshot(f"Snapshot must be text, got {type(value).__name__}")
    try:
        data = json.loads(value)
    except json.JSONDecodeError as exc:
        raise CorruptSnapshot(f"Snapshot is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise CorruptSnapshot("Snapshot must be a list of tasks")

    tasks: List[Task] = [Task.from_dict(entry) for entry in data]
    return tuple(tasks)

