"""habitlist - Daily habit and task tracker."""

__version__ = "0.1.0"
__author__ = "habitlist Contributors"

from .config import Config
from .state.manager import TaskListManager
from .state.tasks import Priority, Task, TaskPayload

__all__ = ["Config", "TaskListManager", "Priority", "Task", "TaskPayload"]
