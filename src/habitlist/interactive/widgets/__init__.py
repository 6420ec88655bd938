"""Interactive mode widgets."""

from .activity_panel import ActivityPanel
from .task_form_modal import TaskFormModal
from .task_list import TaskListWidget

__all__ = [
    "ActivityPanel",
    "TaskFormModal",
    "TaskListWidget",
]
