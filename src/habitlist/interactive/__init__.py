"""Interactive Textual mode."""

from .app import HabitListApp

__all__ = ["HabitListApp"]
