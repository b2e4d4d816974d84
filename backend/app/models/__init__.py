"""Model exports for SQLAlchemy/SQLModel metadata discovery."""

from app.models.boards import Board
from app.models.columns import BoardColumn
from app.models.subtasks import Subtask
from app.models.tasks import Task
from app.models.theme_preferences import ThemePreference

__all__ = [
    "Board",
    "BoardColumn",
    "Subtask",
    "Task",
    "ThemePreference",
]
