"""Public schema exports shared across API route modules."""

from app.schemas.boards import BoardCreate, BoardListResponse, BoardRead, BoardResponse, BoardUpdate
from app.schemas.columns import (
    ColumnCreate,
    ColumnListResponse,
    ColumnRead,
    ColumnResponse,
    ColumnUpdate,
)
from app.schemas.common import ApiModel, SuccessResponse
from app.schemas.errors import ErrorDetail, ErrorResponse
from app.schemas.subtasks import (
    SubtaskCreate,
    SubtaskListResponse,
    SubtaskRead,
    SubtaskResponse,
    SubtaskUpdate,
)
from app.schemas.tasks import (
    TaskCreate,
    TaskListResponse,
    TaskMove,
    TaskRead,
    TaskResponse,
    TaskUpdate,
)
from app.schemas.theme import ThemeResponse, ThemeUpdate

__all__ = [
    "ApiModel",
    "BoardCreate",
    "BoardListResponse",
    "BoardRead",
    "BoardResponse",
    "BoardUpdate",
    "ColumnCreate",
    "ColumnListResponse",
    "ColumnRead",
    "ColumnResponse",
    "ColumnUpdate",
    "ErrorDetail",
    "ErrorResponse",
    "SubtaskCreate",
    "SubtaskListResponse",
    "SubtaskRead",
    "SubtaskResponse",
    "SubtaskUpdate",
    "SuccessResponse",
    "TaskCreate",
    "TaskListResponse",
    "TaskMove",
    "TaskRead",
    "TaskResponse",
    "TaskUpdate",
    "ThemeResponse",
    "ThemeUpdate",
]
