# Request/response schemas
from taskboard.schemas.task import (
    TaskCreate,
    TaskPatch,
    ReorderItem,
    ReorderRequest,
    TaskResponse,
    ReorderResponse,
    MessageResponse,
)
from taskboard.schemas.user import UserCreate, UserResponse

__all__ = [
    "TaskCreate",
    "TaskPatch",
    "ReorderItem",
    "ReorderRequest",
    "TaskResponse",
    "ReorderResponse",
    "MessageResponse",
    "UserCreate",
    "UserResponse",
]
