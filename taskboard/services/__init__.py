# Services module
from .task_repository import TaskRepository, BulkWriteResult
from .ordered_task_store import OrderedTaskStore
from .user_service import UserService

__all__ = [
    "TaskRepository",
    "BulkWriteResult",
    "OrderedTaskStore",
    "UserService",
]
