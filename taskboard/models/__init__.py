# Database models
from taskboard.models.user import User
from taskboard.models.task import Task

__all__ = ["User", "Task"]
