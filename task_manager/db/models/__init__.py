from task_manager.db.models.user import User
from task_manager.db.models.task import Task

__all__ = ["User", "Task"]
