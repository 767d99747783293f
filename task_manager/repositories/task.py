from typing import Any

from sqlalchemy.orm import Session

from task_manager.db.models.task import Task as TaskModel
from task_manager.repositories.base import store_errors

REPLACEABLE_FIELDS = ("title", "description", "due_date", "status", "owner_id")


class SqlTaskStore:
    """Task persistence over a SQLAlchemy session. Pure data access - no business logic."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[TaskModel]:
        """Get all tasks."""
        with store_errors(self.db):
            return self.db.query(TaskModel).all()

    def get_by_id(self, task_id: str) -> TaskModel | None:
        """Get a task by ID."""
        with store_errors(self.db):
            return self.db.query(TaskModel).filter(TaskModel.id == task_id).first()

    def insert(self, task: TaskModel) -> None:
        with store_errors(self.db):
            self.db.add(task)
            self.db.commit()

    def replace_whole(self, task_id: str, task: TaskModel) -> None:
        """Overwrite every field but the ID."""
        values = {field: getattr(task, field) for field in REPLACEABLE_FIELDS}
        with store_errors(self.db):
            self.db.query(TaskModel).filter(TaskModel.id == task_id).update(values)
            self.db.commit()

    def apply_partial_update(self, task_id: str, changes: dict[str, Any]) -> None:
        """Update only the given fields."""
        with store_errors(self.db):
            self.db.query(TaskModel).filter(TaskModel.id == task_id).update(changes)
            self.db.commit()

    def delete(self, task_id: str) -> None:
        with store_errors(self.db):
            self.db.query(TaskModel).filter(TaskModel.id == task_id).delete()
            self.db.commit()
