import uuid

from task_manager.db.models.task import Task as TaskModel
from task_manager.domain.access import owns_or_privileged
from task_manager.domain.claims import Claims
from task_manager.domain.patch import TaskPatch
from task_manager.domain.ports import StoreFailure, TaskStore
from task_manager.domain.task_status import TaskStatus
from task_manager.errors import (
    DomainValidationError,
    ForbiddenError,
    NotFoundError,
    StoreError,
)
from task_manager.schemas.task import TaskCreate, TaskReplace, TaskUpdate, TaskView

FORBIDDEN_MESSAGE = "a user may only modify their own task"


class TaskPolicy:
    """
    Task lifecycle with ownership checks.

    - Any authenticated user can create tasks; they become the owner
    - Only the owner, an admin or root can replace, update or delete a task
    - Writes return a ``TaskView`` (no owner field)
    """

    def __init__(self, store: TaskStore):
        self.store = store

    def get_tasks(self) -> list[TaskModel]:
        """Get all tasks. Listing authorization is handled at the controller level."""
        try:
            return self.store.get_all()
        except StoreFailure as e:
            raise StoreError() from e

    def get_by_id(self, task_id: str) -> TaskModel:
        """
        Get a task by ID.

        Raises:
            NotFoundError: If task doesn't exist
            StoreError: If the store read fails
        """
        try:
            task = self.store.get_by_id(task_id)
        except StoreFailure as e:
            raise StoreError() from e
        if task is None:
            raise NotFoundError("task not found")
        return task

    def create(self, task_data: TaskCreate, claims: Claims) -> TaskView:
        """
        Create a task owned by the authenticated actor.

        Raises:
            DomainValidationError: If title or due date is missing, or status is not allowed
            StoreError: If persistence fails
        """
        if not task_data.title:
            raise DomainValidationError("title is required")
        if task_data.due_date is None:
            raise DomainValidationError("due_date is required")
        status = (
            TaskStatus.parse(task_data.status) if task_data.status else TaskStatus.PENDING
        )

        task = TaskModel(
            id=str(uuid.uuid4()),
            title=task_data.title,
            description=task_data.description,
            due_date=task_data.due_date,
            status=status,
            owner_id=claims.actor_id,
        )
        try:
            self.store.insert(task)
        except StoreFailure as e:
            raise StoreError() from e

        return _view(task)

    def replace(self, task_id: str, task_data: TaskReplace, claims: Claims) -> TaskView:
        """
        Overwrite title, description, due date and status of a task.

        The owner is kept, even when an admin or root replaces someone else's task.

        Raises:
            NotFoundError: If task doesn't exist
            ForbiddenError: If the actor neither owns the task nor is privileged
            DomainValidationError: If title is empty or status is not allowed
            StoreError: If persistence fails
        """
        existing = self._get_owned(task_id, claims)

        if not task_data.title:
            raise DomainValidationError("title is required")
        status = TaskStatus.parse(task_data.status)

        task = TaskModel(
            id=task_id,
            title=task_data.title,
            description=task_data.description,
            due_date=task_data.due_date,
            status=status,
            owner_id=existing.owner_id,
        )
        try:
            self.store.replace_whole(task_id, task)
        except StoreFailure as e:
            raise StoreError() from e

        return self._refreshed_view(task_id)

    def patch_update(
        self, task_id: str, task_data: TaskUpdate, claims: Claims
    ) -> TaskView:
        """
        Update only the provided fields of a task. Empty values count as not provided.

        Raises:
            NotFoundError: If task doesn't exist
            ForbiddenError: If the actor neither owns the task nor is privileged
            DomainValidationError: If a provided status is not allowed
            StoreError: If persistence fails
        """
        self._get_owned(task_id, claims)

        patch = TaskPatch.from_input(**task_data.model_dump())
        if not patch.is_empty():
            try:
                self.store.apply_partial_update(task_id, patch.changes())
            except StoreFailure as e:
                raise StoreError() from e

        return self._refreshed_view(task_id)

    def delete(self, task_id: str, claims: Claims) -> None:
        """
        Delete a task.

        Raises:
            NotFoundError: If task doesn't exist
            ForbiddenError: If the actor neither owns the task nor is privileged
            StoreError: If persistence fails
        """
        self._get_owned(task_id, claims)
        try:
            self.store.delete(task_id)
        except StoreFailure as e:
            raise StoreError() from e

    def _get_owned(self, task_id: str, claims: Claims) -> TaskModel:
        task = self.get_by_id(task_id)
        if not owns_or_privileged(claims, task.owner_id):
            raise ForbiddenError(FORBIDDEN_MESSAGE)
        return task

    def _refreshed_view(self, task_id: str) -> TaskView:
        try:
            task = self.store.get_by_id(task_id)
        except StoreFailure as e:
            raise StoreError() from e
        if task is None:
            # Gone between our write and the re-read.
            raise StoreError()
        return _view(task)


def _view(task: TaskModel) -> TaskView:
    return TaskView.model_validate(task)
