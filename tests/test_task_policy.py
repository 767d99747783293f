from datetime import datetime

import pytest
from sqlalchemy.orm import Session

from task_manager.db.models.task import Task as TaskModel
from task_manager.domain.ports import StoreFailure
from task_manager.domain.task_status import TaskStatus
from task_manager.errors import (
    DomainValidationError,
    ForbiddenError,
    NotFoundError,
    StoreError,
)
from task_manager.repositories.task import SqlTaskStore
from task_manager.schemas.task import TaskCreate, TaskReplace, TaskUpdate
from task_manager.services.task import TaskPolicy

DUE = datetime(2030, 6, 1, 9, 0)
MISSING_ID = "00000000-0000-0000-0000-000000000000"


@pytest.fixture(scope="function")
def policy(db: Session) -> TaskPolicy:
    return TaskPolicy(SqlTaskStore(db))


@pytest.fixture(scope="function")
def alice_task(policy: TaskPolicy, regular_user: dict, claims_for):
    return policy.create(
        TaskCreate(title="Buy milk", description="2 liters", due_date=DUE),
        claims_for(regular_user),
    )


class FailingTaskStore:
    """Every call fails like an unreachable database."""

    def get_all(self):
        raise StoreFailure("connection refused")

    def get_by_id(self, task_id):
        raise StoreFailure("connection refused")

    def insert(self, task):
        raise StoreFailure("connection refused")

    def replace_whole(self, task_id, task):
        raise StoreFailure("connection refused")

    def apply_partial_update(self, task_id, changes):
        raise StoreFailure("connection refused")

    def delete(self, task_id):
        raise StoreFailure("connection refused")


class ExistingTaskStore(FailingTaskStore):
    """Reads succeed, writes fail."""

    def __init__(self, owner_id: str):
        self.task = TaskModel(
            id="t-1",
            title="Existing",
            description="",
            due_date=DUE,
            status=TaskStatus.PENDING,
            owner_id=owner_id,
        )

    def get_by_id(self, task_id):
        return self.task if task_id == self.task.id else None


# ============================================================================
# CREATE
# ============================================================================


def test_create_sets_owner_and_default_status(
    policy: TaskPolicy, db: Session, regular_user: dict, claims_for
):
    view = policy.create(
        TaskCreate(title="Buy milk", due_date=DUE), claims_for(regular_user)
    )

    assert view.status == TaskStatus.PENDING
    assert not hasattr(view, "owner_id")

    stored = policy.get_by_id(view.id)
    assert stored.owner_id == regular_user["id"]
    assert stored.status == TaskStatus.PENDING


def test_create_with_explicit_status(policy: TaskPolicy, regular_user: dict, claims_for):
    view = policy.create(
        TaskCreate(title="Ship it", due_date=DUE, status="In Progress"),
        claims_for(regular_user),
    )
    assert view.status == TaskStatus.IN_PROGRESS


def test_create_with_bogus_status_fails(
    policy: TaskPolicy, db: Session, regular_user: dict, claims_for
):
    with pytest.raises(DomainValidationError) as exc_info:
        policy.create(
            TaskCreate(title="Ship it", due_date=DUE, status="Bogus"),
            claims_for(regular_user),
        )
    assert "Pending, In Progress, Completed" in exc_info.value.message
    assert exc_info.value.status_code == 400
    assert db.query(TaskModel).count() == 0


def test_create_without_title_fails(policy: TaskPolicy, regular_user: dict, claims_for):
    with pytest.raises(DomainValidationError, match="title"):
        policy.create(TaskCreate(due_date=DUE), claims_for(regular_user))


def test_create_without_due_date_fails(policy: TaskPolicy, regular_user: dict, claims_for):
    with pytest.raises(DomainValidationError, match="due_date"):
        policy.create(TaskCreate(title="No deadline"), claims_for(regular_user))


def test_create_store_failure(regular_user: dict, claims_for):
    policy = TaskPolicy(FailingTaskStore())
    with pytest.raises(StoreError) as exc_info:
        policy.create(TaskCreate(title="x", due_date=DUE), claims_for(regular_user))
    assert isinstance(exc_info.value.__cause__, StoreFailure)


# ============================================================================
# READ
# ============================================================================


def test_get_tasks(policy: TaskPolicy, alice_task):
    tasks = policy.get_tasks()
    assert [t.id for t in tasks] == [alice_task.id]


def test_get_tasks_store_failure():
    with pytest.raises(StoreError):
        TaskPolicy(FailingTaskStore()).get_tasks()


def test_get_by_id_not_found(policy: TaskPolicy):
    with pytest.raises(NotFoundError):
        policy.get_by_id(MISSING_ID)


def test_get_by_id_store_failure():
    with pytest.raises(StoreError):
        TaskPolicy(FailingTaskStore()).get_by_id("t-1")


# ============================================================================
# REPLACE
# ============================================================================


def test_replace_by_owner(policy: TaskPolicy, alice_task, regular_user: dict, claims_for):
    new_due = datetime(2031, 1, 1, 8, 30)
    view = policy.replace(
        alice_task.id,
        TaskReplace(title="Buy oat milk", description="", due_date=new_due, status="Completed"),
        claims_for(regular_user),
    )

    assert view.title == "Buy oat milk"
    assert view.description == ""
    assert view.status == TaskStatus.COMPLETED
    assert view.due_date.replace(tzinfo=None) == new_due


def test_replace_by_admin_keeps_owner(
    policy: TaskPolicy, alice_task, regular_user: dict, admin_user: dict, claims_for
):
    policy.replace(
        alice_task.id,
        TaskReplace(title="Reassigned?", description="no", due_date=DUE, status="Pending"),
        claims_for(admin_user),
    )
    assert policy.get_by_id(alice_task.id).owner_id == regular_user["id"]


def test_replace_by_other_user_forbidden(
    policy: TaskPolicy, alice_task, other_user: dict, claims_for
):
    with pytest.raises(ForbiddenError) as exc_info:
        policy.replace(
            alice_task.id,
            TaskReplace(title="Mine now", description="", due_date=DUE, status="Pending"),
            claims_for(other_user),
        )
    assert exc_info.value.message == "a user may only modify their own task"
    assert policy.get_by_id(alice_task.id).title == "Buy milk"


def test_replace_missing_task(policy: TaskPolicy, root_user: dict, claims_for):
    with pytest.raises(NotFoundError):
        policy.replace(
            MISSING_ID,
            TaskReplace(title="x", description="", due_date=DUE, status="Pending"),
            claims_for(root_user),
        )


def test_replace_with_bogus_status(policy: TaskPolicy, alice_task, regular_user: dict, claims_for):
    with pytest.raises(DomainValidationError):
        policy.replace(
            alice_task.id,
            TaskReplace(title="x", description="", due_date=DUE, status="Done"),
            claims_for(regular_user),
        )


def test_replace_store_failure(regular_user: dict, claims_for):
    policy = TaskPolicy(ExistingTaskStore(owner_id=regular_user["id"]))
    with pytest.raises(StoreError):
        policy.replace(
            "t-1",
            TaskReplace(title="x", description="", due_date=DUE, status="Pending"),
            claims_for(regular_user),
        )


# ============================================================================
# PATCH UPDATE
# ============================================================================


def test_patch_update_changes_only_given_fields(
    policy: TaskPolicy, alice_task, regular_user: dict, claims_for
):
    view = policy.patch_update(
        alice_task.id, TaskUpdate(status="In Progress"), claims_for(regular_user)
    )

    assert view.status == TaskStatus.IN_PROGRESS
    assert view.title == "Buy milk"
    assert view.description == "2 liters"


def test_patch_update_with_empty_payload_is_a_no_op(
    policy: TaskPolicy, alice_task, regular_user: dict, claims_for
):
    view = policy.patch_update(
        alice_task.id,
        TaskUpdate(title="", description="", status=""),
        claims_for(regular_user),
    )
    assert view == alice_task


def test_patch_update_empty_payload_never_writes(regular_user: dict, claims_for):
    # Writes on this store would fail, so success proves no write happened.
    policy = TaskPolicy(ExistingTaskStore(owner_id=regular_user["id"]))
    view = policy.patch_update("t-1", TaskUpdate(), claims_for(regular_user))
    assert view.title == "Existing"


def test_patch_update_bogus_status(policy: TaskPolicy, alice_task, regular_user: dict, claims_for):
    with pytest.raises(DomainValidationError):
        policy.patch_update(alice_task.id, TaskUpdate(status="Bogus"), claims_for(regular_user))
    assert policy.get_by_id(alice_task.id).status == TaskStatus.PENDING


def test_patch_update_by_other_user_forbidden(
    policy: TaskPolicy, alice_task, other_user: dict, claims_for
):
    with pytest.raises(ForbiddenError):
        policy.patch_update(alice_task.id, TaskUpdate(title="Hijacked"), claims_for(other_user))
    assert policy.get_by_id(alice_task.id).title == "Buy milk"


def test_patch_update_by_root(policy: TaskPolicy, alice_task, root_user: dict, claims_for):
    view = policy.patch_update(alice_task.id, TaskUpdate(title="Root was here"), claims_for(root_user))
    assert view.title == "Root was here"


# ============================================================================
# DELETE
# ============================================================================


def test_delete_by_owner(policy: TaskPolicy, alice_task, regular_user: dict, claims_for):
    policy.delete(alice_task.id, claims_for(regular_user))
    with pytest.raises(NotFoundError):
        policy.get_by_id(alice_task.id)


def test_delete_by_other_user_forbidden(
    policy: TaskPolicy, alice_task, other_user: dict, claims_for
):
    with pytest.raises(ForbiddenError):
        policy.delete(alice_task.id, claims_for(other_user))
    assert policy.get_by_id(alice_task.id).id == alice_task.id


def test_delete_by_admin(policy: TaskPolicy, alice_task, admin_user: dict, claims_for):
    policy.delete(alice_task.id, claims_for(admin_user))
    assert policy.get_tasks() == []


def test_delete_missing_task(policy: TaskPolicy, regular_user: dict, claims_for):
    with pytest.raises(NotFoundError):
        policy.delete(MISSING_ID, claims_for(regular_user))


def test_delete_store_failure(regular_user: dict, claims_for):
    policy = TaskPolicy(ExistingTaskStore(owner_id=regular_user["id"]))
    with pytest.raises(StoreError):
        policy.delete("t-1", claims_for(regular_user))
