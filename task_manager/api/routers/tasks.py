from uuid import UUID

from fastapi import APIRouter, Depends, status

from task_manager.api.deps import get_current_claims, get_task_policy
from task_manager.domain.claims import Claims
from task_manager.schemas.task import (
    Task,
    TaskCreate,
    TaskList,
    TaskReplace,
    TaskUpdate,
    TaskView,
)
from task_manager.services.task import TaskPolicy

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskList)
def get_tasks(
    policy: TaskPolicy = Depends(get_task_policy),
    claims: Claims = Depends(get_current_claims),
):
    tasks = policy.get_tasks()
    return TaskList(count=len(tasks), tasks=[Task.model_validate(t) for t in tasks])


@router.post("", response_model=TaskView, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    policy: TaskPolicy = Depends(get_task_policy),
    claims: Claims = Depends(get_current_claims),
):
    """Create a task owned by the caller. Status defaults to "Pending"."""
    return policy.create(task_data, claims)


@router.get("/{task_id}", response_model=Task)
def get_task_by_id(
    task_id: UUID,
    policy: TaskPolicy = Depends(get_task_policy),
    claims: Claims = Depends(get_current_claims),
):
    task = policy.get_by_id(str(task_id))
    return Task.model_validate(task)


@router.put("/{task_id}", response_model=TaskView)
def replace_task(
    task_id: UUID,
    task_data: TaskReplace,
    policy: TaskPolicy = Depends(get_task_policy),
    claims: Claims = Depends(get_current_claims),
):
    """Replace every field of a task. Only the owner, an admin or root may do this."""
    return policy.replace(str(task_id), task_data, claims)


@router.patch("/{task_id}", response_model=TaskView)
def update_task(
    task_id: UUID,
    task_data: TaskUpdate,
    policy: TaskPolicy = Depends(get_task_policy),
    claims: Claims = Depends(get_current_claims),
):
    """Update only the provided fields of a task."""
    return policy.patch_update(str(task_id), task_data, claims)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: UUID,
    policy: TaskPolicy = Depends(get_task_policy),
    claims: Claims = Depends(get_current_claims),
):
    policy.delete(str(task_id), claims)
