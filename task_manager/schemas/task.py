from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from task_manager.domain.task_status import TaskStatus


class Task(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    due_date: datetime
    status: TaskStatus
    owner_id: str


class TaskView(BaseModel):
    """Task as returned after a write: no owner."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    due_date: datetime
    status: TaskStatus


class TaskList(BaseModel):
    count: int
    tasks: list[Task]


class TaskCreate(BaseModel):
    title: str = Field("", max_length=255)
    description: str = ""
    due_date: datetime | None = None
    status: str | None = None  # If not provided, defaults to "Pending"


class TaskReplace(BaseModel):
    title: str = Field(..., max_length=255)
    description: str
    due_date: datetime
    status: str


class TaskUpdate(BaseModel):
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    due_date: datetime | None = None
    status: str | None = None
