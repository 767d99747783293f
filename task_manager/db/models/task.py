from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text

from task_manager.db.base import Base
from task_manager.domain.task_status import TaskStatus


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    due_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(
        Enum(
            TaskStatus,
            name="task_status",
            native_enum=False,
            length=16,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=TaskStatus.PENDING,
    )
    owner_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
