from enum import Enum

from task_manager.errors import DomainValidationError


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"

    @classmethod
    def allowed(cls) -> str:
        return ", ".join(status.value for status in cls)

    @classmethod
    def parse(cls, value: "str | TaskStatus") -> "TaskStatus":
        """
        Convert raw input into a status.

        Raises:
            DomainValidationError: If value is not one of the allowed statuses.
        """
        try:
            return cls(value)
        except ValueError:
            raise DomainValidationError(
                f"status must be one of: {cls.allowed()}"
            ) from None
