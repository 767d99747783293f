from enum import Enum

from task_manager.errors import DomainValidationError


class Role(str, Enum):
    """Account roles, ordered ``user`` < ``admin`` < ``root``."""

    USER = "user"
    ADMIN = "admin"
    ROOT = "root"

    @property
    def is_privileged(self) -> bool:
        """Admin and root may act on any task, not only their own."""
        return self in (Role.ADMIN, Role.ROOT)

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """
        Raises:
            DomainValidationError: If value is not a known role.
        """
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(role.value for role in cls)
            raise DomainValidationError(f"role must be one of: {allowed}") from None
