from dataclasses import dataclass

from task_manager.domain.roles import Role


@dataclass(frozen=True, slots=True)
class Claims:
    """The authenticated actor, rebuilt per request from a verified access token."""

    actor_id: str
    role: Role
    username: str = ""
