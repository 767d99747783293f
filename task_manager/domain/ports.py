"""Contracts of the collaborators the services depend on.

Stores return ``None`` when an entity is absent and raise ``StoreFailure`` on
any other persistence problem (``IntegrityFailure`` when a write breaks a
constraint). Primitives raise ``CredentialFailure`` when a
hash or token cannot be produced.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any, Protocol

from task_manager.domain.roles import Role

if TYPE_CHECKING:
    from task_manager.db.models.task import Task
    from task_manager.db.models.user import User


class StoreFailure(Exception):
    """A persistence collaborator could not complete a read or write."""


class IntegrityFailure(StoreFailure):
    """A write was rejected by a store constraint, such as a unique username."""


class CredentialFailure(Exception):
    """A password hash or access token could not be produced."""


class TaskStore(Protocol):
    def get_all(self) -> list[Task]: ...

    def get_by_id(self, task_id: str) -> Task | None: ...

    def insert(self, task: Task) -> None: ...

    def replace_whole(self, task_id: str, task: Task) -> None: ...

    def apply_partial_update(self, task_id: str, changes: dict[str, Any]) -> None: ...

    def delete(self, task_id: str) -> None: ...


class UserStore(Protocol):
    def insert(self, user: User) -> None: ...

    def get_all(self) -> list[User]: ...

    def get_by_id(self, user_id: str) -> User | None: ...

    def get_by_username(self, username: str) -> User | None: ...

    def apply_partial_update(self, user_id: str, changes: dict[str, Any]) -> None: ...

    def delete(self, user_id: str) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...


class TokenIssuer(Protocol):
    def issue(
        self, user_id: str, username: str, role: Role, expires_delta: timedelta
    ) -> str: ...
