"""Partial-update values.

Each field of a patch is either ``UNSET`` or the new value. Stores receive
only the map of fields that are set, so "not provided" never reaches the
database as an empty value.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any

from task_manager.domain.roles import Role
from task_manager.domain.task_status import TaskStatus


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _provided(value: Any) -> Any:
    # Request payloads use None or "" for "leave unchanged".
    if value is None or value == "":
        return UNSET
    return value


class _Patch:
    def changes(self) -> dict[str, Any]:
        """Field map holding only the fields to change."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def is_empty(self) -> bool:
        return not self.changes()


@dataclass(frozen=True, slots=True)
class TaskPatch(_Patch):
    title: str = UNSET
    description: str = UNSET
    due_date: datetime = UNSET
    status: TaskStatus = UNSET

    @classmethod
    def from_input(
        cls,
        title: str | None = None,
        description: str | None = None,
        due_date: datetime | None = None,
        status: str | None = None,
    ) -> TaskPatch:
        """
        Build a patch from request data, treating empty values as not provided.

        Raises:
            DomainValidationError: If a provided status is not allowed.
        """
        status = _provided(status)
        return cls(
            title=_provided(title),
            description=_provided(description),
            due_date=_provided(due_date),
            status=TaskStatus.parse(status) if status is not UNSET else UNSET,
        )


@dataclass(frozen=True, slots=True)
class UserPatch(_Patch):
    username: str = UNSET
    password: str = UNSET
    role: Role = UNSET

    @classmethod
    def from_input(
        cls,
        username: str | None = None,
        password: str | None = None,
        role: Role | str | None = None,
    ) -> UserPatch:
        """
        Raises:
            DomainValidationError: If a provided role is not known.
        """
        role = _provided(role)
        return cls(
            username=_provided(username),
            password=_provided(password),
            role=Role.parse(role) if role is not UNSET else UNSET,
        )

    def with_password(self, password: str) -> UserPatch:
        return replace(self, password=password)
