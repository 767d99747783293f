"""Who may act on whom.

Both rules here are pure: they look only at the actor and the target and
never touch persistence, so services can apply them after fetching (or
constructing) the target.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from task_manager.domain.claims import Claims
from task_manager.domain.roles import Role


class Action(str, Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class AccessDecision:
    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> AccessDecision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> AccessDecision:
        return cls(allowed=False, reason=reason)


def evaluate_access(
    actor_role: Role,
    actor_id: str,
    target_id: str,
    target_role: Role,
    action: Action,
) -> AccessDecision:
    """Apply the role hierarchy ``user`` < ``admin`` < ``root`` to one user account.

    Semantics:
    - A user may only act on their own account. For ``add`` the target is a
      freshly constructed account, so a user can never add anyone.
    - An admin may act on user accounts and on their own account, never on the
      root account and never on another admin.
    - Root is unrestricted.
    """
    verb = action.value

    if actor_role == Role.USER:
        if actor_id == target_id:
            return AccessDecision.allow()
        if action == Action.ADD:
            return AccessDecision.deny("a user cannot add a new user")
        return AccessDecision.deny(f"a user cannot {verb} another user")

    if actor_role == Role.ADMIN:
        if target_role == Role.ROOT:
            return AccessDecision.deny(f"cannot {verb} root user")
        if target_role == Role.ADMIN and actor_id != target_id:
            return AccessDecision.deny(f"admin cannot {verb} another admin")

    return AccessDecision.allow()


def owns_or_privileged(claims: Claims, owner_id: str) -> bool:
    """A task may be changed by its owner, or by any admin or root."""
    return claims.role.is_privileged or claims.actor_id == owner_id
