from uuid import UUID

from fastapi import APIRouter, Depends, status

from task_manager.api.deps import get_current_claims, get_user_policy, require_roles
from task_manager.domain.claims import Claims
from task_manager.domain.roles import Role
from task_manager.schemas.user import User, UserCreate, UserList, UserUpdate
from task_manager.services.user import UserPolicy

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def add_user(
    user_data: UserCreate,
    policy: UserPolicy = Depends(get_user_policy),
    claims: Claims = Depends(get_current_claims),
):
    """
    Create a user with an explicit role.

    - Admin can create "user" accounts
    - Root can create accounts of any role
    """
    user = policy.add_user(user_data, claims)
    return User.model_validate(user)


@router.get("", response_model=UserList)
def get_users(
    policy: UserPolicy = Depends(get_user_policy),
    claims: Claims = Depends(require_roles(Role.ADMIN, Role.ROOT)),
):
    """Get all users. Only admin and root can access this endpoint."""
    users = policy.get_users()
    return UserList(count=len(users), users=[User.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=User)
def get_user_by_id(
    user_id: UUID,
    policy: UserPolicy = Depends(get_user_policy),
    claims: Claims = Depends(get_current_claims),
):
    user = policy.get_user_by_id(str(user_id))
    return User.model_validate(user)


@router.patch("/{user_id}", response_model=User)
def update_user_by_id(
    user_id: UUID,
    user_data: UserUpdate,
    policy: UserPolicy = Depends(get_user_policy),
    claims: Claims = Depends(get_current_claims),
):
    """
    Partially update a user by ID.

    - User can update only themselves
    - Admin can update "user" accounts and themselves, never root or another admin
    - Only root can set a role other than "user"
    """
    user = policy.update_user(str(user_id), user_data, claims)
    return User.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user_by_id(
    user_id: UUID,
    policy: UserPolicy = Depends(get_user_policy),
    claims: Claims = Depends(get_current_claims),
):
    """Delete a user by ID. The same role hierarchy as for updates applies."""
    policy.delete_user(str(user_id), claims)
