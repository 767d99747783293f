from fastapi import APIRouter, Depends, status

from task_manager.api.deps import get_current_claims, get_user_policy
from task_manager.domain.claims import Claims
from task_manager.schemas.user import Credentials, CurrentUser, Token, User
from task_manager.services.user import UserPolicy

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register(
    credentials: Credentials,
    policy: UserPolicy = Depends(get_user_policy),
):
    """Self-service sign up. The account always gets the "user" role."""
    user = policy.register_user(credentials)
    return User.model_validate(user)


@router.post("/login", response_model=Token)
def login(
    credentials: Credentials,
    policy: UserPolicy = Depends(get_user_policy),
):
    """Login endpoint - returns a JWT access token valid for 24 hours by default."""
    access_token = policy.login_user(credentials)
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=CurrentUser)
def get_current_user_info(claims: Claims = Depends(get_current_claims)):
    """Get the authenticated actor as carried by the token."""
    return CurrentUser(id=claims.actor_id, username=claims.username, role=claims.role)
