from datetime import timedelta

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from task_manager.core.config import settings
from task_manager.core.security import ACCESS_TOKEN_TYPE, password_hasher, token_issuer
from task_manager.db import SessionLocal
from task_manager.domain.claims import Claims
from task_manager.domain.roles import Role
from task_manager.repositories.task import SqlTaskStore
from task_manager.repositories.user import SqlUserStore
from task_manager.services.task import TaskPolicy
from task_manager.services.user import UserPolicy

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_task_policy(db: Session = Depends(get_db)) -> TaskPolicy:
    return TaskPolicy(SqlTaskStore(db))


def get_user_policy(db: Session = Depends(get_db)) -> UserPolicy:
    return UserPolicy(
        SqlUserStore(db),
        password_hasher,
        token_issuer,
        token_lifetime=timedelta(minutes=settings.access_token_expire_minutes),
    )


def get_current_claims(token: str = Depends(oauth2_scheme)) -> Claims:
    """Rebuild the actor's claims from a verified access token. No database lookup."""
    payload = token_issuer.decode(token)
    if payload is None:
        raise _credentials_exception

    # Validate token type - must be "access" token
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise _credentials_exception

    actor_id = payload.get("id")
    if not actor_id:
        raise _credentials_exception

    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise _credentials_exception from None

    return Claims(actor_id=actor_id, role=role, username=payload.get("username", ""))


def require_roles(*roles: Role):
    """
    Create a dependency that requires the current actor to have one of the specified roles.

    Example:
        Depends(require_roles(Role.ADMIN, Role.ROOT))
    """

    def role_checker(claims: Claims = Depends(get_current_claims)) -> Claims:
        if claims.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
            )
        return claims

    return role_checker
