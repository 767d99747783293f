from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from passlib.context import CryptContext

from task_manager.core.config import settings
from task_manager.domain.ports import CredentialFailure
from task_manager.domain.roles import Role

ACCESS_TOKEN_TYPE = "access"


class BcryptPasswordHasher:
    """Salted bcrypt hashes through passlib."""

    def __init__(self) -> None:
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    def hash(self, password: str) -> str:
        """Hash a password."""
        try:
            return self._context.hash(password)
        except (ValueError, TypeError) as e:
            raise CredentialFailure("could not hash password") from e

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a plain password against a hashed password."""
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError):
            # Malformed or unknown hash format never matches.
            return False


class JwtTokenIssuer:
    """Signs and verifies HMAC access tokens with PyJWT."""

    def __init__(self, secret_key: str, algorithm: str) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm

    def issue(
        self, user_id: str, username: str, role: Role, expires_delta: timedelta
    ) -> str:
        """Create a JWT access token carrying the account identity and role."""
        if not self._secret_key:
            raise CredentialFailure("secret key is not configured")

        expire = datetime.now(timezone.utc) + expires_delta
        to_encode = {
            "id": user_id,
            "username": username,
            "role": Role(role).value,
            "exp": expire,
            "type": ACCESS_TOKEN_TYPE,
        }
        try:
            return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError) as e:
            raise CredentialFailure("could not sign access token") from e

    def decode(self, token: str) -> dict[str, Any] | None:
        """Decode and verify a JWT token."""
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None


password_hasher = BcryptPasswordHasher()
token_issuer = JwtTokenIssuer(settings.secret_key, settings.algorithm)
