import uuid
from datetime import timedelta

from task_manager.db.models.user import User as UserModel
from task_manager.domain.access import Action, evaluate_access
from task_manager.domain.claims import Claims
from task_manager.domain.patch import UNSET, UserPatch
from task_manager.domain.ports import (
    CredentialFailure,
    IntegrityFailure,
    PasswordHasher,
    StoreFailure,
    TokenIssuer,
    UserStore,
)
from task_manager.domain.roles import Role
from task_manager.errors import (
    DomainValidationError,
    DuplicateResourceError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
)
from task_manager.schemas.user import Credentials, UserCreate, UserUpdate

INVALID_CREDENTIALS = "invalid username or password"
DUPLICATE_USERNAME = "username already exists"
ROOT_NOT_ASSIGNABLE = "root account cannot be created or assigned"
DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)


class UserPolicy:
    """
    Account lifecycle and authentication under the role hierarchy ``user`` < ``admin`` < ``root``.

    The single root account is seeded out-of-band by a migration; nothing here
    creates it.
    """

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        token_lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
    ):
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.token_lifetime = token_lifetime

    def add_user(self, user_data: UserCreate, claims: Claims) -> UserModel:
        """
        Create a user or admin account on behalf of an admin or root.

        - User: cannot add accounts at all
        - Admin: can add user accounts only
        - Root: can add user and admin accounts
        - Nobody can add a second root account

        Raises:
            ForbiddenError: If the actor's role does not allow creating this account
            DuplicateResourceError: If username is already taken
            InternalError: If hashing the password fails
            StoreError: If persistence fails
        """
        user = UserModel(
            id=str(uuid.uuid4()), username=user_data.username, role=user_data.role
        )
        _require_access(claims, user, Action.ADD)
        if user_data.role == Role.ROOT:
            raise ForbiddenError(ROOT_NOT_ASSIGNABLE)
        self._insert_validated(user, user_data.password)
        return user

    def register_user(self, credentials: Credentials) -> UserModel:
        """
        Self-service sign up. The new account always gets the ``user`` role.

        Raises:
            DuplicateResourceError: If username is already taken
            InternalError: If hashing the password fails
            StoreError: If persistence fails
        """
        user = UserModel(
            id=str(uuid.uuid4()), username=credentials.username, role=Role.USER
        )
        self._insert_validated(user, credentials.password)
        return user

    def login_user(self, credentials: Credentials) -> str:
        """
        Authenticate by username and password, return a signed access token.

        Missing users and wrong passwords share one message (no user enumeration).

        Raises:
            NotFoundError: If no account has this username
            UnauthorizedError: If the password is wrong
            InternalError: If the token cannot be issued
            StoreError: If the store read fails
        """
        try:
            user = self.store.get_by_username(credentials.username)
        except StoreFailure as e:
            raise StoreError() from e
        if user is None:
            raise NotFoundError(INVALID_CREDENTIALS)

        if not self.hasher.verify(credentials.password, user.password_hash):
            raise UnauthorizedError(INVALID_CREDENTIALS)

        try:
            return self.issuer.issue(
                user.id, user.username, Role(user.role), self.token_lifetime
            )
        except CredentialFailure as e:
            raise InternalError() from e

    def get_users(self) -> list[UserModel]:
        try:
            return self.store.get_all()
        except StoreFailure as e:
            raise StoreError() from e

    def get_user_by_id(self, user_id: str) -> UserModel:
        """
        Raises:
            NotFoundError: If user doesn't exist
            StoreError: If the store read fails
        """
        try:
            user = self.store.get_by_id(user_id)
        except StoreFailure as e:
            raise StoreError() from e
        if user is None:
            raise NotFoundError("user not found")
        return user

    def update_user(
        self, user_id: str, user_data: UserUpdate, claims: Claims
    ) -> UserModel:
        """
        Update username, password and/or role of an account.

        - The role hierarchy decides whether the actor may touch the account
        - On top of that, only root may set a role other than ``user``
        - The root role can never be assigned
        - Passwords are re-hashed; empty values count as not provided

        Raises:
            NotFoundError: If user doesn't exist
            ForbiddenError: If the hierarchy or the role rule forbids the update
            DuplicateResourceError: If the new username is taken by another account
            InternalError: If hashing the password fails
            StoreError: If persistence fails
        """
        target = self.get_user_by_id(user_id)
        _require_access(claims, target, Action.UPDATE)

        patch = UserPatch.from_input(**user_data.model_dump())
        if patch.role is not UNSET and patch.role != Role.USER and claims.role != Role.ROOT:
            raise ForbiddenError("only root can update role")
        if patch.role == Role.ROOT:
            raise ForbiddenError(ROOT_NOT_ASSIGNABLE)

        password_hash = self._validate(patch.username, patch.password, exclude_id=target.id)
        if password_hash is not None:
            patch = patch.with_password(password_hash)

        changes = patch.changes()
        if "password" in changes:
            changes["password_hash"] = changes.pop("password")

        if changes:
            try:
                self.store.apply_partial_update(user_id, changes)
            except IntegrityFailure as e:
                raise DuplicateResourceError(DUPLICATE_USERNAME) from e
            except StoreFailure as e:
                raise StoreError() from e

        return self.get_user_by_id(user_id)

    def delete_user(self, user_id: str, claims: Claims) -> None:
        """
        Raises:
            NotFoundError: If user doesn't exist
            ForbiddenError: If the role hierarchy forbids the deletion
            StoreError: If persistence fails
        """
        target = self.get_user_by_id(user_id)
        _require_access(claims, target, Action.DELETE)
        try:
            self.store.delete(user_id)
        except StoreFailure as e:
            raise StoreError() from e

    def _insert_validated(self, user: UserModel, password: str) -> None:
        if not user.username or not password:
            raise DomainValidationError("username and password are required")

        user.password_hash = self._validate(user.username, password)
        try:
            self.store.insert(user)
        except IntegrityFailure as e:
            raise DuplicateResourceError(DUPLICATE_USERNAME) from e
        except StoreFailure as e:
            raise StoreError() from e

    def _validate(
        self, username: str, password: str, exclude_id: str | None = None
    ) -> str | None:
        """
        Check that a non-empty username is free and hash a non-empty password.

        Returns the password hash, or None when no password was given.
        The account ``exclude_id`` may keep its own username.
        """
        if username:
            try:
                existing = self.store.get_by_username(username)
            except StoreFailure as e:
                raise StoreError() from e
            if existing is not None and existing.id != exclude_id:
                raise DuplicateResourceError(DUPLICATE_USERNAME)

        if not password:
            return None
        try:
            return self.hasher.hash(password)
        except CredentialFailure as e:
            raise InternalError() from e


def _require_access(claims: Claims, target: UserModel, action: Action) -> None:
    decision = evaluate_access(
        claims.role, claims.actor_id, target.id, Role(target.role), action
    )
    if not decision.allowed:
        raise ForbiddenError(decision.reason)
