import os
import tempfile
from datetime import timedelta
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_task_manager.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-characters-long-for-testing"
os.environ["ALGORITHM"] = "HS256"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "1440"
os.environ["ROOT_USERNAME"] = "root"
os.environ["ROOT_PASSWORD"] = "RootTest123!"

import uuid

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from task_manager.core.config import settings
from task_manager.core.security import password_hasher, token_issuer
from task_manager.db.base import enable_sqlite_foreign_keys
from task_manager.db.models.user import User as UserModel
from task_manager.domain.claims import Claims
from task_manager.domain.roles import Role
from task_manager.main import app

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(test_engine)
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema and seed the root account
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        test_engine.dispose()
        if os.path.exists(test_db_path):
            os.remove(test_db_path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from task_manager.api.deps import get_db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def make_user(db: Session):
    """Factory that inserts an account directly, bypassing the policies."""

    def _make_user(username: str, role: Role, password: str = "Password123!") -> dict:
        user = UserModel(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=password_hasher.hash(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return {
            "id": user.id,
            "username": user.username,
            "password": password,
            "role": role,
        }

    return _make_user


def token_for(user: dict) -> str:
    return token_issuer.issue(
        user["id"], user["username"], user["role"], timedelta(hours=1)
    )


@pytest.fixture(scope="function")
def claims_for():
    """Build the claims a verified token for the given account would carry."""

    def _claims_for(user: dict) -> Claims:
        return Claims(actor_id=user["id"], role=user["role"], username=user["username"])

    return _claims_for


@pytest.fixture(scope="function")
def root_user(db: Session) -> dict:
    """The root account seeded by migration 001."""
    user = db.query(UserModel).filter(UserModel.username == settings.root_username).first()
    if not user:
        raise RuntimeError("Root user not found. Check migration 001.")

    return {
        "id": user.id,
        "username": user.username,
        "password": settings.root_password,
        "role": Role.ROOT,
    }


@pytest.fixture(scope="function")
def admin_user(make_user) -> dict:
    return make_user("admin", Role.ADMIN)


@pytest.fixture(scope="function")
def other_admin(make_user) -> dict:
    return make_user("other-admin", Role.ADMIN)


@pytest.fixture(scope="function")
def regular_user(make_user) -> dict:
    return make_user("alice", Role.USER)


@pytest.fixture(scope="function")
def other_user(make_user) -> dict:
    return make_user("bob", Role.USER)


@pytest.fixture(scope="function")
def root_token(root_user: dict) -> str:
    return token_for(root_user)


@pytest.fixture(scope="function")
def admin_token(admin_user: dict) -> str:
    return token_for(admin_user)


@pytest.fixture(scope="function")
def user_token(regular_user: dict) -> str:
    return token_for(regular_user)


@pytest.fixture(scope="function")
def other_user_token(other_user: dict) -> str:
    return token_for(other_user)
