from typing import Any

from sqlalchemy.orm import Session

from task_manager.db.models.user import User as UserModel
from task_manager.repositories.base import store_errors


class SqlUserStore:
    """User persistence over a SQLAlchemy session. Pure data access - no business logic."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, user: UserModel) -> None:
        """Create a new user in the database."""
        with store_errors(self.db):
            self.db.add(user)
            self.db.commit()

    def get_all(self) -> list[UserModel]:
        """Get all users, sorted by username."""
        with store_errors(self.db):
            return self.db.query(UserModel).order_by(UserModel.username).all()

    def get_by_id(self, user_id: str) -> UserModel | None:
        """Get a user by ID."""
        with store_errors(self.db):
            return self.db.query(UserModel).filter(UserModel.id == user_id).first()

    def get_by_username(self, username: str) -> UserModel | None:
        """Get a user by username."""
        with store_errors(self.db):
            return (
                self.db.query(UserModel).filter(UserModel.username == username).first()
            )

    def apply_partial_update(self, user_id: str, changes: dict[str, Any]) -> None:
        """Update user fields. Only provided fields will be updated."""
        with store_errors(self.db):
            self.db.query(UserModel).filter(UserModel.id == user_id).update(changes)
            self.db.commit()

    def delete(self, user_id: str) -> None:
        with store_errors(self.db):
            self.db.query(UserModel).filter(UserModel.id == user_id).delete()
            self.db.commit()
