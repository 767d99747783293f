"""create users table and seed the root account

Revision ID: 001
Revises:
Create Date: 2025-01-22 21:00:00.000000

"""

import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from passlib.context import CryptContext

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('user', 'admin', 'root')", name="ck_users_role"),
    )
    op.create_index("ix_users_id", "users", ["id"], unique=False)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # Get settings from environment (will be loaded by Alembic env.py)
    from task_manager.core.config import settings

    # The root account only ever comes from here, never from the API
    op.execute(
        sa.text(
            """
            INSERT INTO users (id, username, password_hash, role)
            VALUES (:id, :username, :password_hash, 'root')
            """
        ).bindparams(
            id=str(uuid.uuid4()),
            username=settings.root_username,
            password_hash=pwd_context.hash(settings.root_password),
        )
    )


def downgrade() -> None:
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
