from pydantic import BaseModel, ConfigDict, Field

from task_manager.domain.roles import Role


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    role: Role


class UserList(BaseModel):
    count: int
    users: list[User]


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)
    role: Role


class UserUpdate(BaseModel):
    username: str | None = Field(None, max_length=255)
    password: str | None = None
    role: Role | None = None


class Credentials(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class CurrentUser(BaseModel):
    id: str
    username: str
    role: Role
