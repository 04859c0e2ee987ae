from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from mapmarks.domain.users.entities import User


class RegisterRequestDTO(BaseModel):
    """Payload shape only. Username and password rules live in the domain."""

    model_config = ConfigDict(extra="ignore")

    username: str = ""
    password: str = Field("", max_length=1024)


class LoginRequestDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = ""
    password: str = Field("", max_length=1024)


class ProfileUpdateDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str


class UserOutDTO(BaseModel):
    id: int
    username: str
    created_at: datetime | None = Field(None, serialization_alias="createdAt")
    last_login: datetime | None = Field(None, serialization_alias="lastLogin")

    @classmethod
    def from_domain(cls, user: User) -> UserOutDTO:
        return cls(
            id=user.id,
            username=user.username,
            created_at=user.created_at,
            last_login=user.last_login,
        )

    def brief(self) -> dict[str, object]:
        return {"id": self.id, "username": self.username}


class MessageDTO(BaseModel):
    message: str
