"""User domain models."""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from uuid import uuid4


class RegisterRequest(BaseModel):
    """Payload for registering a new account."""
    username: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    """Payload for exchanging credentials for a bearer token."""
    email: str = ""
    password: str = ""


class User(BaseModel):
    """A registered account, as stored."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    username: str
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def public(self) -> "UserPublic":
        return UserPublic(
            id=self.id,
            username=self.username,
            email=self.email,
            created_at=self.created_at,
        )


class UserPublic(BaseModel):
    """The account fields safe to return to clients."""
    id: str
    username: str
    email: str
    created_at: datetime
