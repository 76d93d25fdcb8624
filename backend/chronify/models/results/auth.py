"""Result models for identity operations."""

from pydantic import BaseModel

from chronify.models.domain.user import UserPublic


class LoginResult(BaseModel):
    """A bearer token and the account it was issued for."""

    token: str
    user: UserPublic
