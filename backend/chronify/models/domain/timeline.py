"""Timeline domain models."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, timezone
from uuid import uuid4


class TimelineCreate(BaseModel):
    """Payload for creating a timeline."""
    title: str = ""
    description: Optional[str] = None


class TimelineUpdate(BaseModel):
    """Payload for replacing a timeline's title and description."""
    title: str = ""
    description: Optional[str] = None


class Timeline(BaseModel):
    """A named container of ordered events owned by one user."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    title: str
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
