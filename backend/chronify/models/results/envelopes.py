"""JSON envelopes returned by the HTTP surface."""

from pydantic import BaseModel, Field
from typing import Optional

from chronify.models.domain.event import Event
from chronify.models.domain.timeline import Timeline
from chronify.models.domain.user import UserPublic


class MessageEnvelope(BaseModel):
    message: str


class UserEnvelope(BaseModel):
    data: UserPublic
    message: Optional[str] = None


class TimelineEnvelope(BaseModel):
    data: Timeline
    message: Optional[str] = None


class TimelineListEnvelope(BaseModel):
    data: list[Timeline] = Field(default_factory=list)


class EventsEnvelope(BaseModel):
    events: list[Event] = Field(default_factory=list)
    message: Optional[str] = None
    created: Optional[int] = None
    updated: Optional[int] = None
