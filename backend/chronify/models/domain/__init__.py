"""Domain models: users, timelines and the events within them."""

from chronify.models.domain.user import RegisterRequest, LoginRequest, User, UserPublic
from chronify.models.domain.timeline import Timeline, TimelineCreate, TimelineUpdate
from chronify.models.domain.event import (
    AIEventRequest,
    Event,
    EventChange,
    EventCreate,
    EventDraft,
    EventUpsert,
)

__all__ = [
    "RegisterRequest", "LoginRequest", "User", "UserPublic",
    "Timeline", "TimelineCreate", "TimelineUpdate",
    "AIEventRequest", "Event", "EventChange", "EventCreate", "EventDraft", "EventUpsert",
]
