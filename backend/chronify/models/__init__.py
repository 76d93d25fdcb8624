"""
Chronify models.

Usage:
    from chronify.models import Timeline, TimelineCreate, Event, EventUpsert
    from chronify.models import ReconcileResult, UpdateOutcome, ChatResponse
"""

# --- Domain models ---
from chronify.models.domain import (
    RegisterRequest, LoginRequest, User, UserPublic,
    Timeline, TimelineCreate, TimelineUpdate,
    AIEventRequest, Event, EventChange, EventCreate, EventDraft, EventUpsert,
)

# --- Result models ---
from chronify.models.results import (
    BackboardResult,
    AssistantCreated, ThreadCreated, ThreadDeleted, ChatResponse,
    UpdateOutcome, ReconcileResult,
    LoginResult,
    MessageEnvelope, UserEnvelope, TimelineEnvelope, TimelineListEnvelope, EventsEnvelope,
)

__all__ = [
    # Domain
    "RegisterRequest", "LoginRequest", "User", "UserPublic",
    "Timeline", "TimelineCreate", "TimelineUpdate",
    "AIEventRequest", "Event", "EventChange", "EventCreate", "EventDraft", "EventUpsert",
    # Results
    "BackboardResult",
    "AssistantCreated", "ThreadCreated", "ThreadDeleted", "ChatResponse",
    "UpdateOutcome", "ReconcileResult",
    "LoginResult",
    "MessageEnvelope", "UserEnvelope", "TimelineEnvelope", "TimelineListEnvelope", "EventsEnvelope",
]
