"""Result models for service operations."""

from chronify.models.results.backboard import (
    BackboardResult, AssistantCreated, ThreadCreated, ThreadDeleted, ChatResponse,
)
from chronify.models.results.events import UpdateOutcome, ReconcileResult
from chronify.models.results.auth import LoginResult
from chronify.models.results.envelopes import (
    MessageEnvelope, UserEnvelope, TimelineEnvelope, TimelineListEnvelope, EventsEnvelope,
)

__all__ = [
    "BackboardResult", "AssistantCreated", "ThreadCreated", "ThreadDeleted", "ChatResponse",
    "UpdateOutcome", "ReconcileResult",
    "LoginResult",
    "MessageEnvelope", "UserEnvelope", "TimelineEnvelope", "TimelineListEnvelope", "EventsEnvelope",
]
