"""Result models for event reconciliation."""

from pydantic import BaseModel, Field
from typing import Optional

from chronify.models.domain.event import Event


class UpdateOutcome(BaseModel):
    """Per-item result of the bulk-update pass."""

    index: int
    id: str
    success: bool
    error: Optional[str] = None


class ReconcileResult(BaseModel):
    """The timeline's full event set after a reconciliation."""

    events: list[Event] = Field(default_factory=list)
    created: int = 0
    updated: int = 0
