"""Event domain models."""

from datetime import datetime, timezone
from typing import Annotated, Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

NonBlankText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class EventUpsert(BaseModel):
    """One item of a reconciliation batch.

    ``id`` is kept as raw text: a missing or non-UUID value marks the item as new.
    ``timeline_id`` is accepted for client convenience but never trusted.
    """

    id: Optional[str] = None
    timeline_id: Optional[str] = None
    title: NonBlankText
    card_title: NonBlankText
    card_subtitle: Optional[str] = None
    card_detailed_text: Optional[str] = None

    @field_validator("id", "timeline_id", mode="before")
    @classmethod
    def _raw_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class EventDraft(BaseModel):
    """An event proposed by the generative collaborator."""

    model_config = ConfigDict(populate_by_name=True)

    title: NonBlankText = Field(
        description="The main date or time marker for the event, like 'January 2022', 'Week 1', 'Month 2-3'.",
    )
    card_title: NonBlankText = Field(
        alias="cardTitle",
        description="A short, concise title for the timeline card.",
    )
    card_subtitle: Optional[str] = Field(
        default=None,
        alias="cardSubtitle",
        description="A brief, one-sentence subtitle for the event.",
    )
    card_detailed_text: Optional[str] = Field(
        default=None,
        alias="cardDetailedText",
        description="A detailed, paragraph-length description of the event that occurred.",
    )


class EventCreate(BaseModel):
    """A new event stamped with its target timeline."""

    timeline_id: str
    title: str
    card_title: str
    card_subtitle: Optional[str] = None
    card_detailed_text: Optional[str] = None


class EventChange(BaseModel):
    """An update to an existing event; ``index`` is its position in the submitted batch."""

    index: int
    id: str
    title: str
    card_title: str
    card_subtitle: Optional[str] = None
    card_detailed_text: Optional[str] = None


class Event(BaseModel):
    """A single entry within a timeline."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    timeline_id: str
    title: str
    card_title: str
    card_subtitle: Optional[str] = None
    card_detailed_text: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AIEventRequest(BaseModel):
    """Payload for drafting events from a free-text prompt."""

    prompt: str = ""
