"""Timeline event endpoints: listing, batch upsert, AI drafting and deletion."""

from fastapi import APIRouter, HTTPException

from chronify.dependencies import (
    CurrentUserDep,
    EventDrafterServiceDep,
    EventIdDep,
    EventServiceDep,
    TimelineIdDep,
)
from chronify.models import AIEventRequest, EventsEnvelope, EventUpsert
from chronify.services.errors import BatchUpdateError, GenerationError, StorageError

router = APIRouter()


@router.get("/{timeline_id}/events", response_model=EventsEnvelope)
async def list_events(user_id: CurrentUserDep, timeline_id: TimelineIdDep, service: EventServiceDep):
    try:
        events = await service.list_events(user_id, timeline_id)
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    return EventsEnvelope(events=events)


@router.post("/{timeline_id}/events", response_model=EventsEnvelope)
async def upsert_events(
    user_id: CurrentUserDep,
    timeline_id: TimelineIdDep,
    body: list[EventUpsert],
    service: EventServiceDep,
):
    try:
        result = await service.reconcile_events(user_id, timeline_id, body)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    except BatchUpdateError as exc:
        raise HTTPException(404, {
            "error": "One or more events were not found in this timeline; no changes were applied",
            "failed": [outcome.model_dump(mode="json") for outcome in exc.failures],
            "events": [event.model_dump(mode="json") for event in exc.events],
        }) from exc
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    return EventsEnvelope(events=result.events, created=result.created, updated=result.updated)


@router.post("/{timeline_id}/aievents", response_model=EventsEnvelope)
async def create_ai_events(
    user_id: CurrentUserDep,
    timeline_id: TimelineIdDep,
    body: AIEventRequest,
    service: EventDrafterServiceDep,
):
    try:
        result = await service.draft_events(user_id, timeline_id, body.prompt)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    except GenerationError as exc:
        raise HTTPException(502, "Failed to generate events") from exc
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    return EventsEnvelope(events=result.events, created=result.created)


@router.delete("/{timeline_id}/events/{event_id}", response_model=EventsEnvelope)
async def delete_event(
    user_id: CurrentUserDep,
    timeline_id: TimelineIdDep,
    event_id: EventIdDep,
    service: EventServiceDep,
):
    try:
        deleted = await service.delete_event(user_id, timeline_id, event_id)
        if not deleted:
            raise HTTPException(404, "Event not found")
        events = await service.list_events(user_id, timeline_id)
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    return EventsEnvelope(events=events, message="Event deleted successfully")
