"""Timeline CRUD and search endpoints."""

from fastapi import APIRouter, HTTPException, Query

from chronify.dependencies import CurrentUserDep, TimelineIdDep, TimelineServiceDep
from chronify.models import (
    MessageEnvelope,
    TimelineCreate,
    TimelineEnvelope,
    TimelineListEnvelope,
    TimelineUpdate,
)
from chronify.services.errors import ConflictError, StorageError

router = APIRouter()


@router.get("", response_model=TimelineListEnvelope)
async def list_timelines(user_id: CurrentUserDep, service: TimelineServiceDep):
    return TimelineListEnvelope(data=await service.list_timelines(user_id))


@router.post("", response_model=TimelineEnvelope, status_code=201)
async def create_timeline(user_id: CurrentUserDep, body: TimelineCreate, service: TimelineServiceDep):
    try:
        timeline = await service.create_timeline(user_id, body)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(409, str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    return TimelineEnvelope(data=timeline, message="Timeline created successfully")


@router.get("/search", response_model=TimelineListEnvelope)
async def search_timelines(
    user_id: CurrentUserDep,
    service: TimelineServiceDep,
    title: str = Query(default=""),
):
    return TimelineListEnvelope(data=await service.search_timelines(user_id, title))


@router.get("/{timeline_id}", response_model=TimelineEnvelope)
async def get_timeline(user_id: CurrentUserDep, timeline_id: TimelineIdDep, service: TimelineServiceDep):
    timeline = await service.get_timeline(user_id, timeline_id)
    if not timeline:
        raise HTTPException(404, "Timeline not found")
    return TimelineEnvelope(data=timeline)


@router.put("/{timeline_id}", response_model=TimelineEnvelope)
async def update_timeline(
    user_id: CurrentUserDep,
    timeline_id: TimelineIdDep,
    body: TimelineUpdate,
    service: TimelineServiceDep,
):
    try:
        timeline = await service.update_timeline(user_id, timeline_id, body)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(409, str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    if not timeline:
        raise HTTPException(404, "Timeline not found")
    return TimelineEnvelope(data=timeline, message="Timeline updated successfully")


@router.delete("/{timeline_id}", response_model=MessageEnvelope)
async def delete_timeline(user_id: CurrentUserDep, timeline_id: TimelineIdDep, service: TimelineServiceDep):
    try:
        deleted = await service.delete_timeline(user_id, timeline_id)
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    if not deleted:
        raise HTTPException(404, "Timeline not found")
    return MessageEnvelope(message="Timeline deleted successfully")
