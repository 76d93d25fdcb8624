"""
Dependency injection for FastAPI routes.

Provides typed service dependencies and the authenticated caller id.
"""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Path, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from chronify.services.auth import AuthService
from chronify.services.errors import AuthenticationError
from chronify.services.event_drafter import EventDrafterService
from chronify.services.events import EventService
from chronify.services.timelines import TimelineService
from chronify.services.users import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_timeline_service(request: Request) -> TimelineService:
    return request.app.state.timeline_service


def get_event_service(request: Request) -> EventService:
    return request.app.state.event_service


def get_event_drafter_service(request: Request) -> EventDrafterService:
    return request.app.state.event_drafter_service


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
TimelineServiceDep = Annotated[TimelineService, Depends(get_timeline_service)]
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
EventDrafterServiceDep = Annotated[EventDrafterService, Depends(get_event_drafter_service)]


def get_current_user_id(
    auth: AuthServiceDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(401, "Missing bearer token", headers={"WWW-Authenticate": "Bearer"})
    try:
        return auth.decode_access_token(credentials.credentials)
    except AuthenticationError as exc:
        raise HTTPException(401, str(exc), headers={"WWW-Authenticate": "Bearer"}) from exc


CurrentUserDep = Annotated[str, Depends(get_current_user_id)]


def _canonical_uuid(raw: str, label: str) -> str:
    try:
        return str(UUID(raw))
    except ValueError as exc:
        raise HTTPException(400, f"Invalid {label} ID") from exc


def get_timeline_id(timeline_id: Annotated[str, Path()]) -> str:
    return _canonical_uuid(timeline_id, "timeline")


def get_event_id(event_id: Annotated[str, Path()]) -> str:
    return _canonical_uuid(event_id, "event")


TimelineIdDep = Annotated[str, Depends(get_timeline_id)]
EventIdDep = Annotated[str, Depends(get_event_id)]
