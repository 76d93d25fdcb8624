"""Registration and login endpoints."""

from fastapi import APIRouter, HTTPException

from chronify.dependencies import UserServiceDep
from chronify.models import LoginRequest, LoginResult, RegisterRequest, UserEnvelope
from chronify.services.errors import AuthenticationError, ConflictError, StorageError

router = APIRouter()


@router.post("/register", response_model=UserEnvelope, status_code=201)
async def register(body: RegisterRequest, service: UserServiceDep):
    try:
        user = await service.register(body)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(409, str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(500, str(exc)) from exc
    return UserEnvelope(data=user, message="User created successfully!")


@router.post("/login", response_model=LoginResult)
async def login(body: LoginRequest, service: UserServiceDep):
    try:
        return await service.login(body)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    except AuthenticationError as exc:
        raise HTTPException(401, str(exc)) from exc
