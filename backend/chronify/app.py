"""
Chronify - FastAPI Backend

Run with: uvicorn chronify.app:create_app --factory
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chronify.config import DEFAULT_JWT_SECRET_KEY, settings
from chronify.database.db import init_db
from chronify.logging import setup_logging, get_logger
from chronify.routers import events, timelines, users
from chronify.services.auth import AuthService
from chronify.services.backboard import BackboardService
from chronify.services.event_drafter import EventDrafterService
from chronify.services.events import EventService
from chronify.services.timelines import TimelineService
from chronify.services.users import UserService

logger = get_logger('main')


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.DEBUG)
    logger.info("Starting Chronify API")

    if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET_KEY:
        logger.warning("JWT_SECRET_KEY not set - access tokens are signed with the default key")

    await init_db(settings.DATABASE_PATH)
    logger.info("Database initialized")

    # Initialize services
    backboard = BackboardService()
    await backboard.initialize()
    app.state.backboard = backboard

    app.state.auth_service = AuthService()
    app.state.user_service = UserService(
        db_path=settings.DATABASE_PATH,
        auth=app.state.auth_service,
    )
    app.state.timeline_service = TimelineService(
        db_path=settings.DATABASE_PATH,
    )
    app.state.event_service = EventService(
        db_path=settings.DATABASE_PATH,
        timeline_service=app.state.timeline_service,
    )
    app.state.event_drafter_service = EventDrafterService(
        backboard=backboard,
        event_service=app.state.event_service,
    )
    logger.info("Services initialized")

    yield

    logger.info("Shutting down application")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(content),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.debug(f"Rejected request to {request.url.path}: {errors}")
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    detail = f"{location}: {message}" if location else message
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request payload ({detail})"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Chronify API",
        description="Timelines of events, with AI-assisted drafting",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(users.router, tags=["Users"])
    app.include_router(timelines.router, prefix="/timelines", tags=["Timelines"])
    app.include_router(events.router, prefix="/timelines", tags=["Events"])

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "chronify",
            "backboard_available": app.state.backboard.is_available if hasattr(app.state, 'backboard') else False,
        }

    return app
