"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lessonbook import __version__
from lessonbook.api.dependencies import (
    close_engine,
    close_store,
    init_engine,
    init_settings,
    init_store,
)
from lessonbook.api.exceptions import OperationFailedError
from lessonbook.api.models import APIResponse
from lessonbook.api.routes import admin, courses, imports, lessons, me, participants, registrations
from lessonbook.config import Settings
from lessonbook.entities import ValidationError
from lessonbook.intake import IntakeError
from lessonbook.notifications import NotificationDispatcher, create_notifier
from lessonbook.registration import (
    DuplicateRegistrationError,
    RegistrationEngine,
    RegistrationPolicy,
)
from lessonbook.store import (
    CourseNotFoundError,
    InvalidStatusTransitionError,
    LessonNotFoundError,
    ParticipantExistsError,
    ParticipantNotFoundError,
    RegistrationNotFoundError,
    StoreError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

_NOT_FOUND_MESSAGES: dict[type[StoreError], str] = {
    LessonNotFoundError: "Lesson not found",
    ParticipantNotFoundError: "Participant not found",
    CourseNotFoundError: "Course not found",
    RegistrationNotFoundError: "Registration not found",
}


def _error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=error).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    settings = app.state.settings or Settings.from_env()
    init_settings(settings)
    store = init_store(settings.db_path)

    dispatcher = NotificationDispatcher(create_notifier(settings))
    engine = RegistrationEngine(
        store=store,
        dispatcher=dispatcher,
        policy=RegistrationPolicy(allow_duplicate_direct=settings.allow_duplicate_direct),
    )
    init_engine(engine)
    if settings.admin_token is None:
        logger.warning("LESSONBOOK_ADMIN_TOKEN is not set, admin routes will reject all requests")

    yield
    # Shutdown
    close_engine()
    close_store()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. Read from the environment at startup if omitted.
    """
    app = FastAPI(
        title="Lessonbook API",
        description="REST API for lesson scheduling and registrations",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        response = _error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(LessonNotFoundError)
    @app.exception_handler(ParticipantNotFoundError)
    @app.exception_handler(CourseNotFoundError)
    @app.exception_handler(RegistrationNotFoundError)
    async def not_found_handler(_request: Request, exc: StoreError) -> JSONResponse:
        return _error_response(
            status.HTTP_404_NOT_FOUND, _NOT_FOUND_MESSAGES.get(type(exc), "Not found")
        )

    @app.exception_handler(ParticipantExistsError)
    async def participant_exists_handler(
        _request: Request, _exc: ParticipantExistsError
    ) -> JSONResponse:
        return _error_response(status.HTTP_409_CONFLICT, "Participant already exists")

    @app.exception_handler(InvalidStatusTransitionError)
    async def invalid_transition_handler(
        _request: Request, exc: InvalidStatusTransitionError
    ) -> JSONResponse:
        return _error_response(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(DuplicateRegistrationError)
    async def duplicate_registration_handler(
        _request: Request, _exc: DuplicateRegistrationError
    ) -> JSONResponse:
        return _error_response(
            status.HTTP_409_CONFLICT, "Participant is already registered for this lesson"
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
        return _error_response(422, f"{exc.field}: {exc.message}")

    @app.exception_handler(OperationFailedError)
    async def operation_failed_handler(
        _request: Request, exc: OperationFailedError
    ) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, exc.error)

    @app.exception_handler(IntakeError)
    async def intake_error_handler(_request: Request, exc: IntakeError) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(StoreError)
    async def store_error_handler(_request: Request, _exc: StoreError) -> JSONResponse:
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.get("/api/v1/health", tags=["health"])
    def health() -> APIResponse[dict[str, str]]:
        """Liveness probe."""
        return APIResponse(data={"status": "ok"})

    # Include routers
    app.include_router(lessons.router, prefix="/api/v1")
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(participants.router, prefix="/api/v1")
    app.include_router(registrations.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")
    app.include_router(me.router, prefix="/api/v1")
    app.include_router(imports.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
