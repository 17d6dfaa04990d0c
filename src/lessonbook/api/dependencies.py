"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

import secrets
from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from lessonbook.config import Settings
from lessonbook.intake import ExcelParticipantLoader
from lessonbook.registration import BulkAssigner, RegistrationEngine
from lessonbook.scheduling import CourseScheduler
from lessonbook.store import Store

# Global Settings instance (initialized on app startup)
_settings: Settings | None = None


def init_settings(settings: Settings) -> Settings:
    """Initialize the global Settings instance."""
    global _settings  # noqa: PLW0603
    _settings = settings
    return _settings


def get_settings() -> Settings:
    """Dependency that provides the Settings instance."""
    if _settings is None:
        raise RuntimeError("Settings not initialized. Call init_settings() first.")
    return _settings


# Type alias for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Global Store instance (initialized on app startup)
_store: Store | None = None


def init_store(db_path: str = "lessonbook.db") -> Store:
    """Initialize the global Store instance."""
    global _store  # noqa: PLW0603
    _store = Store(db_path)
    return _store


def close_store() -> None:
    """Close the global Store instance."""
    global _store  # noqa: PLW0603
    if _store is not None:
        _store.close()
        _store = None


def get_store() -> Generator[Store, None, None]:
    """Dependency that provides the Store instance."""
    if _store is None:
        raise RuntimeError("Store not initialized. Call init_store() first.")
    yield _store


# Type alias for dependency injection
StoreDep = Annotated[Store, Depends(get_store)]

# Global RegistrationEngine instance (initialized on app startup)
_engine: RegistrationEngine | None = None


def init_engine(engine: RegistrationEngine) -> None:
    """Initialize the global RegistrationEngine instance."""
    global _engine  # noqa: PLW0603
    _engine = engine


def close_engine() -> None:
    """Drain pending notifications and drop the global RegistrationEngine."""
    global _engine  # noqa: PLW0603
    if _engine is not None and _engine.dispatcher is not None:
        _engine.dispatcher.shutdown(wait=True)
    _engine = None


def get_engine() -> Generator[RegistrationEngine, None, None]:
    """Dependency that provides the RegistrationEngine instance."""
    if _engine is None:
        raise RuntimeError("RegistrationEngine not initialized. Call init_engine() first.")
    yield _engine


# Type alias for dependency injection
EngineDep = Annotated[RegistrationEngine, Depends(get_engine)]


def get_course_scheduler(store: StoreDep) -> CourseScheduler:
    """Dependency that provides a CourseScheduler over the global Store."""
    return CourseScheduler(store)


CourseSchedulerDep = Annotated[CourseScheduler, Depends(get_course_scheduler)]


def get_bulk_assigner(store: StoreDep, engine: EngineDep) -> BulkAssigner:
    """Dependency that provides a BulkAssigner sharing the engine's lesson locks."""
    return BulkAssigner(store, locks=engine.locks)


BulkAssignerDep = Annotated[BulkAssigner, Depends(get_bulk_assigner)]


def get_participant_loader() -> ExcelParticipantLoader:
    """Dependency that provides the spreadsheet loader."""
    return ExcelParticipantLoader()


ParticipantLoaderDep = Annotated[ExcelParticipantLoader, Depends(get_participant_loader)]


# Authentication


def require_admin(
    settings: SettingsDep,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Reject the request unless it carries the configured admin bearer token."""
    expected = settings.admin_token
    scheme, _, token = (authorization or "").partition(" ")
    if (
        expected is None
        or scheme.lower() != "bearer"
        or not secrets.compare_digest(token.encode(), expected.encode())
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_caller_id(
    x_participant_id: Annotated[str | None, Header()] = None,
) -> str:
    """Identity of the participant making a self-service request."""
    if not x_participant_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Participant-Id header",
        )
    return x_participant_id


CallerIdDep = Annotated[str, Depends(get_caller_id)]
