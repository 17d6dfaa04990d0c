"""Pydantic models for REST API."""

import datetime as dt
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


class MessageResponse(BaseModel):
    """Response carrying only a message."""

    message: str


class CountResponse(BaseModel):
    """Response for bulk operations that affect many records."""

    count: int


# Course models


class CourseCreate(BaseModel):
    """Request model for creating a course."""

    name: str
    age_group: str
    color: str
    description: str | None = None


class CourseUpdate(BaseModel):
    """Request model for updating a course (partial update)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    age_group: str | None = Field(default=None, min_length=1, max_length=50)
    color: str | None = None
    description: str | None = None


class CourseResponse(BaseModel):
    """Response model for a course."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    age_group: str
    color: str
    description: str | None
    created_at: dt.datetime


def course_to_response(course: Any) -> CourseResponse:
    """Convert a Course model to CourseResponse."""
    return CourseResponse.model_validate(course)


# Lesson models


class LessonCreate(BaseModel):
    """Request model for creating a single lesson."""

    title: str = Field(..., min_length=1, max_length=255)
    date: dt.date
    day_of_week: str = Field(..., min_length=1, max_length=20)
    time: str = Field(..., min_length=1, max_length=20)
    location: str = Field(..., min_length=1, max_length=255)
    age_group: str = Field(..., min_length=1, max_length=50)
    capacity: int = Field(..., ge=1)
    course_id: str | None = None


class LessonBulkCreate(BaseModel):
    """Request model for creating course lessons on explicit dates."""

    course_id: str
    title: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    time: str = Field(..., min_length=1, max_length=20)
    day_of_week: str = Field(..., min_length=1, max_length=20)
    capacity: int = Field(..., ge=1)
    dates: list[dt.date]


class LessonRecurringCreate(BaseModel):
    """Request model for creating weekly course lessons."""

    course_id: str
    title: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    time: str = Field(..., min_length=1, max_length=20)
    day_of_week: str = Field(..., min_length=1, max_length=20)
    capacity: int = Field(..., ge=1)
    start_date: dt.date
    weeks_count: int = Field(..., ge=1, le=104)


class LessonUpdateRequest(BaseModel):
    """Request model for editing lesson fields (partial update)."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    date: dt.date | None = None
    day_of_week: str | None = Field(default=None, min_length=1, max_length=20)
    time: str | None = Field(default=None, min_length=1, max_length=20)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    age_group: str | None = Field(default=None, min_length=1, max_length=50)
    capacity: int | None = Field(default=None, ge=1)


class LessonDayUpdate(BaseModel):
    """Request model for editing every lesson on a day of the week."""

    day_of_week: str
    changes: LessonUpdateRequest


class LessonDayDelete(BaseModel):
    """Request model for deleting every lesson on a day of the week."""

    day_of_week: str


class LessonResponse(BaseModel):
    """Response model for a lesson."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    date: dt.date
    day_of_week: str
    time: str
    location: str
    age_group: str
    capacity: int
    enrolled_count: int
    available_spots: int
    course_id: str | None


def lesson_to_response(lesson: Any) -> LessonResponse:
    """Convert a Lesson model to LessonResponse."""
    return LessonResponse.model_validate(lesson)


# Participant models


class ParticipantCreate(BaseModel):
    """Request model for a participant."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: str = Field(..., min_length=1, max_length=50)
    age_group: str = Field(..., min_length=1, max_length=50)


class ParticipantResponse(BaseModel):
    """Response model for a participant."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str
    age_group: str
    created_at: dt.datetime


def participant_to_response(participant: Any) -> ParticipantResponse:
    """Convert a Participant model to ParticipantResponse."""
    return ParticipantResponse.model_validate(participant)


# Registration models


class RegistrationResponse(BaseModel):
    """Response model for a registration."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    lesson_id: str
    participant_id: str
    registered_at: dt.datetime
    status: str
    missed_lesson_id: str | None


def registration_to_response(registration: Any) -> RegistrationResponse:
    """Convert a Registration model to RegistrationResponse."""
    return RegistrationResponse.model_validate(registration)


class SubstitutionCreate(BaseModel):
    """Request model for a make-up registration."""

    participant: ParticipantCreate
    missed_lesson_id: str


class SelfRegisterRequest(BaseModel):
    """Request model for a participant registering themselves."""

    lesson_id: str


class TransferRequest(BaseModel):
    """Request model for moving a registration to another lesson."""

    new_lesson_id: str


class OperationResponse(BaseModel):
    """Response model for a successful admin or self-service operation."""

    message: str | None = None
    registration: RegistrationResponse | None = None
    new_registration: RegistrationResponse | None = None
    admin_override: str | None = None


def operation_to_response(result: Any) -> OperationResponse:
    """Convert a successful OperationResult to OperationResponse."""
    return OperationResponse(
        message=result.message,
        registration=(
            registration_to_response(result.registration) if result.registration else None
        ),
        new_registration=(
            registration_to_response(result.new_registration)
            if result.new_registration
            else None
        ),
        admin_override=result.admin_override.reason if result.admin_override else None,
    )


class AvailableLessonResponse(BaseModel):
    """Response model for a lesson a participant can still join."""

    lesson: LessonResponse
    available_spots: int


# Admin models


class AdminRegisterRequest(BaseModel):
    """Request model for an admin registration."""

    lesson_id: str
    participant_id: str
    force_capacity: bool = False


class AdminBulkRegisterRequest(BaseModel):
    """Request model for registering one participant into many lessons."""

    participant_id: str
    lesson_ids: list[str] = Field(..., min_length=1)


class BulkRegisterResponse(BaseModel):
    """Response model for an admin bulk registration."""

    model_config = ConfigDict(from_attributes=True)

    registrations: list[RegistrationResponse]
    successful: int
    errors: list[str]


class BulkAssignRequest(BaseModel):
    """Request model for assigning a cohort to lessons."""

    participant_ids: list[str] = Field(..., min_length=1)
    lesson_ids: list[str] = Field(..., min_length=1)


class AssignmentErrorResponse(BaseModel):
    """Response model for one failed participant/lesson pair."""

    model_config = ConfigDict(from_attributes=True)

    participant_id: str
    lesson_id: str
    error: str


class BulkAssignmentResponse(BaseModel):
    """Response model for a cohort assignment."""

    model_config = ConfigDict(from_attributes=True)

    total_registrations: int
    successful: int
    skipped: int
    waitlisted: int
    errors: list[AssignmentErrorResponse]


def bulk_assignment_to_response(result: Any) -> BulkAssignmentResponse:
    """Convert a BulkAssignmentResult to BulkAssignmentResponse."""
    return BulkAssignmentResponse.model_validate(result)


class ImportResponse(BaseModel):
    """Response model for a spreadsheet import."""

    imported: int
    registrations: list[RegistrationResponse]
