"""Direct registration endpoints used by staff at the front desk."""

from fastapi import APIRouter, Depends, status

from lessonbook.api.dependencies import EngineDep, require_admin
from lessonbook.api.exceptions import OperationFailedError
from lessonbook.api.models import (
    APIResponse,
    OperationResponse,
    ParticipantCreate,
    RegistrationResponse,
    SubstitutionCreate,
    operation_to_response,
    registration_to_response,
)
from lessonbook.entities import create_participant

router = APIRouter(tags=["registrations"], dependencies=[Depends(require_admin)])


@router.post(
    "/lessons/{lesson_id}/registrations",
    response_model=APIResponse[RegistrationResponse],
    status_code=status.HTTP_201_CREATED,
)
def register_participant(
    lesson_id: str, participant: ParticipantCreate, engine: EngineDep
) -> APIResponse[RegistrationResponse]:
    """Register a new participant; waitlisted when the lesson is full."""
    registration = engine.register(lesson_id, create_participant(**participant.model_dump()))
    return APIResponse(data=registration_to_response(registration))


@router.post(
    "/lessons/{lesson_id}/substitutions",
    response_model=APIResponse[RegistrationResponse],
    status_code=status.HTTP_201_CREATED,
)
def register_substitution(
    lesson_id: str, request: SubstitutionCreate, engine: EngineDep
) -> APIResponse[RegistrationResponse]:
    """Register a participant to make up a missed lesson."""
    registration = engine.register_for_substitution(
        lesson_id,
        create_participant(**request.participant.model_dump()),
        request.missed_lesson_id,
    )
    return APIResponse(data=registration_to_response(registration))


@router.post(
    "/registrations/{registration_id}/cancel",
    response_model=APIResponse[OperationResponse],
)
def cancel_registration(registration_id: str, engine: EngineDep) -> APIResponse[OperationResponse]:
    """Cancel a registration before midnight of the lesson day."""
    result = engine.cancel(registration_id)
    if not result.success:
        raise OperationFailedError(result.error or "Cancellation failed")
    return APIResponse(data=operation_to_response(result))
