"""Participant self-service endpoints.

The caller is identified by the ``X-Participant-Id`` header, set by the
session layer in front of this API.
"""

from fastapi import APIRouter, status

from lessonbook.api.dependencies import CallerIdDep, EngineDep
from lessonbook.api.exceptions import OperationFailedError
from lessonbook.api.models import (
    APIResponse,
    AvailableLessonResponse,
    OperationResponse,
    RegistrationResponse,
    SelfRegisterRequest,
    TransferRequest,
    lesson_to_response,
    operation_to_response,
    registration_to_response,
)

router = APIRouter(prefix="/me", tags=["self-service"])


@router.get("/lessons", response_model=APIResponse[list[AvailableLessonResponse]])
def list_available_lessons(
    caller_id: CallerIdDep, engine: EngineDep
) -> APIResponse[list[AvailableLessonResponse]]:
    """List upcoming lessons the caller can still join."""
    available = engine.available_lessons_for_participant(caller_id)
    return APIResponse(
        data=[
            AvailableLessonResponse(
                lesson=lesson_to_response(a.lesson), available_spots=a.available_spots
            )
            for a in available
        ]
    )


@router.get("/registrations", response_model=APIResponse[list[RegistrationResponse]])
def list_my_registrations(
    caller_id: CallerIdDep, engine: EngineDep
) -> APIResponse[list[RegistrationResponse]]:
    """List the caller's registrations."""
    registrations = engine.registrations_for_participant(caller_id)
    return APIResponse(data=[registration_to_response(r) for r in registrations])


@router.post(
    "/registrations",
    response_model=APIResponse[OperationResponse],
    status_code=status.HTTP_201_CREATED,
)
def register_self(
    request: SelfRegisterRequest, caller_id: CallerIdDep, engine: EngineDep
) -> APIResponse[OperationResponse]:
    """Register the caller into a lesson of their age group."""
    result = engine.participant_register(request.lesson_id, caller_id)
    if not result.success:
        raise OperationFailedError(result.error or "Registration failed")
    return APIResponse(data=operation_to_response(result))


@router.post(
    "/registrations/{registration_id}/cancel",
    response_model=APIResponse[OperationResponse],
)
def cancel_own_registration(
    registration_id: str, caller_id: CallerIdDep, engine: EngineDep
) -> APIResponse[OperationResponse]:
    """Cancel one of the caller's registrations before the deadline."""
    result = engine.participant_cancel(registration_id, caller_id)
    if not result.success:
        raise OperationFailedError(result.error or "Cancellation failed")
    return APIResponse(data=operation_to_response(result))


@router.post(
    "/registrations/{registration_id}/transfer",
    response_model=APIResponse[OperationResponse],
)
def transfer_registration(
    registration_id: str,
    request: TransferRequest,
    caller_id: CallerIdDep,
    engine: EngineDep,
) -> APIResponse[OperationResponse]:
    """Move one of the caller's registrations to another lesson."""
    result = engine.transfer(registration_id, request.new_lesson_id, caller_id)
    if not result.success:
        raise OperationFailedError(result.error or "Transfer failed")
    return APIResponse(data=operation_to_response(result))
