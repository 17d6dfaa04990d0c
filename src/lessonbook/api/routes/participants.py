"""Participant endpoints (admin only)."""

from fastapi import APIRouter, Depends, status

from lessonbook.api.dependencies import EngineDep, StoreDep, require_admin
from lessonbook.api.models import (
    APIResponse,
    ParticipantCreate,
    ParticipantResponse,
    RegistrationResponse,
    participant_to_response,
    registration_to_response,
)
from lessonbook.entities import create_participant

router = APIRouter(
    prefix="/participants",
    tags=["participants"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=APIResponse[list[ParticipantResponse]])
def list_participants(store: StoreDep) -> APIResponse[list[ParticipantResponse]]:
    """List all participants."""
    participants = store.participants.list_all()
    return APIResponse(data=[participant_to_response(p) for p in participants])


@router.post(
    "",
    response_model=APIResponse[ParticipantResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_new_participant(
    participant: ParticipantCreate, store: StoreDep
) -> APIResponse[ParticipantResponse]:
    """Create a participant."""
    created = store.participants.add(create_participant(**participant.model_dump()))
    return APIResponse(data=participant_to_response(created))


@router.get("/{participant_id}", response_model=APIResponse[ParticipantResponse])
def get_participant(participant_id: str, store: StoreDep) -> APIResponse[ParticipantResponse]:
    """Get a participant by ID."""
    return APIResponse(data=participant_to_response(store.participants.require(participant_id)))


@router.get(
    "/{participant_id}/registrations",
    response_model=APIResponse[list[RegistrationResponse]],
)
def list_participant_registrations(
    participant_id: str, store: StoreDep, engine: EngineDep
) -> APIResponse[list[RegistrationResponse]]:
    """List a participant's registrations."""
    store.participants.require(participant_id)
    registrations = engine.registrations_for_participant(participant_id)
    return APIResponse(data=[registration_to_response(r) for r in registrations])
