"""Admin override endpoints."""

from fastapi import APIRouter, Depends, status

from lessonbook.api.dependencies import BulkAssignerDep, EngineDep, require_admin
from lessonbook.api.exceptions import OperationFailedError
from lessonbook.api.models import (
    AdminBulkRegisterRequest,
    AdminRegisterRequest,
    APIResponse,
    BulkAssignmentResponse,
    BulkAssignRequest,
    BulkRegisterResponse,
    OperationResponse,
    bulk_assignment_to_response,
    operation_to_response,
    registration_to_response,
)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post(
    "/registrations",
    response_model=APIResponse[OperationResponse],
    status_code=status.HTTP_201_CREATED,
)
def force_register(
    request: AdminRegisterRequest, engine: EngineDep
) -> APIResponse[OperationResponse]:
    """Register a participant regardless of age group, optionally over capacity."""
    result = engine.admin_register(
        request.lesson_id, request.participant_id, force_capacity=request.force_capacity
    )
    if not result.success:
        raise OperationFailedError(result.error or "Registration failed")
    return APIResponse(data=operation_to_response(result))


@router.post(
    "/registrations/{registration_id}/cancel",
    response_model=APIResponse[OperationResponse],
)
def force_cancel(registration_id: str, engine: EngineDep) -> APIResponse[OperationResponse]:
    """Cancel a registration regardless of the deadline."""
    result = engine.admin_cancel(registration_id)
    if not result.success:
        raise OperationFailedError(result.error or "Cancellation failed")
    return APIResponse(data=operation_to_response(result))


@router.post("/bulk-register", response_model=APIResponse[BulkRegisterResponse])
def bulk_register_participant(
    request: AdminBulkRegisterRequest, engine: EngineDep
) -> APIResponse[BulkRegisterResponse]:
    """Register one participant into several lessons."""
    result = engine.admin_bulk_register(request.participant_id, request.lesson_ids)
    if not result.success:
        raise OperationFailedError("; ".join(result.errors) or "Bulk registration failed")
    return APIResponse(
        data=BulkRegisterResponse(
            registrations=[registration_to_response(r) for r in result.registrations],
            successful=result.successful,
            errors=result.errors,
        )
    )


@router.post("/bulk-assign", response_model=APIResponse[BulkAssignmentResponse])
def bulk_assign_group(
    request: BulkAssignRequest, assigner: BulkAssignerDep
) -> APIResponse[BulkAssignmentResponse]:
    """Register every participant into every lesson, reporting per-pair results."""
    result = assigner.assign_group_to_lessons(request.participant_ids, request.lesson_ids)
    return APIResponse(data=bulk_assignment_to_response(result))
