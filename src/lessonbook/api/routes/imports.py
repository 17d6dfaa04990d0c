"""Spreadsheet import endpoint."""

from fastapi import APIRouter, Depends, UploadFile
from fastapi.concurrency import run_in_threadpool

from lessonbook.api.dependencies import EngineDep, ParticipantLoaderDep, StoreDep, require_admin
from lessonbook.api.models import APIResponse, ImportResponse, registration_to_response

router = APIRouter(tags=["import"], dependencies=[Depends(require_admin)])


@router.post("/lessons/{lesson_id}/import", response_model=APIResponse[ImportResponse])
async def import_participants(
    lesson_id: str,
    file: UploadFile,
    store: StoreDep,
    engine: EngineDep,
    loader: ParticipantLoaderDep,
) -> APIResponse[ImportResponse]:
    """Register every participant listed in an uploaded ``.xlsx`` file."""
    store.lessons.require(lesson_id)
    data = await file.read()
    participants = await run_in_threadpool(loader.parse_bytes, data)
    registrations = await run_in_threadpool(engine.bulk_register, lesson_id, participants)
    return APIResponse(
        data=ImportResponse(
            imported=len(registrations),
            registrations=[registration_to_response(r) for r in registrations],
        )
    )
