"""Lesson endpoints, including course-based bulk creation."""

from fastapi import APIRouter, Depends, status

from lessonbook.api.dependencies import (
    CourseSchedulerDep,
    EngineDep,
    StoreDep,
    require_admin,
)
from lessonbook.api.models import (
    APIResponse,
    CountResponse,
    LessonBulkCreate,
    LessonCreate,
    LessonDayDelete,
    LessonDayUpdate,
    LessonRecurringCreate,
    LessonResponse,
    LessonUpdateRequest,
    RegistrationResponse,
    lesson_to_response,
    registration_to_response,
)
from lessonbook.entities import create_lesson
from lessonbook.scheduling import LessonBatch, RecurringLessonBatch
from lessonbook.store import LessonFilter, LessonUpdate

router = APIRouter(prefix="/lessons", tags=["lessons"])


def _to_update(changes: LessonUpdateRequest) -> LessonUpdate:
    return LessonUpdate(**changes.model_dump(exclude_none=True))


@router.get("", response_model=APIResponse[list[LessonResponse]])
def list_lessons(
    store: StoreDep,
    age_group: str | None = None,
    day_of_week: str | None = None,
    course_id: str | None = None,
) -> APIResponse[list[LessonResponse]]:
    """List lessons, optionally filtered by age group, day or course."""
    clauses = []
    if age_group is not None:
        clauses.append(LessonFilter.by_age_group(age_group))
    if day_of_week is not None:
        clauses.append(LessonFilter.by_day_of_week(day_of_week))
    if course_id is not None:
        clauses.append(LessonFilter.by_course(course_id))

    if not clauses:
        lessons = store.lessons.list_all()
    else:
        predicate = clauses[0]
        for clause in clauses[1:]:
            predicate = predicate & clause
        lessons = store.lessons.list_matching(predicate)
    return APIResponse(data=[lesson_to_response(lesson) for lesson in lessons])


@router.get("/substitutions", response_model=APIResponse[list[LessonResponse]])
def list_substitution_lessons(
    age_group: str, engine: EngineDep
) -> APIResponse[list[LessonResponse]]:
    """List lessons of an age group that still have a free spot."""
    lessons = engine.available_substitution_lessons(age_group)
    return APIResponse(data=[lesson_to_response(lesson) for lesson in lessons])


@router.post(
    "",
    response_model=APIResponse[LessonResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_single_lesson(lesson: LessonCreate, store: StoreDep) -> APIResponse[LessonResponse]:
    """Create one lesson."""
    if lesson.course_id is not None:
        store.courses.require(lesson.course_id)
    created = store.lessons.add(create_lesson(**lesson.model_dump()))
    return APIResponse(data=lesson_to_response(created))


@router.post(
    "/bulk",
    response_model=APIResponse[list[LessonResponse]],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def bulk_create_lessons(
    batch: LessonBulkCreate, scheduler: CourseSchedulerDep
) -> APIResponse[list[LessonResponse]]:
    """Create one course lesson per given date."""
    created = scheduler.bulk_create_lessons(LessonBatch(**batch.model_dump()))
    return APIResponse(data=[lesson_to_response(lesson) for lesson in created])


@router.post(
    "/recurring",
    response_model=APIResponse[list[LessonResponse]],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_recurring_lessons(
    batch: LessonRecurringCreate, scheduler: CourseSchedulerDep
) -> APIResponse[list[LessonResponse]]:
    """Create weekly course lessons."""
    created = scheduler.create_recurring_lessons(RecurringLessonBatch(**batch.model_dump()))
    return APIResponse(data=[lesson_to_response(lesson) for lesson in created])


@router.post(
    "/bulk-update",
    response_model=APIResponse[CountResponse],
    dependencies=[Depends(require_admin)],
)
def bulk_update_lessons(request: LessonDayUpdate, store: StoreDep) -> APIResponse[CountResponse]:
    """Apply the same edits to every lesson on a day of the week."""
    count = store.lessons.bulk_update(
        LessonFilter.by_day_of_week(request.day_of_week), _to_update(request.changes)
    )
    return APIResponse(data=CountResponse(count=count))


@router.post(
    "/bulk-delete",
    response_model=APIResponse[CountResponse],
    dependencies=[Depends(require_admin)],
)
def bulk_delete_lessons(request: LessonDayDelete, store: StoreDep) -> APIResponse[CountResponse]:
    """Delete every lesson on a day of the week."""
    count = store.lessons.bulk_delete(LessonFilter.by_day_of_week(request.day_of_week))
    return APIResponse(data=CountResponse(count=count))


@router.get("/{lesson_id}", response_model=APIResponse[LessonResponse])
def get_lesson(lesson_id: str, store: StoreDep) -> APIResponse[LessonResponse]:
    """Get a lesson by ID."""
    lesson = store.lessons.require(lesson_id)
    return APIResponse(data=lesson_to_response(lesson))


@router.patch(
    "/{lesson_id}",
    response_model=APIResponse[LessonResponse],
    dependencies=[Depends(require_admin)],
)
def update_lesson(
    lesson_id: str, changes: LessonUpdateRequest, store: StoreDep
) -> APIResponse[LessonResponse]:
    """Edit lesson fields (partial update)."""
    updated = store.lessons.update(lesson_id, _to_update(changes))
    return APIResponse(data=lesson_to_response(updated))


@router.delete(
    "/{lesson_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_lesson(lesson_id: str, store: StoreDep) -> None:
    """Delete a lesson and its registrations."""
    store.lessons.delete(lesson_id)


@router.get(
    "/{lesson_id}/registrations",
    response_model=APIResponse[list[RegistrationResponse]],
    dependencies=[Depends(require_admin)],
)
def list_lesson_registrations(
    lesson_id: str, store: StoreDep, engine: EngineDep
) -> APIResponse[list[RegistrationResponse]]:
    """List a lesson's registrations in registration order."""
    store.lessons.require(lesson_id)
    registrations = engine.registrations_for_lesson(lesson_id)
    return APIResponse(data=[registration_to_response(r) for r in registrations])
