"""Course CRUD and cohort membership endpoints."""

from fastapi import APIRouter, Depends, status

from lessonbook.api.dependencies import StoreDep, require_admin
from lessonbook.api.models import (
    APIResponse,
    CourseCreate,
    CourseResponse,
    CourseUpdate,
    LessonResponse,
    MessageResponse,
    ParticipantResponse,
    course_to_response,
    lesson_to_response,
    participant_to_response,
)
from lessonbook.entities import ValidationError, create_course, is_valid_hex_color

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=APIResponse[list[CourseResponse]])
def list_courses(store: StoreDep, age_group: str | None = None) -> APIResponse[list[CourseResponse]]:
    """List courses, optionally for one age group."""
    if age_group is not None:
        courses = store.courses.list_by_age_group(age_group)
    else:
        courses = store.courses.list_all()
    return APIResponse(data=[course_to_response(c) for c in courses])


@router.post(
    "",
    response_model=APIResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_new_course(course: CourseCreate, store: StoreDep) -> APIResponse[CourseResponse]:
    """Create a course."""
    created = store.courses.add(
        create_course(
            name=course.name,
            age_group=course.age_group,
            color=course.color,
            description=course.description,
        )
    )
    return APIResponse(data=course_to_response(created))


@router.get("/{course_id}", response_model=APIResponse[CourseResponse])
def get_course(course_id: str, store: StoreDep) -> APIResponse[CourseResponse]:
    """Get a course by ID."""
    return APIResponse(data=course_to_response(store.courses.require(course_id)))


@router.patch(
    "/{course_id}",
    response_model=APIResponse[CourseResponse],
    dependencies=[Depends(require_admin)],
)
def update_course(
    course_id: str, course: CourseUpdate, store: StoreDep
) -> APIResponse[CourseResponse]:
    """Update a course (partial update)."""
    if course.color is not None and not is_valid_hex_color(course.color):
        raise ValidationError("color", "Color must be a valid hex color")
    updated = store.courses.update(
        course_id,
        name=course.name.strip() if course.name is not None else None,
        age_group=course.age_group.strip() if course.age_group is not None else None,
        color=course.color,
        description=course.description,
    )
    return APIResponse(data=course_to_response(updated))


@router.delete(
    "/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_course(course_id: str, store: StoreDep) -> None:
    """Delete a course. Its lessons are kept."""
    store.courses.delete(course_id)


@router.get("/{course_id}/lessons", response_model=APIResponse[list[LessonResponse]])
def list_course_lessons(course_id: str, store: StoreDep) -> APIResponse[list[LessonResponse]]:
    """List the lessons generated from a course."""
    store.courses.require(course_id)
    lessons = store.lessons.list_by_course(course_id)
    return APIResponse(data=[lesson_to_response(lesson) for lesson in lessons])


@router.get(
    "/{course_id}/participants",
    response_model=APIResponse[list[ParticipantResponse]],
    dependencies=[Depends(require_admin)],
)
def list_course_participants(
    course_id: str, store: StoreDep
) -> APIResponse[list[ParticipantResponse]]:
    """List the participants linked to a course."""
    store.courses.require(course_id)
    participants = store.participants.list_by_course(course_id)
    return APIResponse(data=[participant_to_response(p) for p in participants])


@router.put(
    "/{course_id}/participants/{participant_id}",
    response_model=APIResponse[MessageResponse],
    dependencies=[Depends(require_admin)],
)
def link_participant(
    course_id: str, participant_id: str, store: StoreDep
) -> APIResponse[MessageResponse]:
    """Add a participant to a course cohort."""
    store.participants.link_to_course(participant_id, course_id)
    return APIResponse(data=MessageResponse(message="Participant linked to course"))


@router.delete(
    "/{course_id}/participants/{participant_id}",
    response_model=APIResponse[MessageResponse],
    dependencies=[Depends(require_admin)],
)
def unlink_participant(
    course_id: str, participant_id: str, store: StoreDep
) -> APIResponse[MessageResponse]:
    """Remove a participant from a course cohort."""
    removed = store.participants.unlink_from_course(participant_id, course_id)
    message = "Participant unlinked from course" if removed else "Participant was not linked"
    return APIResponse(data=MessageResponse(message=message))
