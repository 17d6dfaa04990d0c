"""Unit tests for RegistrationEngine participant self-service."""

import datetime as dt

import pytest

from lessonbook.registration import RegistrationEngine
from lessonbook.registration.engine import DEADLINE_MESSAGE
from lessonbook.store import ParticipantNotFoundError, Store

LESSON_DAY = dt.date(2099, 6, 15)
EVENING_BEFORE = dt.datetime(2099, 6, 14, 20, 0)
MORNING_OF = dt.datetime(2099, 6, 15, 7, 0)


@pytest.fixture
def engine(store: Store) -> RegistrationEngine:
    return RegistrationEngine(store)


@pytest.mark.unit
class TestParticipantRegister:
    """Tests for participant_register."""

    def test_confirmed(self, engine, make_lesson, make_participant) -> None:
        result = engine.participant_register(make_lesson().id, make_participant().id)

        assert result.success
        assert result.message == "Registration confirmed"

    def test_waitlisted(self, engine, make_lesson, make_participant) -> None:
        lesson = make_lesson(capacity=1)
        engine.participant_register(lesson.id, make_participant("Ann").id)

        result = engine.participant_register(lesson.id, make_participant("Bob").id)

        assert result.success
        assert result.message == "Lesson is full, you have been added to the waitlist"

    def test_age_group_mismatch(self, engine, make_lesson, make_participant) -> None:
        lesson = make_lesson(age_group="3-4 years")

        result = engine.participant_register(lesson.id, make_participant().id)

        assert not result.success
        assert result.error == (
            "This lesson is for age group 3-4 years, "
            "but the participant is in age group 1-2 years"
        )

    def test_duplicate_refused(self, engine, make_lesson, make_participant) -> None:
        lesson = make_lesson()
        participant = make_participant()
        engine.participant_register(lesson.id, participant.id)

        result = engine.participant_register(lesson.id, participant.id)

        assert not result.success
        assert result.error == "You are already registered for this lesson"

    def test_can_register_again_after_cancelling(
        self, engine, make_lesson, make_participant
    ) -> None:
        lesson = make_lesson(date=LESSON_DAY)
        participant = make_participant()
        first = engine.participant_register(lesson.id, participant.id)
        engine.participant_cancel(first.registration.id, participant.id, EVENING_BEFORE)

        assert engine.participant_register(lesson.id, participant.id).success

    def test_unknown_participant(self, engine, make_lesson) -> None:
        result = engine.participant_register(make_lesson().id, "ghost")
        assert result.error == "Participant not found"

    def test_unknown_lesson(self, engine, make_participant) -> None:
        result = engine.participant_register("nope", make_participant().id)
        assert result.error == "Lesson not found"


@pytest.mark.unit
class TestParticipantCancel:
    """Tests for participant_cancel."""

    def test_own_registration(self, engine, make_lesson, make_participant) -> None:
        participant = make_participant()
        registered = engine.participant_register(make_lesson(date=LESSON_DAY).id, participant.id)

        result = engine.participant_cancel(
            registered.registration.id, participant.id, EVENING_BEFORE
        )

        assert result.success
        assert result.registration.status == "cancelled"

    def test_someone_elses_registration(self, engine, make_lesson, make_participant) -> None:
        owner = make_participant("Ann")
        registered = engine.participant_register(make_lesson().id, owner.id)

        result = engine.participant_cancel(
            registered.registration.id, make_participant("Bob").id, EVENING_BEFORE
        )

        assert not result.success
        assert result.error == "You are not authorized to cancel this registration"

    def test_after_deadline(self, engine, make_lesson, make_participant) -> None:
        participant = make_participant()
        registered = engine.participant_register(make_lesson(date=LESSON_DAY).id, participant.id)

        result = engine.participant_cancel(registered.registration.id, participant.id, MORNING_OF)

        assert result.error == DEADLINE_MESSAGE

    def test_unknown_registration(self, engine, make_participant) -> None:
        result = engine.participant_cancel("nope", make_participant().id)
        assert result.error == "Registration not found"


@pytest.mark.unit
class TestTransfer:
    """Tests for transfer."""

    def test_moves_registration(
        self, engine, store: Store, make_lesson, make_participant
    ) -> None:
        old = make_lesson(title="Monday Gym", date=LESSON_DAY)
        new = make_lesson(title="Friday Gym", date=LESSON_DAY)
        participant = make_participant()
        registered = engine.participant_register(old.id, participant.id)

        result = engine.transfer(registered.registration.id, new.id, participant.id, EVENING_BEFORE)

        assert result.success
        assert result.message == "Transferred to Friday Gym"
        assert result.registration.status == "cancelled"
        assert result.new_registration.lesson_id == new.id
        assert result.new_registration.status == "confirmed"
        assert store.lessons.require(old.id).enrolled_count == 0
        assert store.lessons.require(new.id).enrolled_count == 1

    def test_into_full_lesson_waitlists(
        self, engine, store: Store, make_lesson, make_participant
    ) -> None:
        old = make_lesson(date=LESSON_DAY)
        new = make_lesson(capacity=1, date=LESSON_DAY)
        engine.participant_register(new.id, make_participant("Ann").id)
        bob = make_participant("Bob")
        registered = engine.participant_register(old.id, bob.id)

        result = engine.transfer(registered.registration.id, new.id, bob.id, EVENING_BEFORE)

        assert result.new_registration.status == "waitlist"
        assert store.lessons.require(new.id).enrolled_count == 1

    def test_age_group_mismatch_leaves_old_registration(
        self, engine, store: Store, make_lesson, make_participant
    ) -> None:
        old = make_lesson(date=LESSON_DAY)
        new = make_lesson(age_group="3-4 years", date=LESSON_DAY)
        participant = make_participant()
        registered = engine.participant_register(old.id, participant.id)

        result = engine.transfer(registered.registration.id, new.id, participant.id, EVENING_BEFORE)

        assert not result.success
        assert "age group 3-4 years" in result.error
        assert store.registrations.require(registered.registration.id).status == "confirmed"
        assert store.lessons.require(old.id).enrolled_count == 1

    def test_after_deadline_changes_nothing(
        self, engine, store: Store, make_lesson, make_participant
    ) -> None:
        old = make_lesson(date=LESSON_DAY)
        new = make_lesson(date=dt.date(2099, 6, 22))
        participant = make_participant()
        registered = engine.participant_register(old.id, participant.id)

        result = engine.transfer(registered.registration.id, new.id, participant.id, MORNING_OF)

        assert result.error == DEADLINE_MESSAGE
        assert store.registrations.require(registered.registration.id).status == "confirmed"
        assert store.registrations.list_by_lesson(new.id) == []
        assert store.lessons.require(new.id).enrolled_count == 0

    def test_already_registered_for_new_lesson(
        self, engine, store: Store, make_lesson, make_participant
    ) -> None:
        old = make_lesson(date=LESSON_DAY)
        new = make_lesson(date=LESSON_DAY)
        participant = make_participant()
        registered = engine.participant_register(old.id, participant.id)
        engine.participant_register(new.id, participant.id)

        result = engine.transfer(registered.registration.id, new.id, participant.id, EVENING_BEFORE)

        assert result.error == "You are already registered for the new lesson"
        assert store.registrations.require(registered.registration.id).status == "confirmed"

    def test_someone_elses_registration(self, engine, make_lesson, make_participant) -> None:
        registered = engine.participant_register(make_lesson().id, make_participant("Ann").id)

        result = engine.transfer(
            registered.registration.id, make_lesson().id, make_participant("Bob").id
        )

        assert result.error == "You are not authorized to transfer this registration"

    def test_cancelled_registration(self, engine, make_lesson, make_participant) -> None:
        participant = make_participant()
        registered = engine.participant_register(make_lesson(date=LESSON_DAY).id, participant.id)
        engine.participant_cancel(registered.registration.id, participant.id, EVENING_BEFORE)

        result = engine.transfer(
            registered.registration.id, make_lesson().id, participant.id, EVENING_BEFORE
        )

        assert result.error == "Registration is already cancelled"

    def test_unknown_new_lesson(self, engine, make_lesson, make_participant) -> None:
        participant = make_participant()
        registered = engine.participant_register(make_lesson().id, participant.id)

        result = engine.transfer(registered.registration.id, "nope", participant.id)

        assert result.error == "Lesson not found"


@pytest.mark.unit
class TestAvailableLessons:
    """Tests for available_lessons_for_participant."""

    def test_lists_upcoming_open_lessons_of_age_group(
        self, engine, make_lesson, make_participant
    ) -> None:
        upcoming = make_lesson(capacity=2, date=dt.date(2030, 1, 10))
        make_lesson(date=dt.date(2029, 12, 1))
        make_lesson(age_group="3-4 years", date=dt.date(2030, 1, 10))
        full = make_lesson(capacity=1, date=dt.date(2030, 1, 10))
        engine.participant_register(full.id, make_participant("Ann").id)

        result = engine.available_lessons_for_participant(
            make_participant("Bob").id, today=dt.date(2030, 1, 1)
        )

        assert [a.lesson.id for a in result] == [upcoming.id]
        assert result[0].available_spots == 2

    def test_excludes_lessons_with_any_registration(
        self, engine, make_lesson, make_participant
    ) -> None:
        registered = make_lesson(date=LESSON_DAY)
        cancelled = make_lesson(date=LESSON_DAY)
        free = make_lesson(date=LESSON_DAY)
        participant = make_participant()
        engine.participant_register(registered.id, participant.id)
        result = engine.participant_register(cancelled.id, participant.id)
        engine.participant_cancel(result.registration.id, participant.id, EVENING_BEFORE)

        available = engine.available_lessons_for_participant(
            participant.id, today=dt.date(2099, 1, 1)
        )

        assert [a.lesson.id for a in available] == [free.id]

    def test_unknown_participant_raises(self, engine) -> None:
        with pytest.raises(ParticipantNotFoundError):
            engine.available_lessons_for_participant("ghost")
