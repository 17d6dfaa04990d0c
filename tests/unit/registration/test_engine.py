"""Unit tests for RegistrationEngine core operations."""

import datetime as dt
from unittest.mock import MagicMock

import pytest

from lessonbook.entities import create_participant
from lessonbook.registration import (
    DuplicateRegistrationError,
    RegistrationEngine,
    RegistrationPolicy,
    cancellation_deadline,
    is_past_deadline,
)
from lessonbook.registration.engine import DEADLINE_MESSAGE
from lessonbook.store import (
    LessonNotFoundError,
    RegistrationNotFoundError,
    RegistrationStatus,
    Store,
)

LESSON_DAY = dt.date(2099, 6, 15)
EVENING_BEFORE = dt.datetime(2099, 6, 14, 23, 59)
MIDNIGHT = dt.datetime(2099, 6, 15, 0, 0)


@pytest.fixture
def engine(store: Store) -> RegistrationEngine:
    return RegistrationEngine(store)


def _walk_in(name: str):
    return create_participant(name, f"{name.lower()}@example.com", "555", "1-2 years")


@pytest.mark.unit
class TestDeadline:
    """Tests for the midnight cancellation deadline."""

    def test_deadline_is_start_of_lesson_day(self) -> None:
        assert cancellation_deadline(LESSON_DAY) == dt.datetime(2099, 6, 15)

    def test_before_midnight(self, make_lesson) -> None:
        assert not is_past_deadline(make_lesson(date=LESSON_DAY), EVENING_BEFORE)

    def test_at_midnight(self, make_lesson) -> None:
        assert is_past_deadline(make_lesson(date=LESSON_DAY), MIDNIGHT)

    def test_aware_time_is_compared_in_local_time(self, make_lesson) -> None:
        lesson = make_lesson(date=LESSON_DAY)
        aware = MIDNIGHT.astimezone()
        assert is_past_deadline(lesson, aware)


@pytest.mark.unit
class TestRegister:
    """Tests for register and bulk_register."""

    def test_confirms_while_spots_remain(self, engine, store: Store, make_lesson) -> None:
        lesson = make_lesson(capacity=2)

        registration = engine.register(lesson.id, _walk_in("Ann"))

        assert registration.registration_status is RegistrationStatus.CONFIRMED
        assert store.lessons.require(lesson.id).enrolled_count == 1

    def test_waitlists_when_full(self, engine, store: Store, make_lesson) -> None:
        lesson = make_lesson(capacity=1)
        engine.register(lesson.id, _walk_in("Ann"))

        registration = engine.register(lesson.id, _walk_in("Bob"))

        assert registration.registration_status is RegistrationStatus.WAITLIST
        assert store.lessons.require(lesson.id).enrolled_count == 1

    def test_stores_new_participant(self, engine, store: Store, make_lesson) -> None:
        participant = _walk_in("Ann")
        engine.register(make_lesson().id, participant)

        assert store.participants.require(participant.id).name == "Ann"

    def test_existing_participant_is_reused(
        self, engine, store: Store, make_lesson, make_participant
    ) -> None:
        participant = make_participant()
        engine.register(make_lesson().id, participant)
        engine.register(make_lesson().id, participant)

        assert len(store.participants.list_all()) == 1

    def test_missing_lesson(self, engine) -> None:
        with pytest.raises(LessonNotFoundError):
            engine.register("nope", _walk_in("Ann"))

    def test_bulk_register_confirms_then_waitlists(self, engine, store: Store, make_lesson) -> None:
        lesson = make_lesson(capacity=3)
        names = ["A", "B", "C", "D", "E"]

        registrations = engine.bulk_register(lesson.id, [_walk_in(n) for n in names])

        statuses = [r.status for r in registrations]
        assert statuses == ["confirmed"] * 3 + ["waitlist"] * 2
        assert store.lessons.require(lesson.id).enrolled_count == 3

    def test_duplicates_allowed_by_default(self, engine, make_lesson, make_participant) -> None:
        lesson = make_lesson()
        participant = make_participant()

        first = engine.register(lesson.id, participant)
        second = engine.register(lesson.id, participant)

        assert first.id != second.id

    def test_duplicates_refused_by_policy(self, store, make_lesson, make_participant) -> None:
        engine = RegistrationEngine(store, policy=RegistrationPolicy(allow_duplicate_direct=False))
        lesson = make_lesson()
        participant = make_participant()
        engine.register(lesson.id, participant)

        with pytest.raises(DuplicateRegistrationError):
            engine.register(lesson.id, participant)
        assert store.lessons.require(lesson.id).enrolled_count == 1


@pytest.mark.unit
class TestSubstitution:
    """Tests for register_for_substitution."""

    def test_records_missed_lesson(self, engine, make_lesson) -> None:
        missed = make_lesson(title="Missed")
        makeup = make_lesson(title="Make-up")

        registration = engine.register_for_substitution(makeup.id, _walk_in("Ann"), missed.id)

        assert registration.lesson_id == makeup.id
        assert registration.missed_lesson_id == missed.id

    def test_missed_lesson_is_not_checked(self, engine, make_lesson) -> None:
        registration = engine.register_for_substitution(
            make_lesson().id, _walk_in("Ann"), "long-gone"
        )
        assert registration.missed_lesson_id == "long-gone"

    def test_available_substitution_lessons(self, engine, make_lesson) -> None:
        open_lesson = make_lesson(capacity=2)
        full = make_lesson(capacity=1)
        engine.register(full.id, _walk_in("Ann"))
        make_lesson(age_group="3-4 years")

        result = engine.available_substitution_lessons("1-2 years")
        assert [lesson.id for lesson in result] == [open_lesson.id]


@pytest.mark.unit
class TestCancel:
    """Tests for cancel and its variants."""

    def test_cancel_confirmed_frees_spot(self, engine, store: Store, make_lesson) -> None:
        lesson = make_lesson(date=LESSON_DAY)
        registration = engine.register(lesson.id, _walk_in("Ann"))

        result = engine.cancel(registration.id, current_time=EVENING_BEFORE)

        assert result.success
        assert result.message == "Registration cancelled"
        assert result.registration.status == "cancelled"
        assert store.lessons.require(lesson.id).enrolled_count == 0

    def test_cancel_waitlisted_keeps_count(self, engine, store: Store, make_lesson) -> None:
        lesson = make_lesson(capacity=1, date=LESSON_DAY)
        engine.register(lesson.id, _walk_in("Ann"))
        waitlisted = engine.register(lesson.id, _walk_in("Bob"))

        engine.cancel(waitlisted.id, current_time=EVENING_BEFORE)

        assert store.lessons.require(lesson.id).enrolled_count == 1

    def test_no_automatic_promotion(self, engine, store: Store, make_lesson) -> None:
        lesson = make_lesson(capacity=1, date=LESSON_DAY)
        confirmed = engine.register(lesson.id, _walk_in("Ann"))
        waitlisted = engine.register(lesson.id, _walk_in("Bob"))

        engine.cancel(confirmed.id, current_time=EVENING_BEFORE)

        assert store.registrations.require(waitlisted.id).status == "waitlist"

    def test_cancel_after_midnight_fails(self, engine, store: Store, make_lesson) -> None:
        lesson = make_lesson(date=LESSON_DAY)
        registration = engine.register(lesson.id, _walk_in("Ann"))

        result = engine.cancel(registration.id, current_time=MIDNIGHT)

        assert not result.success
        assert result.error == DEADLINE_MESSAGE
        assert store.registrations.require(registration.id).status == "confirmed"
        assert store.lessons.require(lesson.id).enrolled_count == 1

    def test_cancel_twice_does_not_double_decrement(self, engine, store, make_lesson) -> None:
        lesson = make_lesson(date=LESSON_DAY)
        engine.register(lesson.id, _walk_in("Ann"))
        registration = engine.register(lesson.id, _walk_in("Bob"))

        engine.cancel(registration.id, current_time=EVENING_BEFORE)
        again = engine.cancel(registration.id, current_time=EVENING_BEFORE)

        assert again.success
        assert store.lessons.require(lesson.id).enrolled_count == 1

    def test_cancel_uses_clock_by_default(self, store: Store, make_lesson) -> None:
        engine = RegistrationEngine(store, clock=lambda: MIDNIGHT)
        registration = engine.register(make_lesson(date=LESSON_DAY).id, _walk_in("Ann"))

        assert not engine.cancel(registration.id).success

    def test_cancel_missing_raises(self, engine) -> None:
        with pytest.raises(RegistrationNotFoundError):
            engine.cancel("nope")

    def test_cancel_without_deadline(self, engine, store: Store, make_lesson) -> None:
        lesson = make_lesson(date=dt.date(2000, 1, 1))
        registration = engine.register(lesson.id, _walk_in("Ann"))

        cancelled = engine.cancel_without_deadline(registration.id)

        assert cancelled.status == "cancelled"
        assert store.lessons.require(lesson.id).enrolled_count == 0


@pytest.mark.unit
class TestEnrolledCount:
    """The enrolled count always equals the confirmed registrations."""

    def test_count_matches_confirmed(self, engine, store: Store, make_lesson) -> None:
        lesson = make_lesson(capacity=4, date=LESSON_DAY)
        registrations = [engine.register(lesson.id, _walk_in(n)) for n in "ABCDEF"]
        engine.cancel(registrations[0].id, current_time=EVENING_BEFORE)
        engine.cancel(registrations[5].id, current_time=EVENING_BEFORE)

        confirmed = store.registrations.list_by_lesson(lesson.id, RegistrationStatus.CONFIRMED)
        assert store.lessons.require(lesson.id).enrolled_count == len(confirmed) == 3

    def test_registrations_for_lesson_and_participant(
        self, engine, make_lesson, make_participant
    ) -> None:
        lesson = make_lesson()
        participant = make_participant()
        registration = engine.register(lesson.id, participant)

        assert [r.id for r in engine.registrations_for_lesson(lesson.id)] == [registration.id]
        assert [r.id for r in engine.registrations_for_participant(participant.id)] == [
            registration.id
        ]


@pytest.mark.unit
class TestNotifications:
    """Tests for notification dispatch on registration."""

    def test_dispatches_with_status(self, store: Store, make_lesson) -> None:
        dispatcher = MagicMock()
        engine = RegistrationEngine(store, dispatcher=dispatcher)
        lesson = make_lesson(capacity=1)

        engine.register(lesson.id, _walk_in("Ann"))
        engine.register(lesson.id, _walk_in("Bob"))

        statuses = [call.args[2] for call in dispatcher.dispatch.call_args_list]
        assert statuses == [RegistrationStatus.CONFIRMED, RegistrationStatus.WAITLIST]
        assert dispatcher.dispatch.call_args_list[0].args[1].id == lesson.id

    def test_dispatch_failure_does_not_fail_registration(self, store: Store, make_lesson) -> None:
        dispatcher = MagicMock()
        dispatcher.dispatch.side_effect = RuntimeError("executor shut down")
        engine = RegistrationEngine(store, dispatcher=dispatcher)

        registration = engine.register(make_lesson().id, _walk_in("Ann"))

        assert registration.status == "confirmed"

    def test_cancel_sends_nothing(self, store: Store, make_lesson) -> None:
        dispatcher = MagicMock()
        engine = RegistrationEngine(store, dispatcher=dispatcher)
        registration = engine.register(make_lesson(date=LESSON_DAY).id, _walk_in("Ann"))
        dispatcher.reset_mock()

        engine.cancel(registration.id, current_time=EVENING_BEFORE)

        dispatcher.dispatch.assert_not_called()
