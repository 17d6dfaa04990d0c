"""Shared pytest fixtures and configuration."""

import datetime as dt

import pytest

from lessonbook.entities import create_lesson, create_participant
from lessonbook.store import Store


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures

FUTURE_DATE = dt.date(2099, 6, 15)


@pytest.fixture
def store():
    """Create an in-memory Store."""
    s = Store(":memory:")
    yield s
    s.close()


@pytest.fixture
def make_lesson(store: Store):
    """Factory that stores a lesson; defaults to a future toddler lesson."""

    def _make(
        title: str = "Toddler Gym",
        capacity: int = 3,
        age_group: str = "1-2 years",
        date: dt.date = FUTURE_DATE,
        day_of_week: str = "Monday",
        course_id: str | None = None,
    ):
        return store.lessons.add(
            create_lesson(
                title=title,
                date=date,
                day_of_week=day_of_week,
                time="09:00",
                location="Hall A",
                age_group=age_group,
                capacity=capacity,
                course_id=course_id,
            )
        )

    return _make


@pytest.fixture
def make_participant(store: Store):
    """Factory that stores a participant."""

    def _make(name: str = "Emma", age_group: str = "1-2 years"):
        return store.participants.add(
            create_participant(
                name=name,
                email=f"{name.lower()}@example.com",
                phone="+420 777 123 456",
                age_group=age_group,
            )
        )

    return _make
