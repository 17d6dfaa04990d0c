"""SQLAlchemy models for the lesson store."""

from __future__ import annotations

import datetime as dt  # noqa: TC003 - used at runtime for SQLAlchemy
import uuid
from datetime import datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)


class RegistrationStatus(StrEnum):
    """Registration status enum.

    CONFIRMED and WAITLIST are live; CANCELLED is terminal.
    """

    CONFIRMED = "confirmed"
    WAITLIST = "waitlist"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        """Whether the registration still holds or waits for a spot."""
        return self is not RegistrationStatus.CANCELLED


ACTIVE_STATUSES = (RegistrationStatus.CONFIRMED.value, RegistrationStatus.WAITLIST.value)


def generate_id(prefix: str) -> str:
    """Generate a unique, prefixed identifier.

    Args:
        prefix: Entity kind, e.g. "lesson".

    Returns:
        Identifier such as ``lesson_1717171717171_3f2a9c4e1b``.
    """
    millis = int(datetime.now().timestamp() * 1000)
    return f"{prefix}_{millis}_{uuid.uuid4().hex[:10]}"


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


course_participants = Table(
    "course_participants",
    Base.metadata,
    Column(
        "course_id",
        String(64),
        ForeignKey("courses.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "participant_id",
        String(64),
        ForeignKey("participants.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Course(Base):
    """Course model - template shared by a family of lessons."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    age_group: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        name: str,
        age_group: str,
        color: str,
        id: str | None = None,
        description: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_id("course")
        self.name = name
        self.age_group = age_group
        self.color = color
        self.description = description

    def __repr__(self) -> str:
        return f"<Course(id={self.id!r}, name={self.name!r}, age_group={self.age_group!r})>"


class Lesson(Base):
    """Lesson model - one scheduled occurrence with a capacity."""

    __tablename__ = "lessons"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    day_of_week: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    time: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    age_group: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    enrolled_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    course_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("courses.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        title: str,
        date: dt.date,
        day_of_week: str,
        time: str,
        location: str,
        age_group: str,
        capacity: int,
        id: str | None = None,
        enrolled_count: int = 0,
        course_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_id("lesson")
        self.title = title
        self.date = date
        self.day_of_week = day_of_week
        self.time = time
        self.location = location
        self.age_group = age_group
        self.capacity = capacity
        self.enrolled_count = enrolled_count
        self.course_id = course_id

    @property
    def available_spots(self) -> int:
        """Remaining confirmed spots, never negative."""
        return max(0, self.capacity - self.enrolled_count)

    @property
    def is_full(self) -> bool:
        """Whether a new registration would be waitlisted."""
        return self.enrolled_count >= self.capacity

    def __repr__(self) -> str:
        return (
            f"<Lesson(id={self.id!r}, date={self.date!s}, "
            f"enrolled={self.enrolled_count}/{self.capacity})>"
        )


class Participant(Base):
    """Participant model - a child (with guardian contact) attending lessons."""

    __tablename__ = "participants"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    age_group: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        name: str,
        email: str,
        phone: str,
        age_group: str,
        id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_id("participant")
        self.name = name
        self.email = email
        self.phone = phone
        self.age_group = age_group

    def __repr__(self) -> str:
        return f"<Participant(id={self.id!r}, age_group={self.age_group!r})>"


class Registration(Base):
    """Registration model - links a participant to a lesson."""

    __tablename__ = "registrations"
    __table_args__ = (
        Index("ix_registrations_participant_lesson", "participant_id", "lesson_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    lesson_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    participant_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("participants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    registered_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    missed_lesson_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def __init__(
        self,
        lesson_id: str,
        participant_id: str,
        status: str,
        id: str | None = None,
        registered_at: datetime | None = None,
        missed_lesson_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_id("registration")
        self.lesson_id = lesson_id
        self.participant_id = participant_id
        self.status = status
        self.registered_at = registered_at if registered_at is not None else datetime.now()
        self.missed_lesson_id = missed_lesson_id

    @property
    def registration_status(self) -> RegistrationStatus:
        """Get status as RegistrationStatus enum."""
        return RegistrationStatus(self.status)

    @registration_status.setter
    def registration_status(self, value: RegistrationStatus) -> None:
        """Set status from RegistrationStatus enum."""
        self.status = value.value

    @property
    def is_active(self) -> bool:
        """Whether the registration is confirmed or waitlisted."""
        return self.registration_status.is_active

    def __repr__(self) -> str:
        return (
            f"<Registration(id={self.id!r}, lesson_id={self.lesson_id!r}, "
            f"participant_id={self.participant_id!r}, status={self.status!r})>"
        )
