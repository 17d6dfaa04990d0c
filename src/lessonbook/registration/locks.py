"""Per-lesson locks serializing capacity decisions."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class LessonLocks:
    """Registry of one lock per lesson ID.

    Every read-decide-write on a lesson's enrolled count runs while holding
    that lesson's lock.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, lesson_id: str) -> threading.Lock:
        """Return the lock for a lesson, creating it on first use."""
        with self._guard:
            lock = self._locks.get(lesson_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[lesson_id] = lock
            return lock

    @contextmanager
    def hold(self, *lesson_ids: str) -> Iterator[None]:
        """Hold the locks of all given lessons.

        Locks are taken in sorted ID order so that two callers holding
        overlapping sets cannot deadlock.
        """
        locks = [self.lock_for(lesson_id) for lesson_id in sorted(set(lesson_ids))]
        acquired: list[threading.Lock] = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
