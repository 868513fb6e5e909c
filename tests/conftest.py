"""Shared fixtures for the grade tracker tests."""

import pytest

from gradetrack.data import LocalStore, RecordRepository
from gradetrack.exceptions import PersistenceError
from gradetrack.models import Course, Grade, PersistedId, Semester


def make_course(course_id, semester_id, name, credits, grade, code=None):
    return Course(
        id=PersistedId(course_id),
        semester_id=PersistedId(semester_id),
        name=name,
        code=code,
        credits=credits,
        grade=Grade.parse(grade),
    )


@pytest.fixture
def sample_semesters():
    """Two persisted semesters: SGPA 50/6 and 36/4."""
    sem1 = Semester(id=PersistedId("s1"), user_id="u1", index=1, label="Semester 1", courses=[
        make_course("c1", "s1", "Computer Programming", 4, "O", code="CSE101"),
        make_course("c2", "s1", "Engineering Physics", 2, "C", code="PHY101"),
    ])
    sem2 = Semester(id=PersistedId("s2"), user_id="u1", index=2, label="Semester 2", courses=[
        make_course("c3", "s2", "Data Structures", 4, "A+", code="CSE201"),
    ])
    return [sem1, sem2]


@pytest.fixture
def store():
    return LocalStore()


@pytest.fixture
def repository(store):
    return RecordRepository(store)


@pytest.fixture
def seeded_repository(repository):
    """Repository holding two semesters with three courses for user u1."""
    sem1 = repository.create_semester("u1", "Semester 1", 1)
    repository.create_course(sem1.id, "Computer Programming", "CSE101", 4, "O")
    repository.create_course(sem1.id, "Engineering Physics", "PHY101", 2, "C")
    sem2 = repository.create_semester("u1", "Semester 2", 2)
    repository.create_course(sem2.id, "Data Structures", "CSE201", 4, "A+")
    return repository


class RecordingRepository:
    """
    Wraps a repository and records every write call.

    ``fail_on`` names a method ("create_course", ...) that raises
    PersistenceError on its ``fail_after``-th call (1-based).
    """

    def __init__(self, inner, fail_on=None, fail_after=1):
        self.inner = inner
        self.calls = []
        self.fail_on = fail_on
        self.fail_after = fail_after

    def load_semesters(self, user_id):
        return self.inner.load_semesters(user_id)

    def _call(self, method, *args, **kwargs):
        self.calls.append(method)
        if method == self.fail_on and self.calls.count(method) >= self.fail_after:
            raise PersistenceError(f"{method} rejected")
        return getattr(self.inner, method)(*args, **kwargs)

    def create_semester(self, *args, **kwargs):
        return self._call("create_semester", *args, **kwargs)

    def update_semester(self, *args, **kwargs):
        return self._call("update_semester", *args, **kwargs)

    def delete_semester(self, *args, **kwargs):
        return self._call("delete_semester", *args, **kwargs)

    def create_course(self, *args, **kwargs):
        return self._call("create_course", *args, **kwargs)

    def update_course(self, *args, **kwargs):
        return self._call("update_course", *args, **kwargs)

    def delete_course(self, *args, **kwargs):
        return self._call("delete_course", *args, **kwargs)


@pytest.fixture
def recording(seeded_repository):
    return RecordingRepository(seeded_repository)
