"""Tests for the prediction draft, change plan and commit."""

import copy

import pytest

from gradetrack.engines import PredictionSession, build_change_plan
from gradetrack.exceptions import PersistenceError, ValidationError
from gradetrack.models import (
    Action,
    Course,
    EntityKind,
    Grade,
    PendingId,
    PersistedId,
    Semester,
    is_pending,
)

from conftest import RecordingRepository


def _session(repository):
    return PredictionSession.start(repository, "u1")


def test_draft_is_independent_of_snapshot(seeded_repository):
    session = _session(seeded_repository)
    course = session.draft[0].courses[0]
    session.edit_course(session.draft[0].id, course.id, grade="F")
    assert session.snapshot[0].courses[0].grade == Grade.O
    assert session.dirty


def test_adding_course_plans_one_create(recording):
    session = _session(recording)
    semester = session.draft[0]
    session.add_course(semester.id, "Discrete Mathematics", 3, "A", code="MTH401")

    plan = session.plan()
    assert len(plan) == 1
    assert plan.count(Action.CREATE, EntityKind.COURSE) == 1

    session.commit(recording)
    assert recording.calls == ["create_course"]


def test_deleting_persisted_course_plans_one_delete(recording):
    session = _session(recording)
    semester = session.draft[0]
    session.delete_course(semester.id, semester.courses[1].id)

    result = session.commit(recording)
    assert recording.calls == ["delete_course"]
    assert len(result.applied) == 1
    assert len(recording.load_semesters("u1")[0].courses) == 1


def test_commit_without_changes_makes_no_calls(recording):
    session = _session(recording)
    result = session.commit(recording)
    assert result.is_noop
    assert recording.calls == []


def test_edit_back_to_original_is_not_written(recording):
    """Dirty, but the plan is empty because nothing differs."""
    session = _session(recording)
    semester = session.draft[0]
    course = semester.courses[0]
    session.edit_course(semester.id, course.id, grade="A")
    session.edit_course(semester.id, course.id, grade="O")
    assert session.dirty
    assert session.plan().is_empty
    session.commit(recording)
    assert recording.calls == []
    assert not session.dirty


def test_commit_makes_snapshot_match_draft(recording):
    session = _session(recording)
    semester = session.draft[1]
    session.edit_course(semester.id, semester.courses[0].id, grade="B", credits=3)
    session.add_course(semester.id, "Computer Networks", 3, "A+")

    session.commit(recording)

    assert not session.dirty
    assert session.snapshot == session.draft
    assert session.snapshot is not session.draft
    assert not any(is_pending(c.id) for c in session.draft[1].courses)
    assert session.plan().is_empty


def test_second_commit_does_not_duplicate(recording):
    session = _session(recording)
    session.add_course(session.draft[0].id, "Soft Skills-I", 3, "A")
    session.commit(recording)
    session.edit_course(session.draft[0].id, session.draft[0].courses[-1].id, grade="O")
    session.commit(recording)

    assert recording.calls == ["create_course", "update_course"]
    courses = recording.load_semesters("u1")[0].courses
    assert [c.name for c in courses].count("Soft Skills-I") == 1
    assert courses[-1].grade == Grade.O


def test_new_semester_courses_created_under_assigned_id(recording):
    session = _session(recording)
    semester = session.add_semester("Semester 3", session.next_index())
    pending_id = semester.id
    assert semester.index == 3
    session.add_course(semester.id, "Operating Systems", 3, "A")
    session.add_course(semester.id, "Programming in Java", 4, "B+")

    result = session.commit(recording)

    assert recording.calls == ["create_semester", "create_course", "create_course"]
    loaded = recording.load_semesters("u1")
    assert [s.label for s in loaded] == ["Semester 1", "Semester 2", "Semester 3"]
    assert len(loaded[2].courses) == 2
    assert loaded[2].courses[0].semester_id == loaded[2].id
    assert result.assigned_ids[pending_id] == loaded[2].id
    assert session.draft[2].id == loaded[2].id


def test_semester_delete_is_one_call(recording):
    """Courses go with their semester through the store cascade."""
    session = _session(recording)
    session.delete_semester(session.draft[0].id)
    session.commit(recording)

    assert recording.calls == ["delete_semester"]
    loaded = recording.load_semesters("u1")
    assert len(loaded) == 1
    assert len(recording.inner.store.list("courses")) == 1


def test_semester_edit_plans_update(recording):
    session = _session(recording)
    session.edit_semester(session.draft[0].id, label="First Year I")
    session.commit(recording)
    assert recording.calls == ["update_semester"]
    assert recording.load_semesters("u1")[0].label == "First Year I"


def test_reset_restores_snapshot(seeded_repository):
    session = _session(seeded_repository)
    session.add_semester("Semester 3", 3)
    session.delete_course(session.draft[0].id, session.draft[0].courses[0].id)
    session.reset()

    assert not session.dirty
    assert session.draft == session.snapshot
    assert not any(is_pending(s.id) for s in session.draft)


def test_invalid_input_leaves_session_clean(seeded_repository):
    session = _session(seeded_repository)
    semester_id = session.draft[0].id
    with pytest.raises(ValidationError):
        session.add_course(semester_id, "", 3, "A")
    with pytest.raises(ValidationError):
        session.add_course(semester_id, "Maths", 0, "A")
    with pytest.raises(ValidationError):
        session.add_course(semester_id, "Maths", 3, "Z")
    with pytest.raises(ValidationError):
        session.add_semester("Semester 9", 0)
    with pytest.raises(ValidationError):
        session.edit_course(semester_id, session.draft[0].courses[0].id, colour="x")
    assert not session.dirty
    assert session.draft == session.snapshot


def test_failed_commit_keeps_draft_and_dirty(seeded_repository):
    repo = RecordingRepository(seeded_repository, fail_on="create_course", fail_after=2)
    session = _session(repo)
    semester = session.draft[0]
    session.add_course(semester.id, "Course A", 3, "A")
    session.add_course(semester.id, "Course B", 3, "B")
    draft_before = [c.name for c in semester.courses]

    with pytest.raises(PersistenceError) as excinfo:
        session.commit(repo)

    assert excinfo.value.operation.action == Action.CREATE
    assert session.dirty
    assert [c.name for c in session.draft[0].courses] == draft_before
    assert is_pending(session.draft[0].courses[-1].id)
    # No rollback: the first create stays written
    assert len(repo.load_semesters("u1")[0].courses) == 3


def test_unknown_persisted_ids_are_skipped(sample_semesters):
    snapshot = sample_semesters
    draft = copy.deepcopy(snapshot)
    draft[0].courses.append(Course(id=PersistedId("ghost"), semester_id=snapshot[0].id,
                                   name="Ghost", code=None, credits=3, grade=Grade.A))
    draft.append(Semester(id=PersistedId("lost"), user_id="u1", index=3, label="Lost"))

    plan = build_change_plan(snapshot, draft)
    assert plan.is_empty
    assert plan.skipped == [PersistedId("ghost"), PersistedId("lost")]


def test_plan_orders_semester_deletes_first(sample_semesters):
    draft = [sample_semesters[1]]
    pending = PendingId.new()
    draft.append(Semester(id=pending, user_id="u1", index=3, label="Semester 3"))

    plan = build_change_plan(sample_semesters, draft)
    assert [(op.action, op.entity) for op in plan.operations] == [
        (Action.DELETE, EntityKind.SEMESTER),
        (Action.CREATE, EntityKind.SEMESTER),
    ]


def test_comparison_and_affected_flags(seeded_repository):
    session = _session(seeded_repository)
    before = session.comparison()
    assert before.cgpa_delta == pytest.approx(0)

    semester = session.draft[0]
    session.edit_course(semester.id, semester.courses[1].id, grade="O")
    after = session.comparison()
    # (40 + 20 + 36) / 10
    assert after.predicted_cgpa == pytest.approx(9.6)
    assert after.cgpa_delta == pytest.approx(1.0)

    assert session.is_course_modified(semester.courses[1])
    assert not session.is_course_modified(semester.courses[0])
    assert session.is_semester_affected(semester)
    assert not session.is_semester_affected(session.draft[1])

    compare = session.semester_comparison(semester)
    assert compare.original_sgpa == pytest.approx(50 / 6)
    assert compare.predicted_sgpa == pytest.approx(10.0)
    assert not compare.is_new


def test_observers_receive_new_snapshot(recording):
    seen = []
    session = _session(recording)
    session.subscribe(seen.append)
    session.add_course(session.draft[0].id, "Course A", 3, "A")
    session.commit(recording)

    assert len(seen) == 1
    assert seen[0] == session.snapshot
    assert seen[0] is not session.snapshot


def test_unknown_semester_raises_key_error(seeded_repository):
    session = _session(seeded_repository)
    with pytest.raises(KeyError):
        session.add_course(PersistedId("nope"), "Course", 3, "A")
