"""
Prediction Reconciliation Engine.

This module backs the "what-if" grade predictor. A user edits a draft copy
of their semesters freely; nothing touches the official record until they
explicitly apply the draft, at which point the draft is diffed against the
snapshot taken when the session started and the differences are written
one operation at a time.

SESSION STATES:
---------------
CLEAN: draft matches the snapshot, nothing to apply.
DIRTY: any add/edit/delete happened since the last commit or reset.

    CLEAN --mutation--> DIRTY --commit ok / reset--> CLEAN

A failed commit leaves the session DIRTY with the draft untouched.

COMMIT ORDER:
-------------
1. Delete snapshot semesters missing from the draft (the store cascades
   their courses).
2. For each draft semester: create it if pending (its new id becomes the
   parent of its new courses), or update it if label/index changed.
3. Delete that semester's snapshot courses missing from the draft.
4. Create pending courses; update persisted courses whose fields changed.

Operations run strictly in order. Nothing is rolled back if one fails
part-way; the operations already applied stay applied.
"""

import copy
import logging
from typing import Callable, Optional

from ..exceptions import PersistenceError
from ..models import (
    Action,
    ChangePlan,
    CommitResult,
    Course,
    EntityKind,
    Operation,
    PendingId,
    PredictionComparison,
    Semester,
    SemesterComparison,
    is_pending,
    validate_course_fields,
    validate_course_updates,
    validate_semester_fields,
    validate_semester_updates,
)
from .gpa import compute_cgpa, compute_sgpa, flatten_courses, get_total_credits

logger = logging.getLogger(__name__)


def _course_fields(course: Course) -> dict:
    return {
        "name": course.name,
        "code": course.code,
        "credits": course.credits,
        "grade": course.grade,
    }


def build_change_plan(snapshot: list, draft: list) -> ChangePlan:
    """
    Diff a draft against the snapshot it started from.

    Pure function: returns the ordered operations without running them.
    A draft semester or course carrying a persisted id that the snapshot
    does not know about is an inconsistent state; it is logged and left
    out of the plan rather than re-created under that id.
    """
    plan = ChangePlan()
    snapshot_by_id = {s.id: s for s in snapshot}
    draft_ids = {s.id for s in draft}

    for semester in snapshot:
        if semester.id not in draft_ids:
            plan.operations.append(Operation(Action.DELETE, EntityKind.SEMESTER, semester.id))

    for semester in draft:
        original = None
        if is_pending(semester.id):
            plan.operations.append(Operation(
                Action.CREATE, EntityKind.SEMESTER, semester.id,
                fields={"label": semester.label, "index": semester.index},
            ))
        elif semester.id in snapshot_by_id:
            original = snapshot_by_id[semester.id]
            if original.label != semester.label or original.index != semester.index:
                plan.operations.append(Operation(
                    Action.UPDATE, EntityKind.SEMESTER, semester.id,
                    fields={"label": semester.label, "index": semester.index},
                ))
        else:
            logger.warning("Semester %s is not pending and not in the official record; skipping it", semester.id)
            plan.skipped.append(semester.id)
            continue

        if original is not None:
            draft_course_ids = {c.id for c in semester.courses}
            for course in original.courses:
                if course.id not in draft_course_ids:
                    plan.operations.append(Operation(Action.DELETE, EntityKind.COURSE, course.id))

        for course in semester.courses:
            if is_pending(course.id):
                plan.operations.append(Operation(
                    Action.CREATE, EntityKind.COURSE, course.id,
                    fields=_course_fields(course), parent=semester.id,
                ))
                continue

            original_course = original.find_course(course.id) if original is not None else None
            if original_course is None:
                logger.warning("Course %s is not pending and not in the official record; skipping it", course.id)
                plan.skipped.append(course.id)
            elif course.differs_from(original_course):
                plan.operations.append(Operation(
                    Action.UPDATE, EntityKind.COURSE, course.id,
                    fields=_course_fields(course),
                ))

    return plan


class PredictionSession:
    """
    A grade-prediction editing session over one user's semesters.

    The snapshot is captured once, when the session starts, and replaced
    only after a successful commit. The draft is an independent deep copy;
    edits never alias snapshot data.

    Usage:
        session = PredictionSession.start(repository, user_id)
        sem = session.add_semester("Semester 5", session.next_index())
        session.add_course(sem.id, "Compiler Design", 4, "A")
        session.comparison().predicted_cgpa
        session.commit(repository)
    """

    def __init__(self, official_semesters: list, user_id: str):
        self.user_id = user_id
        self._snapshot = copy.deepcopy(list(official_semesters))
        self.draft = copy.deepcopy(self._snapshot)
        self.dirty = False
        self._observers = []

    @classmethod
    def start(cls, repository, user_id: str) -> "PredictionSession":
        return cls(repository.load_semesters(user_id), user_id)

    @property
    def snapshot(self) -> list:
        """The official record as of session start or the last commit (read-only)."""
        return self._snapshot

    def subscribe(self, callback: Callable) -> Callable:
        """Call ``callback(new_snapshot)`` after every successful commit."""
        self._observers.append(callback)
        return callback

    # =========================================================================
    #  LOOKUPS
    # =========================================================================

    def get_semester(self, semester_id) -> Semester:
        for semester in self.draft:
            if semester.id == semester_id:
                return semester
        raise KeyError(f"No semester {semester_id} in the draft")

    def get_course(self, semester_id, course_id) -> Course:
        course = self.get_semester(semester_id).find_course(course_id)
        if course is None:
            raise KeyError(f"No course {course_id} in semester {semester_id}")
        return course

    def next_index(self) -> int:
        if not self.draft:
            return 1
        return max(s.index for s in self.draft) + 1

    def _snapshot_course(self, course_id) -> Optional[Course]:
        for course in flatten_courses(self._snapshot):
            if course.id == course_id:
                return course
        return None

    # =========================================================================
    #  DRAFT MUTATIONS (in-memory only)
    # =========================================================================

    def _sort_draft(self):
        self.draft.sort(key=lambda s: s.index)

    def add_semester(self, label, index) -> Semester:
        fields = validate_semester_fields(label, index)
        semester = Semester(id=PendingId.new(), user_id=self.user_id, **fields)
        self.draft.append(semester)
        self._sort_draft()
        self.dirty = True
        return semester

    def edit_semester(self, semester_id, label=None, index=None) -> Semester:
        semester = self.get_semester(semester_id)
        updates = {}
        if label is not None:
            updates["label"] = label
        if index is not None:
            updates["index"] = index
        for key, value in validate_semester_updates(updates).items():
            setattr(semester, key, value)
        self._sort_draft()
        self.dirty = True
        return semester

    def delete_semester(self, semester_id):
        semester = self.get_semester(semester_id)
        self.draft.remove(semester)
        self.dirty = True

    def add_course(self, semester_id, name, credits, grade, code=None) -> Course:
        semester = self.get_semester(semester_id)
        fields = validate_course_fields(name, credits, grade, code)
        course = Course(id=PendingId.new(), semester_id=semester.id, **fields)
        semester.courses.append(course)
        self.dirty = True
        return course

    def edit_course(self, semester_id, course_id, **updates) -> Course:
        """Change any of grade, credits, name, code on a draft course."""
        course = self.get_course(semester_id, course_id)
        for key, value in validate_course_updates(updates).items():
            setattr(course, key, value)
        self.dirty = True
        return course

    def delete_course(self, semester_id, course_id):
        semester = self.get_semester(semester_id)
        course = self.get_course(semester_id, course_id)
        semester.courses.remove(course)
        self.dirty = True

    def reset(self):
        """Discard the draft and start again from the snapshot."""
        self.draft = copy.deepcopy(self._snapshot)
        self.dirty = False

    # =========================================================================
    #  CHANGE DETECTION
    # =========================================================================

    def is_course_modified(self, course: Course) -> bool:
        if is_pending(course.id):
            return True
        original = self._snapshot_course(course.id)
        if original is None:
            return True
        return course.differs_from(original)

    def is_semester_affected(self, semester: Semester) -> bool:
        if is_pending(semester.id):
            return True
        return any(self.is_course_modified(c) for c in semester.courses)

    def plan(self) -> ChangePlan:
        return build_change_plan(self._snapshot, self.draft)

    # =========================================================================
    #  COMMIT
    # =========================================================================

    def commit(self, repository) -> CommitResult:
        """
        Write the draft to the official record.

        Does nothing (and makes no store calls) when the session is clean.
        Raises PersistenceError on the first failing operation; the draft
        and dirty flag are left as they were.
        """
        if not self.dirty:
            return CommitResult()

        plan = self.plan()
        logger.info("Applying %d change(s) to the official record", len(plan))

        result = CommitResult()
        for operation in plan.operations:
            try:
                self._apply(operation, repository, result.assigned_ids)
            except PersistenceError as e:
                logger.error("Commit stopped at '%s' after %d change(s): %s",
                             operation.describe(), len(result.applied), e)
                raise PersistenceError(
                    f"Failed to {operation.describe()}: {e}", operation=operation
                ) from e
            result.applied.append(operation)

        self._adopt_assigned_ids(result.assigned_ids)
        self._snapshot = copy.deepcopy(self.draft)
        self.dirty = False

        for callback in self._observers:
            callback(copy.deepcopy(self._snapshot))
        return result

    def _apply(self, operation: Operation, repository, assigned: dict):
        target = operation.target

        if operation.entity == EntityKind.SEMESTER:
            if operation.action == Action.DELETE:
                repository.delete_semester(target)
            elif operation.action == Action.CREATE:
                created = repository.create_semester(self.user_id, **operation.fields)
                assigned[target] = created.id
            else:
                repository.update_semester(target, operation.fields)
            return

        if operation.action == Action.DELETE:
            repository.delete_course(target)
        elif operation.action == Action.CREATE:
            parent = assigned.get(operation.parent, operation.parent)
            created = repository.create_course(parent, **operation.fields)
            assigned[target] = created.id
        else:
            repository.update_course(target, operation.fields)

    def _adopt_assigned_ids(self, assigned: dict):
        """Swap pending ids in the draft for the ids the store handed out."""
        for semester in self.draft:
            semester.id = assigned.get(semester.id, semester.id)
            for course in semester.courses:
                course.id = assigned.get(course.id, course.id)
                course.semester_id = assigned.get(course.semester_id, course.semester_id)

    # =========================================================================
    #  COMPARISON
    # =========================================================================

    def comparison(self) -> PredictionComparison:
        official_courses = flatten_courses(self._snapshot)
        predicted_courses = flatten_courses(self.draft)
        official_cgpa = compute_cgpa(self._snapshot)
        predicted_cgpa = compute_cgpa(self.draft)

        delta = None
        if official_cgpa is not None and predicted_cgpa is not None:
            delta = predicted_cgpa - official_cgpa

        return PredictionComparison(
            official_cgpa=official_cgpa,
            predicted_cgpa=predicted_cgpa,
            official_credits=get_total_credits(official_courses),
            predicted_credits=get_total_credits(predicted_courses),
            cgpa_delta=delta,
            official_semesters=len(self._snapshot),
            predicted_semesters=len(self.draft),
        )

    def semester_comparison(self, semester: Semester) -> SemesterComparison:
        original = None
        for candidate in self._snapshot:
            if candidate.id == semester.id:
                original = candidate
                break
        return SemesterComparison(
            original_sgpa=compute_sgpa(original.courses) if original is not None else None,
            predicted_sgpa=compute_sgpa(semester.courses),
            is_new=is_pending(semester.id),
            is_affected=self.is_semester_affected(semester),
        )
