"""
Typed access to the official record.

RecordRepository wraps a RecordStore and speaks in models: it is what the
orchestrator, the attendance view and the prediction commit call.
"""

import logging
from typing import Optional

from ..config import ATTENDANCE_TABLE, COURSES_TABLE, SEMESTERS_TABLE
from ..models import (
    AttendanceProfile,
    Course,
    Semester,
    validate_attendance_profile,
    validate_course_fields,
    validate_course_updates,
    validate_semester_fields,
    validate_semester_updates,
)
from .parser import RecordParser, store_id
from .store import RecordStore

logger = logging.getLogger(__name__)


class RecordRepository:
    """
    Semester, course and attendance operations over one store.

    Usage:
        repo = RecordRepository(LocalStore("gradetrack_data.json"))
        semesters = repo.load_semesters(user_id)
    """

    def __init__(self, store: RecordStore, parser: Optional[RecordParser] = None):
        self.store = store
        self.parser = parser or RecordParser()

    # =========================================================================
    #  SEMESTERS AND COURSES
    # =========================================================================

    def load_semesters(self, user_id: str) -> list:
        """All of a user's semesters, by index, with their courses attached."""
        semester_rows = self.store.list(SEMESTERS_TABLE, {"user_id": user_id}, order="index")
        if not semester_rows:
            return []
        course_rows = self.store.list(
            COURSES_TABLE,
            {"semester_id": [row["id"] for row in semester_rows]},
            order="created_at",
        )
        semesters = self.parser.parse_semesters(semester_rows, course_rows)
        logger.debug("Loaded %d semester(s) for %s", len(semesters), user_id)
        return semesters

    def all_courses(self, user_id: str) -> list:
        return [c for s in self.load_semesters(user_id) for c in s.courses]

    def create_semester(self, user_id: str, label: str, index: int) -> Semester:
        fields = validate_semester_fields(label, index)
        row = self.store.create(SEMESTERS_TABLE, {"user_id": user_id, **fields})
        return self.parser.parse_semester(row)

    def update_semester(self, semester_id, fields: dict):
        self.store.update(SEMESTERS_TABLE, store_id(semester_id), validate_semester_updates(fields))

    def delete_semester(self, semester_id):
        """Deletes the semester and, through the store's cascade, its courses."""
        self.store.delete(SEMESTERS_TABLE, store_id(semester_id))

    def create_course(self, semester_id, name: str, code, credits: float, grade) -> Course:
        fields = validate_course_fields(name, credits, grade, code)
        row = self.store.create(COURSES_TABLE, self.parser.course_row({
            "semester_id": store_id(semester_id),
            **fields,
        }))
        return self.parser.parse_course(row)

    def update_course(self, course_id, fields: dict):
        self.store.update(COURSES_TABLE, store_id(course_id),
                          self.parser.course_row(validate_course_updates(fields)))

    def delete_course(self, course_id):
        self.store.delete(COURSES_TABLE, store_id(course_id))

    # =========================================================================
    #  ATTENDANCE
    # =========================================================================

    def load_attendance(self, user_id: str) -> Optional[AttendanceProfile]:
        rows = self.store.list(ATTENDANCE_TABLE, {"user_id": user_id})
        if not rows or not rows[0].get("data"):
            return None
        return self.parser.parse_attendance(rows[0]["data"])

    def save_attendance(self, user_id: str, profile: AttendanceProfile):
        """Overwrite the user's whole profile (upsert keyed by user id)."""
        validate_attendance_profile(profile)
        self.store.upsert(ATTENDANCE_TABLE, "user_id", {
            "user_id": user_id,
            "data": self.parser.attendance_document(profile),
        })
