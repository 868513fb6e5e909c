"""
Record parsing.

This module converts rows from the official store into model objects and
back again.
"""

from ..models import (
    AttendanceCourse,
    AttendanceProfile,
    Course,
    Grade,
    PersistedId,
    Semester,
    as_entity_id,
    is_pending,
)
from ..models.attendance import new_attendance_id
from ..config import DEFAULT_ATTENDANCE_TARGET
from ..exceptions import PersistenceError


def store_id(entity_id) -> str:
    """Raw id to send to the store; pending ids never reach it."""
    if is_pending(entity_id):
        raise PersistenceError(f"{entity_id} has not been created yet")
    if isinstance(entity_id, PersistedId):
        return entity_id.value
    return str(entity_id)


def _as_number(value, default=0):
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return int(number) if number.is_integer() else number


class RecordParser:
    """
    Maps store rows to models.

    ROW SHAPES (as stored by the hosted database):
    - semesters: {id, user_id, index, label, created_at}
    - courses: {id, semester_id, name, code, credits, grade, created_at}
    - attendance_profiles: {user_id, data} where data is the profile
      document using the web app's camelCase keys (dutyLeave,
      totalClasses, prevTerm1, prevTerm2)
    """

    def parse_course(self, row: dict) -> Course:
        return Course(
            id=as_entity_id(row["id"]),
            semester_id=as_entity_id(row["semester_id"]),
            name=row.get("name", ""),
            code=row.get("code") or None,
            credits=float(row.get("credits", 0)),
            grade=Grade.parse(row.get("grade")),
            created_at=row.get("created_at", ""),
        )

    def parse_semester(self, row: dict, courses=None) -> Semester:
        return Semester(
            id=as_entity_id(row["id"]),
            user_id=row.get("user_id", ""),
            index=int(row.get("index", 0)),
            label=row.get("label", ""),
            created_at=row.get("created_at", ""),
            courses=list(courses or []),
        )

    def parse_semesters(self, semester_rows: list, course_rows: list) -> list:
        """
        Attach courses to their semesters, ordered by semester index.

        Course rows keep the order they arrive in; the repository asks the
        store for creation order.
        """
        by_semester = {}
        for row in course_rows:
            course = self.parse_course(row)
            by_semester.setdefault(course.semester_id, []).append(course)

        semesters = [
            self.parse_semester(row, by_semester.get(as_entity_id(row["id"]), []))
            for row in semester_rows
        ]
        return sorted(semesters, key=lambda s: s.index)

    @staticmethod
    def course_row(fields: dict) -> dict:
        """Serialize editable course fields for the store."""
        row = {}
        for key, value in fields.items():
            if key == "grade":
                row[key] = Grade.parse(value).value
            else:
                row[key] = value
        return row

    # =========================================================================
    #  ATTENDANCE DOCUMENT
    # =========================================================================

    def parse_attendance(self, data: dict) -> AttendanceProfile:
        courses = []
        for c in data.get("courses", []) or []:
            courses.append(AttendanceCourse(
                id=str(c.get("id") or new_attendance_id()),
                name=c.get("name", ""),
                attended=int(_as_number(c.get("attended"))),
                duty_leave=int(_as_number(c.get("dutyLeave"))),
                total_classes=int(_as_number(c.get("totalClasses"))),
                remaining=int(_as_number(c.get("remaining"))),
            ))

        prev1 = data.get("prevTerm1")
        prev2 = data.get("prevTerm2")
        return AttendanceProfile(
            courses=courses,
            target=_as_number(data.get("target"), DEFAULT_ATTENDANCE_TARGET),
            prev_term1=_as_number(prev1) if prev1 is not None else None,
            prev_term2=_as_number(prev2) if prev2 is not None else None,
        )

    @staticmethod
    def attendance_document(profile: AttendanceProfile) -> dict:
        return {
            "courses": [
                {
                    "id": c.id,
                    "name": c.name,
                    "attended": c.attended,
                    "dutyLeave": c.duty_leave,
                    "totalClasses": c.total_classes,
                    "remaining": c.remaining,
                }
                for c in profile.courses
            ],
            "target": profile.target,
            "prevTerm1": profile.prev_term1,
            "prevTerm2": profile.prev_term2,
        }
