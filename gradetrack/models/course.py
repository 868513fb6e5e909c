"""
Course and semester data models.

Contains the Course and Semester dataclasses that make up a student's
academic record, plus the field checks applied before any record is created
or edited.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ..exceptions import ValidationError
from .grade import Grade
from .identity import EntityId


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Course:
    """
    A single graded course.

    Attributes:
        id: PersistedId from the store, or PendingId inside a prediction draft
        semester_id: Owning semester
        name: Display name (never empty)
        code: Catalog code such as "CSE101", or None
        credits: Positive credit value (the UI steps in 0.5)
        grade: Grade enum value
        created_at: ISO timestamp
    """
    id: EntityId
    semester_id: EntityId
    name: str
    code: Optional[str]
    credits: float
    grade: Grade
    created_at: str = field(default_factory=utc_now)

    # Fields a user can change; these are compared when diffing a draft
    EDITABLE_FIELDS = ("name", "code", "credits", "grade")

    def differs_from(self, other: "Course") -> bool:
        return any(getattr(self, f) != getattr(other, f) for f in self.EDITABLE_FIELDS)


@dataclass
class Semester:
    """
    A semester and the courses it owns.

    ``index`` orders semesters. It is not required to be unique, but the
    "next index" suggestion assumes it is.
    """
    id: EntityId
    user_id: str
    index: int
    label: str
    created_at: str = field(default_factory=utc_now)
    courses: list = field(default_factory=list)  # List of Course objects

    def find_course(self, course_id) -> Optional[Course]:
        for course in self.courses:
            if course.id == course_id:
                return course
        return None


# =============================================================================
# FIELD VALIDATION
# =============================================================================

def clean_code(code) -> Optional[str]:
    """Trim a course code; blank codes become None."""
    if code is None:
        return None
    code = str(code).strip()
    return code or None


def validate_name(name, what: str = "Course name") -> str:
    text = str(name or "").strip()
    if not text:
        raise ValidationError(f"{what} is required")
    return text


def validate_credits(credits) -> float:
    if isinstance(credits, bool):
        raise ValidationError("Credits must be a positive number")
    try:
        value = float(credits)
    except (TypeError, ValueError):
        raise ValidationError("Credits must be a positive number") from None
    if not value > 0:
        raise ValidationError("Credits must be a positive number")
    return value


def validate_index(index) -> int:
    if isinstance(index, bool):
        raise ValidationError("Semester index must be a positive integer")
    if isinstance(index, float):
        if not index.is_integer():
            raise ValidationError("Semester index must be a positive integer")
        index = int(index)
    try:
        value = int(str(index).strip()) if not isinstance(index, int) else index
    except ValueError:
        raise ValidationError("Semester index must be a positive integer") from None
    if value < 1:
        raise ValidationError("Semester index must be a positive integer")
    return value


def validate_course_fields(name, credits, grade, code=None) -> dict:
    """
    Check and normalize course fields.

    Returns the cleaned fields ready to be written; raises ValidationError
    before anything is changed.
    """
    return {
        "name": validate_name(name),
        "code": clean_code(code),
        "credits": validate_credits(credits),
        "grade": Grade.parse(grade),
    }


def validate_semester_fields(label, index) -> dict:
    return {
        "label": validate_name(label, "Semester label"),
        "index": validate_index(index),
    }


def validate_course_updates(updates: dict) -> dict:
    """Check a partial course edit; fields outside EDITABLE_FIELDS are rejected."""
    cleaned = {}
    for key, value in updates.items():
        if key == "name":
            cleaned[key] = validate_name(value)
        elif key == "code":
            cleaned[key] = clean_code(value)
        elif key == "credits":
            cleaned[key] = validate_credits(value)
        elif key == "grade":
            cleaned[key] = Grade.parse(value)
        else:
            raise ValidationError(f"Course field {key!r} cannot be edited")
    return cleaned


def validate_semester_updates(updates: dict) -> dict:
    cleaned = {}
    for key, value in updates.items():
        if key == "label":
            cleaned[key] = validate_name(value, "Semester label")
        elif key == "index":
            cleaned[key] = validate_index(value)
        else:
            raise ValidationError(f"Semester field {key!r} cannot be edited")
    return cleaned
