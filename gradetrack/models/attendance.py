"""
Attendance data models.

Contains the attendance profile a user saves and the result dataclasses the
attendance engine returns.
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from ..config import DEFAULT_ATTENDANCE_TARGET
from ..exceptions import ValidationError


def new_attendance_id() -> str:
    return uuid.uuid4().hex


@dataclass
class AttendanceCourse:
    """
    Class counts for one course.

    Duty leave is an excused absence and counts as attended.
    """
    id: str
    name: str
    attended: int = 0
    duty_leave: int = 0
    total_classes: int = 0
    remaining: int = 0

    @property
    def combined_attended(self) -> int:
        return self.attended + self.duty_leave


@dataclass
class AttendanceProfile:
    """
    One per user, saved wholesale (upsert keyed by user id).

    prev_term1 / prev_term2 are aggregate percentages from earlier terms,
    used only for the condonation bonus.
    """
    courses: list = field(default_factory=list)  # List of AttendanceCourse
    target: float = DEFAULT_ATTENDANCE_TARGET
    prev_term1: Optional[float] = None
    prev_term2: Optional[float] = None

    @classmethod
    def blank(cls) -> "AttendanceProfile":
        """The starting profile shown to a user with nothing saved."""
        return cls(courses=[AttendanceCourse(id=new_attendance_id(), name="Course 1")])


# =============================================================================
# ENGINE RESULTS
# =============================================================================

@dataclass
class AttendanceTotals:
    """Aggregate counts across all courses."""
    attended: int           # Attended + duty leave
    total: int
    remaining: int
    missed: int
    overall_raw: float      # 100·A/T, 0 when T is 0
    overall_display: int    # Ceiling of overall_raw


@dataclass
class MaxPossible:
    """Overall percentage if every remaining class is attended."""
    raw: float
    display: int


@dataclass
class BunkInfo:
    max_bunks: int
    can_maintain_target: bool


@dataclass
class CourseBunks:
    id: str
    name: str
    percentage: int         # Round-half-up display percentage
    max_bunks: int


@dataclass
class Condonation:
    bonus: int
    effective: float
    eligible: bool
    reason: str


@dataclass
class AttendanceReport:
    """Everything the attendance view shows, computed in one pass."""
    totals: AttendanceTotals
    max_possible: MaxPossible
    global_bunks: BunkInfo
    course_bunks: list      # List of CourseBunks
    condonation: Condonation
    target: float
    below_target: bool


# =============================================================================
# VALIDATION
# =============================================================================

_COUNT_FIELDS = ("attended", "duty_leave", "total_classes", "remaining")


def _check_percentage(value, what: str):
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{what} must be a number")
    if not 0 <= value <= 100:
        raise ValidationError(f"{what} must be between 0 and 100")


def validate_attendance_profile(profile: AttendanceProfile) -> AttendanceProfile:
    """Type/range checks only; returns the profile unchanged."""
    _check_percentage(profile.target, "Target")
    if profile.target is None:
        raise ValidationError("Target is required")
    _check_percentage(profile.prev_term1, "Previous term 1")
    _check_percentage(profile.prev_term2, "Previous term 2")

    for course in profile.courses:
        if not str(course.name or "").strip():
            raise ValidationError("Attendance course name is required")
        for name in _COUNT_FIELDS:
            value = getattr(course, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{course.name}: {name} must be a whole number")
            if value < 0:
                raise ValidationError(f"{course.name}: {name} cannot be negative")
    return profile
