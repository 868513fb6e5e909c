"""
Data models for the grade tracker.

This package contains all dataclasses and enums used throughout the system.
These serve as "contracts" between different parts of the system.
"""

from .grade import Grade, GRADES
from .identity import PersistedId, PendingId, EntityId, is_pending, as_entity_id
from .course import (
    Course,
    Semester,
    validate_course_fields,
    validate_semester_fields,
    validate_course_updates,
    validate_semester_updates,
)
from .attendance import (
    AttendanceCourse,
    AttendanceProfile,
    AttendanceTotals,
    MaxPossible,
    BunkInfo,
    CourseBunks,
    Condonation,
    AttendanceReport,
    validate_attendance_profile,
)
from .catalog import CatalogItem
from .stats import (
    SemesterPoint,
    CoursePoint,
    TrendSummary,
    GradeCount,
    GradeDistribution,
    DashboardStats,
    PredictionComparison,
    SemesterComparison,
)
from .prediction import Action, EntityKind, Operation, ChangePlan, CommitResult

__all__ = [
    # Grades and identity
    "Grade",
    "GRADES",
    "PersistedId",
    "PendingId",
    "EntityId",
    "is_pending",
    "as_entity_id",
    # Academic record
    "Course",
    "Semester",
    "validate_course_fields",
    "validate_semester_fields",
    "validate_course_updates",
    "validate_semester_updates",
    # Attendance
    "AttendanceCourse",
    "AttendanceProfile",
    "AttendanceTotals",
    "MaxPossible",
    "BunkInfo",
    "CourseBunks",
    "Condonation",
    "AttendanceReport",
    "validate_attendance_profile",
    # Catalog
    "CatalogItem",
    # Statistics
    "SemesterPoint",
    "CoursePoint",
    "TrendSummary",
    "GradeCount",
    "GradeDistribution",
    "DashboardStats",
    "PredictionComparison",
    "SemesterComparison",
    # Prediction plans
    "Action",
    "EntityKind",
    "Operation",
    "ChangePlan",
    "CommitResult",
]
