"""
Statistics data models.

Result dataclasses for the trend/graph views, the grade distribution and the
predictor's official-vs-predicted comparison.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class SemesterPoint:
    """One point on the SGPA trend line."""
    label: str
    index: int
    sgpa: float             # Rounded to 2 places; 0 when undefined
    credits: float
    has_grades: bool = True  # False when no course has a counted grade


@dataclass
class CoursePoint:
    """One bar in a single-semester chart."""
    name: str               # Code, or first 12 characters of the name
    full_name: str
    grade: str
    grade_points: int       # 0 for grades that are not counted
    credits: float


@dataclass
class TrendSummary:
    best: SemesterPoint
    worst: SemesterPoint
    average: float
    semester_count: int


@dataclass
class GradeCount:
    grade: str
    count: int
    percentage: float


@dataclass
class GradeDistribution:
    counts: list = field(default_factory=list)  # List of GradeCount, display order
    total_courses: int = 0
    total_credits: float = 0.0                  # All grades, including I
    most_common: Optional[str] = None


@dataclass
class DashboardStats:
    cgpa: Optional[float]
    credits: float
    semester_count: int
    course_count: int


@dataclass
class PredictionComparison:
    """Official record vs the draft being simulated."""
    official_cgpa: Optional[float]
    predicted_cgpa: Optional[float]
    official_credits: float
    predicted_credits: float
    cgpa_delta: Optional[float]
    official_semesters: int
    predicted_semesters: int

    @property
    def new_semesters(self) -> int:
        return max(0, self.predicted_semesters - self.official_semesters)


@dataclass
class SemesterComparison:
    original_sgpa: Optional[float]
    predicted_sgpa: Optional[float]
    is_new: bool
    is_affected: bool
