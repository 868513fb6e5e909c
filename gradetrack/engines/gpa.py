"""
GPA Engine.

Credit-weighted grade-point averages over course lists.

WEIGHTING RULES:
----------------
- O through D contribute points × credits to the numerator and credits to
  the denominator.
- E, F and R contribute zero points but their credits still count.
- I (Incomplete) is skipped entirely: neither numerator nor denominator.

CGPA is recomputed from every course of every semester. Averaging SGPAs
would overweight light semesters, so it is never done.
"""

from typing import Iterable, Optional

from ..config import GPA_NOT_APPLICABLE


def compute_gpa(courses: Iterable) -> Optional[float]:
    """
    Weighted GPA of the given courses.

    Returns None when no course has a counted grade (including an empty
    list), never 0 or NaN.
    """
    total_points = 0.0
    total_credits = 0.0

    for course in courses:
        points = course.grade.points
        if points is None:
            continue
        total_points += points * course.credits
        total_credits += course.credits

    if total_credits == 0:
        return None
    return total_points / total_credits


def compute_sgpa(courses: Iterable) -> Optional[float]:
    """SGPA for a single semester's courses."""
    return compute_gpa(courses)


def flatten_courses(semesters: Iterable) -> list:
    return [course for semester in semesters for course in semester.courses]


def compute_cgpa(semesters: Iterable) -> Optional[float]:
    """CGPA across all semesters, from the flattened course list."""
    return compute_gpa(flatten_courses(semesters))


def get_total_credits(courses: Iterable) -> float:
    """Total credits, excluding courses whose grade is not counted."""
    return sum(c.credits for c in courses if c.grade.is_counted)


def format_gpa(value: Optional[float]) -> str:
    if value is None:
        return GPA_NOT_APPLICABLE
    return f"{value:.2f}"


def format_gpa_delta(value: Optional[float]) -> str:
    """Signed change, e.g. "+0.25" or "-1.10"."""
    if value is None:
        return GPA_NOT_APPLICABLE
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}"
