"""
Trend Statistics Engine.

Numbers behind the graphs, grade-distribution and dashboard views. Chart
rendering itself is left to the presentation layer.
"""

from typing import Optional

from ..models import (
    GRADES,
    CoursePoint,
    DashboardStats,
    GradeCount,
    GradeDistribution,
    SemesterPoint,
    TrendSummary,
)
from .gpa import compute_cgpa, compute_sgpa, flatten_courses, get_total_credits

SHORT_NAME_LENGTH = 12


def semester_trend(semesters) -> list:
    """
    SGPA per semester, in the order given.

    Semesters with no counted courses plot as 0 so the line stays
    continuous.
    """
    points = []
    for semester in semesters:
        sgpa = compute_sgpa(semester.courses)
        points.append(SemesterPoint(
            label=semester.label,
            index=semester.index,
            sgpa=round(sgpa, 2) if sgpa is not None else 0,
            credits=get_total_credits(semester.courses),
            has_grades=sgpa is not None,
        ))
    return points


def course_points(semester) -> list:
    """Grade points per course for a single-semester bar chart."""
    points = []
    for course in semester.courses:
        grade_points = course.grade.points
        points.append(CoursePoint(
            name=course.code or course.name[:SHORT_NAME_LENGTH],
            full_name=course.name,
            grade=course.grade.value,
            grade_points=grade_points if grade_points is not None else 0,
            credits=course.credits,
        ))
    return points


def trend_summary(points: list) -> Optional[TrendSummary]:
    """
    Best, worst and average SGPA over graded semesters.

    Semesters with no counted courses still plot as 0 but are left out
    here. Returns None when no semester has a counted grade.
    """
    graded = [p for p in points if p.has_grades]
    if not graded:
        return None

    # First occurrence wins on ties
    best = graded[0]
    worst = graded[0]
    for point in graded[1:]:
        if point.sgpa > best.sgpa:
            best = point
        if point.sgpa < worst.sgpa:
            worst = point

    return TrendSummary(
        best=best,
        worst=worst,
        average=sum(p.sgpa for p in graded) / len(graded),
        semester_count=len(graded),
    )


def grade_distribution(courses) -> GradeDistribution:
    """How often each grade appears, in display order."""
    courses = list(courses)
    tally = {grade: 0 for grade in GRADES}
    for course in courses:
        tally[course.grade] += 1

    total = len(courses)
    counts = [
        GradeCount(
            grade=grade.value,
            count=count,
            percentage=(count / total * 100) if total > 0 else 0.0,
        )
        for grade, count in tally.items()
    ]

    most_common = None
    if total > 0:
        # max() keeps the first grade in display order on ties
        most_common = max(counts, key=lambda c: c.count).grade

    return GradeDistribution(
        counts=counts,
        total_courses=total,
        total_credits=sum(c.credits for c in courses),
        most_common=most_common,
    )


def dashboard_stats(semesters) -> DashboardStats:
    semesters = list(semesters)
    courses = flatten_courses(semesters)
    return DashboardStats(
        cgpa=compute_cgpa(semesters),
        credits=get_total_credits(courses),
        semester_count=len(semesters),
        course_count=len(courses),
    )
