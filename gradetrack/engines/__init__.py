"""
Calculation engines.

This package contains the pure business logic of the tracker: GPA,
attendance, catalog search, trend statistics and prediction
reconciliation. Nothing here prints or performs I/O except the
reconciliation commit, which writes through the repository it is given.
"""

from .gpa import (
    compute_gpa,
    compute_sgpa,
    compute_cgpa,
    get_total_credits,
    format_gpa,
    format_gpa_delta,
    flatten_courses,
)
from .attendance import (
    aggregate,
    round_overall,
    round_course,
    course_percentage,
    max_possible,
    safe_bunks,
    global_bunks,
    per_course_bunks,
    bonus_for_term,
    compute_condonation,
    summarize,
)
from .catalog_search import search_catalog, score_item
from .trends import (
    semester_trend,
    course_points,
    trend_summary,
    grade_distribution,
    dashboard_stats,
)
from .reconciliation import PredictionSession, build_change_plan

__all__ = [
    # GPA
    "compute_gpa",
    "compute_sgpa",
    "compute_cgpa",
    "get_total_credits",
    "format_gpa",
    "format_gpa_delta",
    "flatten_courses",
    # Attendance
    "aggregate",
    "round_overall",
    "round_course",
    "course_percentage",
    "max_possible",
    "safe_bunks",
    "global_bunks",
    "per_course_bunks",
    "bonus_for_term",
    "compute_condonation",
    "summarize",
    # Catalog
    "search_catalog",
    "score_item",
    # Trends
    "semester_trend",
    "course_points",
    "trend_summary",
    "grade_distribution",
    "dashboard_stats",
    # Prediction
    "PredictionSession",
    "build_change_plan",
]
