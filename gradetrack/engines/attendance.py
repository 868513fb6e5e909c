"""
Attendance Engine.

Pure functions over an AttendanceProfile: aggregate percentage, the best
percentage still reachable, how many classes can be skipped while staying
on target, and the condonation bonus from earlier terms.

ROUNDING POLICY:
----------------
The overall percentage is displayed rounded UP (ceiling); per-course
percentages use round-half-up. The two differ on purpose and are kept
separate: ``round_overall`` and ``round_course``.

SAFE-BUNK FORMULA:
------------------
With A attended (duty leave included), T held so far and R remaining, the
largest b in [0, R] such that attending R - b more keeps the percentage at
or above target is

    b <= A + R - (target / 100) * (T + R)

floored and clamped. The global figure and the per-course figures are
computed independently: skipping each course's own "safe" amount does not
guarantee the overall target, and vice versa.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from ..config import (
    CONDONATION_FLOOR,
    CONDONATION_MAX_BONUS,
    CONDONATION_PASS,
    CONDONATION_TIERS,
)
from ..models import (
    AttendanceProfile,
    AttendanceReport,
    AttendanceTotals,
    BunkInfo,
    Condonation,
    CourseBunks,
    MaxPossible,
)


def round_overall(percentage: float) -> int:
    return math.ceil(percentage)


def round_course(percentage: float) -> int:
    return int(Decimal(str(percentage)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _percentage(attended: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return attended * 100 / total


def aggregate(courses: Iterable) -> AttendanceTotals:
    attended = 0
    total = 0
    remaining = 0
    for course in courses:
        attended += course.combined_attended
        total += course.total_classes
        remaining += course.remaining

    overall_raw = _percentage(attended, total)
    return AttendanceTotals(
        attended=attended,
        total=total,
        remaining=remaining,
        missed=total - attended,
        overall_raw=overall_raw,
        overall_display=round_overall(overall_raw) if total > 0 else 0,
    )


def course_percentage(course) -> int:
    """Display percentage for one course (round-half-up)."""
    if course.total_classes <= 0:
        return 0
    return round_course(_percentage(course.combined_attended, course.total_classes))


def max_possible(totals: AttendanceTotals) -> MaxPossible:
    """Overall percentage if every remaining class is attended."""
    if totals.total == 0:
        return MaxPossible(raw=0.0, display=0)
    future_total = totals.total + totals.remaining
    if future_total == 0:
        return MaxPossible(raw=0.0, display=0)
    raw = _percentage(totals.attended + totals.remaining, future_total)
    return MaxPossible(raw=raw, display=round_overall(raw))


def safe_bunks(attended: int, total: int, remaining: int, target: float) -> int:
    """Most remaining classes that can be skipped while staying >= target."""
    if total == 0 or remaining <= 0:
        return 0
    # Scaled by 100 so integer targets stay exact
    slack = 100 * (attended + remaining) - target * (total + remaining)
    max_bunks = math.floor(slack / 100)
    return max(0, min(remaining, max_bunks))


def global_bunks(totals: AttendanceTotals, target: float) -> BunkInfo:
    if totals.total == 0 or totals.remaining <= 0:
        return BunkInfo(max_bunks=0, can_maintain_target=totals.overall_display >= target)

    max_bunks = safe_bunks(totals.attended, totals.total, totals.remaining, target)
    return BunkInfo(
        max_bunks=max_bunks,
        can_maintain_target=max_bunks > 0 or totals.overall_display >= target,
    )


def per_course_bunks(courses: Iterable, target: float) -> list:
    return [
        CourseBunks(
            id=c.id,
            name=c.name,
            percentage=course_percentage(c),
            max_bunks=safe_bunks(c.combined_attended, c.total_classes, c.remaining, target),
        )
        for c in courses
    ]


def bonus_for_term(percentage: float) -> int:
    for minimum, bonus in CONDONATION_TIERS:
        if percentage >= minimum:
            return bonus
    return 0


def compute_condonation(current: float, prev1: Optional[float] = None,
                        prev2: Optional[float] = None) -> Condonation:
    """
    Condonation bonus for the current term.

    Below the floor nothing is condoned; at or above the pass mark nothing
    needs to be. In between, each previous term adds its tier bonus, capped
    at CONDONATION_MAX_BONUS in total.
    """
    if current < CONDONATION_FLOOR:
        return Condonation(
            bonus=0,
            effective=current,
            eligible=False,
            reason=f"Current term aggregate < {CONDONATION_FLOOR}%. Condonation not allowed.",
        )

    if current >= CONDONATION_PASS:
        return Condonation(
            bonus=0,
            effective=current,
            eligible=True,
            reason=f"Current term aggregate is at least {CONDONATION_PASS}%. No condonation needed.",
        )

    b1 = bonus_for_term(prev1) if prev1 is not None else 0
    b2 = bonus_for_term(prev2) if prev2 is not None else 0
    bonus = min(CONDONATION_MAX_BONUS, b1 + b2)
    effective = current + bonus

    if bonus > 0:
        reason = f"Eligible for {bonus}% bonus from previous terms."
    else:
        reason = "No bonus available from previous terms."

    return Condonation(
        bonus=bonus,
        effective=effective,
        eligible=effective >= CONDONATION_PASS,
        reason=reason,
    )


def summarize(profile: AttendanceProfile) -> AttendanceReport:
    """Compute every attendance figure for a profile in one pass."""
    totals = aggregate(profile.courses)

    if totals.total == 0:
        condonation = Condonation(bonus=0, effective=0, eligible=False, reason="No data.")
    else:
        condonation = compute_condonation(
            totals.overall_display, profile.prev_term1, profile.prev_term2
        )

    return AttendanceReport(
        totals=totals,
        max_possible=max_possible(totals),
        global_bunks=global_bunks(totals, profile.target),
        course_bunks=per_course_bunks(profile.courses, profile.target),
        condonation=condonation,
        target=profile.target,
        below_target=totals.total > 0 and totals.overall_display < profile.target,
    )
