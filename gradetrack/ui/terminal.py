"""
Terminal Display Implementation.

This module handles all console/terminal output formatting.
It's the ONLY place where printing happens in the gradetrack package.

To create a different UI (web, PDF, etc.), create a new class with
the same method signatures but different output handling.
"""

from ..engines import compute_sgpa, format_gpa, format_gpa_delta
from ..models import (
    Action,
    AttendanceReport,
    ChangePlan,
    DashboardStats,
    GradeDistribution,
    PredictionComparison,
    is_pending,
)


class TerminalDisplay:
    """
    Pretty terminal output for GPA, attendance and prediction results.

    Every method takes the dataclasses the engines return and prints them;
    none of them compute anything beyond formatting.
    """

    # ANSI color codes for terminal styling
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"

    BG_GREEN = "\033[42m"
    BG_RED = "\033[41m"

    BAR_WIDTH = 30

    @classmethod
    def print_header(cls, title: str):
        """Print a major section header with decorative borders."""
        width = 70
        print()
        print(f"{cls.BOLD}{cls.CYAN}{'═' * width}{cls.RESET}")
        print(f"{cls.BOLD}{cls.CYAN}  {title}{cls.RESET}")
        print(f"{cls.BOLD}{cls.CYAN}{'═' * width}{cls.RESET}")

    @classmethod
    def print_subheader(cls, title: str):
        """Print a subsection header."""
        print()
        print(f"{cls.BOLD}{cls.WHITE}  ── {title} ──{cls.RESET}")

    @classmethod
    def print_error(cls, message: str):
        print(f"\n  {cls.RED}✗ {message}{cls.RESET}")

    @classmethod
    def print_success(cls, message: str):
        print(f"\n  {cls.GREEN}✓ {message}{cls.RESET}")

    @classmethod
    def grade_color(cls, grade) -> str:
        """Green for passing grades, red for zero-point grades, dim for I."""
        if not grade.is_counted:
            return cls.DIM
        return cls.GREEN if grade.is_passing else cls.RED

    @classmethod
    def _bar(cls, value: float, maximum: float) -> str:
        if maximum <= 0:
            return ""
        filled = int(round(cls.BAR_WIDTH * min(value, maximum) / maximum))
        return "█" * filled + f"{cls.DIM}{'░' * (cls.BAR_WIDTH - filled)}{cls.RESET}"

    # =========================================================================
    #  GRADES
    # =========================================================================

    @classmethod
    def print_dashboard(cls, stats: DashboardStats, semesters: list):
        cls.print_header("DASHBOARD")
        print(f"\n  {cls.BOLD}CGPA:{cls.RESET} {format_gpa(stats.cgpa)}")
        print(f"  {cls.BOLD}Credits:{cls.RESET} {stats.credits:g}")
        print(f"  {cls.BOLD}Semesters:{cls.RESET} {stats.semester_count}   "
              f"{cls.BOLD}Courses:{cls.RESET} {stats.course_count}")

        if not semesters:
            print(f"\n  {cls.DIM}No semesters yet. Add one to get started.{cls.RESET}")
            return

        for semester in semesters:
            cls.print_semester(semester)

    @classmethod
    def print_semester(cls, semester, sgpa_text: str = None, marker: str = ""):
        sgpa_text = sgpa_text or format_gpa(compute_sgpa(semester.courses))
        cls.print_subheader(f"{semester.index}. {semester.label}{marker}  (SGPA {sgpa_text})")
        if not semester.courses:
            print(f"  {cls.DIM}(no courses){cls.RESET}")
            return

        print(f"  {cls.BOLD}{'#':<4} {'CODE':<10} {'NAME':<40} {'CR':>5} {'GRADE':>6}{cls.RESET}")
        for i, course in enumerate(semester.courses, 1):
            color = cls.grade_color(course.grade)
            name = course.name if len(course.name) <= 40 else course.name[:37] + "..."
            new_flag = f" {cls.YELLOW}*{cls.RESET}" if is_pending(course.id) else ""
            print(f"  {i:<4} {course.code or '-':<10} {name:<40} {course.credits:>5g} "
                  f"{color}{course.grade.value:>6}{cls.RESET}{new_flag}")

    @classmethod
    def print_trend(cls, points: list, summary):
        cls.print_header("SGPA TREND")
        if not points:
            print(f"\n  {cls.DIM}No semesters to plot.{cls.RESET}")
            return

        print()
        for point in points:
            print(f"  {point.label:<20} {cls._bar(point.sgpa, 10)} {point.sgpa:5.2f}  "
                  f"{cls.DIM}{point.credits:g} cr{cls.RESET}")

        if summary is not None:
            print(f"\n  {cls.GREEN}Highest:{cls.RESET} {summary.best.sgpa:.2f} ({summary.best.label})")
            print(f"  {cls.RED}Lowest:{cls.RESET}  {summary.worst.sgpa:.2f} ({summary.worst.label})")
            print(f"  {cls.BOLD}Average:{cls.RESET} {summary.average:.2f} across {summary.semester_count} graded semester(s)")

    @classmethod
    def print_course_points(cls, label: str, points: list):
        cls.print_header(f"GRADE POINTS: {label.upper()}")
        if not points:
            print(f"\n  {cls.DIM}No courses in this semester.{cls.RESET}")
            return
        print()
        for point in points:
            print(f"  {point.name:<14} {cls._bar(point.grade_points, 10)} "
                  f"{point.grade:>2} ({point.grade_points})  {cls.DIM}{point.credits:g} cr{cls.RESET}")

    @classmethod
    def print_grade_distribution(cls, distribution: GradeDistribution):
        cls.print_header("GRADE DISTRIBUTION")
        print()
        for entry in distribution.counts:
            print(f"  {entry.grade:<3} {cls._bar(entry.percentage, 100)} {entry.count:>3} "
                  f"{cls.DIM}({entry.percentage:.0f}%){cls.RESET}")
        print(f"\n  {cls.BOLD}Courses:{cls.RESET} {distribution.total_courses}   "
              f"{cls.BOLD}Credits:{cls.RESET} {distribution.total_credits:g}")
        if distribution.most_common:
            print(f"  {cls.BOLD}Most common grade:{cls.RESET} {distribution.most_common}")

    # =========================================================================
    #  ATTENDANCE
    # =========================================================================

    @classmethod
    def print_attendance(cls, report: AttendanceReport, courses: list):
        totals = report.totals
        cls.print_header("ATTENDANCE")

        color = cls.RED if report.below_target else cls.GREEN
        print(f"\n  {cls.BOLD}Overall:{cls.RESET} {color}{totals.overall_display}%{cls.RESET} "
              f"{cls.DIM}({totals.attended}/{totals.total}, target {report.target:g}%){cls.RESET}")
        print(f"  {cls.BOLD}Max possible:{cls.RESET} {report.max_possible.display}% "
              f"{cls.DIM}if all {totals.remaining} remaining classes are attended{cls.RESET}")
        print(f"  {cls.BOLD}Can skip:{cls.RESET} {report.global_bunks.max_bunks} class(es) overall")
        if report.below_target:
            print(f"  {cls.YELLOW}⚠ Below target attendance{cls.RESET}")

        cls.print_subheader("Per Course")
        print(f"  {cls.BOLD}{'NAME':<30} {'ATT+DL':>7} {'TOTAL':>6} {'LEFT':>5} {'%':>5} {'SKIP':>5}{cls.RESET}")
        for course, bunks in zip(courses, report.course_bunks):
            color = cls.RED if course.total_classes and bunks.percentage < report.target else ""
            print(f"  {course.name[:30]:<30} {course.combined_attended:>7} {course.total_classes:>6} "
                  f"{course.remaining:>5} {color}{bunks.percentage:>4}%{cls.RESET} {bunks.max_bunks:>5}")
        print(f"  {cls.DIM}Per-course skip counts are independent of the overall figure.{cls.RESET}")

        cls.print_subheader("Condonation")
        condonation = report.condonation
        badge = (f"{cls.BG_GREEN}{cls.WHITE} ✓ ELIGIBLE {cls.RESET}" if condonation.eligible
                 else f"{cls.BG_RED}{cls.WHITE} ✗ NOT ELIGIBLE {cls.RESET}")
        print(f"  {badge}  bonus {condonation.bonus}%, effective {condonation.effective:g}%")
        print(f"  {cls.DIM}{condonation.reason}{cls.RESET}")

    # =========================================================================
    #  CATALOG
    # =========================================================================

    @classmethod
    def print_search_results(cls, query: str, items: list):
        cls.print_subheader(f"Catalog matches for '{query}'")
        if not items:
            print(f"  {cls.DIM}(no matches){cls.RESET}")
            return
        for i, item in enumerate(items, 1):
            print(f"  {i}. {cls.CYAN}{item.code:<8}{cls.RESET} {item.name} {cls.DIM}({item.credits:g} cr){cls.RESET}")

    # =========================================================================
    #  PREDICTOR
    # =========================================================================

    @classmethod
    def print_prediction(cls, comparison: PredictionComparison, session):
        cls.print_header("CGPA PREDICTOR")
        delta = comparison.cgpa_delta
        if delta is None or delta == 0:
            delta_color = ""
        else:
            delta_color = cls.GREEN if delta > 0 else cls.RED

        print(f"\n  {cls.BOLD}Official CGPA:{cls.RESET}  {format_gpa(comparison.official_cgpa)} "
              f"{cls.DIM}({comparison.official_credits:g} credits){cls.RESET}")
        print(f"  {cls.BOLD}Predicted CGPA:{cls.RESET} {cls.CYAN}{format_gpa(comparison.predicted_cgpa)}{cls.RESET} "
              f"{cls.DIM}({comparison.predicted_credits:g} credits){cls.RESET}")
        print(f"  {cls.BOLD}Change:{cls.RESET}         {delta_color}{format_gpa_delta(delta)}{cls.RESET}")
        new_note = f" (+{comparison.new_semesters} new)" if comparison.new_semesters else ""
        print(f"  {cls.BOLD}Semesters:{cls.RESET}      {comparison.predicted_semesters}{new_note}")

        if session.dirty:
            print(f"\n  {cls.YELLOW}⚠ You have unsaved predictions. 'apply' saves them to your record, "
                  f"'reset' discards them.{cls.RESET}")

        for semester in session.draft:
            info = session.semester_comparison(semester)
            marker = ""
            if info.is_new:
                marker = f" {cls.YELLOW}[new]{cls.RESET}"
            elif info.is_affected:
                marker = f" {cls.YELLOW}[modified]{cls.RESET}"
            sgpa_text = format_gpa(info.predicted_sgpa)
            if not info.is_new and info.original_sgpa != info.predicted_sgpa:
                sgpa_text = f"{format_gpa(info.original_sgpa)} → {sgpa_text}"
            cls.print_semester(semester, sgpa_text=sgpa_text, marker=marker)

    @classmethod
    def print_change_plan(cls, plan: ChangePlan):
        cls.print_subheader("Changes to apply")
        if plan.is_empty:
            print(f"  {cls.DIM}(nothing to apply){cls.RESET}")
            return
        symbols = {
            Action.CREATE: f"{cls.GREEN}+{cls.RESET}",
            Action.UPDATE: f"{cls.YELLOW}~{cls.RESET}",
            Action.DELETE: f"{cls.RED}-{cls.RESET}",
        }
        for operation in plan.operations:
            label = operation.fields.get("name") or operation.fields.get("label") or ""
            print(f"  {symbols[operation.action]} {operation.entity.value:<8} {label}")
        print(f"\n  {cls.YELLOW}This overwrites your official record and cannot be undone here.{cls.RESET}")
