"""
Command-Line Interface for the grade tracker.

COMMANDS:
---------
dashboard    CGPA, credits and every semester's courses
graphs       SGPA trend (or one semester's grade points with --semester)
grades       Grade distribution
attendance   Attendance report (--edit to change and save the profile)
search       Course catalog autocomplete
predict      Interactive "what-if" predictor over a draft of your record

add-semester / delete-semester / add-course / edit-course / delete-course
             Edit the official record directly

Run as:
    gradetrack dashboard
    python -m gradetrack predict
"""

import argparse
import logging
import sys
from typing import Optional

from .config import load_settings
from .exceptions import GradeTrackError, PersistenceError, ValidationError
from .models import AttendanceCourse
from .models.attendance import new_attendance_id
from .tracker import GradeTracker
from .ui import TerminalDisplay

logger = logging.getLogger(__name__)

PREDICT_HELP = """
  Commands (semester/course numbers are as listed):
    show                         redraw the predictor
    add-sem                      add a semester
    edit-sem S                   rename / renumber semester S
    del-sem S                    delete semester S and its courses
    add S                        add a course to semester S
    edit S C                     change course C of semester S
    del S C                      delete course C of semester S
    search QUERY                 look up the course catalog
    plan                         list the changes 'apply' would make
    apply                        write the draft to your official record
    reset                        discard the draft
    quit                         leave (unapplied changes are lost)
"""


def _ask(prompt: str, default: str = "") -> str:
    try:
        value = input(f"  {prompt}{f' [{default}]' if default else ''}: ").strip()
    except EOFError:
        value = ""
    return value or default


def _confirm(prompt: str) -> bool:
    return _ask(f"{prompt} (y/N)").lower() in ("y", "yes")


def _pick(items: list, number: str, what: str):
    try:
        position = int(number)
        if position < 1:
            raise IndexError
        return items[position - 1]
    except (ValueError, IndexError):
        raise ValidationError(f"No {what} number {number!r}") from None


# =============================================================================
#  PREDICTOR LOOP
# =============================================================================

def _prompt_course(tracker: GradeTracker, defaults=None) -> dict:
    """Ask for course fields, offering catalog matches for the name."""
    defaults = defaults or {}
    name = _ask("Course name or code", defaults.get("name", ""))
    code = defaults.get("code")
    credits = defaults.get("credits")

    matches = tracker.search(name)
    if matches and not defaults:
        TerminalDisplay.print_search_results(name, matches)
        choice = _ask("Use match number (Enter to keep typed name)")
        if choice:
            item = _pick(matches, choice, "match")
            name, code, credits = item.name, item.code, item.credits

    code = _ask("Code (optional)", code or "")
    credits = _ask("Credits", f"{credits:g}" if credits else "")
    grade = _ask("Grade (O, A+, A, B+, B, C, D, E, F, R, I)", defaults.get("grade", ""))
    return {"name": name, "code": code, "credits": credits, "grade": grade}


def _run_predict_command(tracker: GradeTracker, session, command: str, args: list) -> bool:
    """Run one predictor command; returns False to leave the loop."""
    display = tracker.display

    if command in ("quit", "exit", "q"):
        if session.dirty and not _confirm("Discard unapplied predictions?"):
            return True
        return False

    if command == "show":
        display.print_prediction(session.comparison(), session)
    elif command == "help":
        print(PREDICT_HELP)
    elif command == "add-sem":
        label = _ask("Semester label", f"Semester {session.next_index()}")
        index = _ask("Semester number", str(session.next_index()))
        session.add_semester(label, index)
        display.print_prediction(session.comparison(), session)
    elif command == "edit-sem":
        semester = _pick(session.draft, args[0] if args else "", "semester")
        label = _ask("Semester label", semester.label)
        index = _ask("Semester number", str(semester.index))
        session.edit_semester(semester.id, label=label, index=index)
        display.print_prediction(session.comparison(), session)
    elif command == "del-sem":
        semester = _pick(session.draft, args[0] if args else "", "semester")
        session.delete_semester(semester.id)
        display.print_prediction(session.comparison(), session)
    elif command == "add":
        semester = _pick(session.draft, args[0] if args else "", "semester")
        fields = _prompt_course(tracker)
        session.add_course(semester.id, **fields)
        display.print_prediction(session.comparison(), session)
    elif command == "edit":
        semester = _pick(session.draft, args[0] if args else "", "semester")
        course = _pick(semester.courses, args[1] if len(args) > 1 else "", "course")
        fields = _prompt_course(tracker, {
            "name": course.name,
            "code": course.code,
            "credits": course.credits,
            "grade": course.grade.value,
        })
        session.edit_course(semester.id, course.id, **fields)
        display.print_prediction(session.comparison(), session)
    elif command == "del":
        semester = _pick(session.draft, args[0] if args else "", "semester")
        course = _pick(semester.courses, args[1] if len(args) > 1 else "", "course")
        session.delete_course(semester.id, course.id)
        display.print_prediction(session.comparison(), session)
    elif command == "search":
        tracker.show_search(" ".join(args))
    elif command == "plan":
        display.print_change_plan(session.plan())
    elif command == "apply":
        if not session.dirty:
            display.print_error("Nothing to apply")
            return True
        display.print_change_plan(session.plan())
        if _confirm("Overwrite your official record with these predictions?"):
            result = tracker.apply_prediction(session)
            display.print_success(f"Applied {len(result.applied)} change(s)")
    elif command == "reset":
        session.reset()
        display.print_prediction(session.comparison(), session)
    else:
        display.print_error(f"Unknown command '{command}' (type 'help')")
    return True


def run_predictor(tracker: GradeTracker):
    session = tracker.start_prediction()
    tracker.display.print_prediction(session.comparison(), session)
    print(PREDICT_HELP)

    while True:
        try:
            line = input(f"{TerminalDisplay.BOLD}predict> {TerminalDisplay.RESET}").strip()
        except EOFError:
            break
        if not line:
            continue

        command, *args = line.split()
        try:
            if not _run_predict_command(tracker, session, command.lower(), args):
                break
        except ValidationError as e:
            tracker.display.print_error(str(e))
        except KeyError as e:
            tracker.display.print_error(str(e))
        except PersistenceError as e:
            tracker.display.print_error(f"Failed to apply changes: {e}")


# =============================================================================
#  ATTENDANCE EDITOR
# =============================================================================

def _ask_int(prompt: str, default: int) -> int:
    value = _ask(prompt, str(default))
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{prompt} must be a whole number") from None


def _ask_optional_percentage(prompt: str, default) -> Optional[float]:
    value = _ask(f"{prompt} (blank for none)", "" if default is None else f"{default:g}")
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        raise ValidationError(f"{prompt} must be a number") from None


def run_attendance_editor(tracker: GradeTracker):
    profile = tracker.attendance_profile()
    tracker.show_attendance(profile)

    while True:
        print(f"\n  {TerminalDisplay.DIM}[a]dd course, [e]dit N, [r]emove N, [t]arget, "
              f"[p]revious terms, [s]ave, [q]uit{TerminalDisplay.RESET}")
        line = _ask("Choice").split()
        if not line:
            continue
        choice, args = line[0].lower(), line[1:]

        try:
            if choice == "q":
                break
            if choice == "a":
                profile.courses.append(AttendanceCourse(
                    id=new_attendance_id(),
                    name=_ask("Name", f"Course {len(profile.courses) + 1}"),
                ))
            elif choice in ("e", "edit"):
                course = _pick(profile.courses, args[0] if args else "", "course")
                course.name = _ask("Name", course.name)
                course.attended = _ask_int("Attended", course.attended)
                course.duty_leave = _ask_int("Duty leave", course.duty_leave)
                course.total_classes = _ask_int("Total classes", course.total_classes)
                course.remaining = _ask_int("Remaining classes", course.remaining)
            elif choice in ("r", "remove"):
                course = _pick(profile.courses, args[0] if args else "", "course")
                profile.courses.remove(course)
            elif choice == "t":
                profile.target = float(_ask("Target %", f"{profile.target:g}"))
            elif choice == "p":
                profile.prev_term1 = _ask_optional_percentage("Previous term 1 %", profile.prev_term1)
                profile.prev_term2 = _ask_optional_percentage("Previous term 2 %", profile.prev_term2)
            elif choice == "s":
                tracker.save_attendance(profile)
                tracker.display.print_success("Attendance saved")
                continue
            else:
                tracker.display.print_error(f"Unknown choice '{choice}'")
                continue
            tracker.show_attendance(profile)
        except ValueError:
            tracker.display.print_error("Please enter a number")
        except ValidationError as e:
            tracker.display.print_error(str(e))
        except PersistenceError as e:
            tracker.display.print_error(f"Failed to save attendance: {e}")


# =============================================================================
#  RECORD EDITING
# =============================================================================

def run_record_command(tracker: GradeTracker, args) -> int:
    """Edit the official record directly (no draft)."""
    display = tracker.display
    command = args.command

    if command == "add-semester":
        semester = tracker.add_semester(args.label, args.index)
        display.print_success(f"Added {semester.label}")
    elif command == "delete-semester":
        semester = tracker.find_semester(args.semester)
        if not args.yes and not _confirm(f"Delete {semester.label} and all its courses?"):
            return 1
        tracker.delete_semester(args.semester)
        display.print_success(f"Deleted {semester.label}")
    elif command == "add-course":
        course = tracker.add_course(args.semester, args.name, args.grade,
                                    credits=args.credits, code=args.code)
        display.print_success(f"Added {course.name} ({course.grade})")
    elif command == "edit-course":
        course = tracker.edit_course(args.semester, args.course, name=args.name, code=args.code,
                                     credits=args.credits, grade=args.grade)
        display.print_success(f"Updated {course.name}")
    elif command == "delete-course":
        semester = tracker.find_semester(args.semester)
        course = tracker.find_course(semester, args.course)
        if not args.yes and not _confirm(f"Delete {course.name}?"):
            return 1
        tracker.delete_course(args.semester, args.course)
        display.print_success(f"Deleted {course.name}")

    tracker.show_dashboard()
    return 0


RECORD_COMMANDS = ("add-semester", "delete-semester", "add-course", "edit-course", "delete-course")


# =============================================================================
#  ENTRY POINT
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gradetrack", description="Student GPA and attendance tracker")
    parser.add_argument("--config", help="YAML settings file (default: ./gradetrack.yaml if present)")
    parser.add_argument("--user", help="User id whose record to use")
    parser.add_argument("--store", help="Local JSON record file (ignored when a hosted database is configured)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    commands = parser.add_subparsers(dest="command")
    commands.add_parser("dashboard", help="CGPA and semesters")
    graphs = commands.add_parser("graphs", help="SGPA trend")
    graphs.add_argument("--semester", help="Show one semester's grade points (label or number)")
    commands.add_parser("grades", help="Grade distribution")
    attendance = commands.add_parser("attendance", help="Attendance report")
    attendance.add_argument("--edit", action="store_true", help="Edit and save the attendance profile")
    search = commands.add_parser("search", help="Search the course catalog")
    search.add_argument("query", nargs="+")
    commands.add_parser("predict", help="Interactive CGPA predictor")

    add_semester = commands.add_parser("add-semester", help="Add a semester to your record")
    add_semester.add_argument("label", nargs="?", help="Default: 'Semester N'")
    add_semester.add_argument("--index", help="Semester number (default: next)")

    delete_semester = commands.add_parser("delete-semester", help="Delete a semester and its courses")
    delete_semester.add_argument("semester", help="Semester label or number")
    delete_semester.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    add_course = commands.add_parser("add-course", help="Add a course to a semester")
    add_course.add_argument("semester", help="Semester label or number")
    add_course.add_argument("name", help="Course name, or a catalog code to fill in name and credits")
    add_course.add_argument("--grade", required=True)
    add_course.add_argument("--credits")
    add_course.add_argument("--code")

    edit_course = commands.add_parser("edit-course", help="Change a course")
    edit_course.add_argument("semester", help="Semester label or number")
    edit_course.add_argument("course", help="Course number within the semester, or its code")
    edit_course.add_argument("--name")
    edit_course.add_argument("--code")
    edit_course.add_argument("--credits")
    edit_course.add_argument("--grade")

    delete_course = commands.add_parser("delete-course", help="Delete a course")
    delete_course.add_argument("semester", help="Semester label or number")
    delete_course.add_argument("course", help="Course number within the semester, or its code")
    delete_course.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config)
        if args.user:
            settings.user_id = args.user
        if args.store:
            settings.store_file = args.store

        tracker = GradeTracker(settings)
        command = args.command or "dashboard"

        if command == "dashboard":
            tracker.show_dashboard()
        elif command == "graphs":
            tracker.show_graphs(args.semester)
        elif command == "grades":
            tracker.show_grade_distribution()
        elif command == "attendance":
            if args.edit:
                run_attendance_editor(tracker)
            else:
                tracker.show_attendance()
        elif command == "search":
            tracker.show_search(" ".join(args.query))
        elif command == "predict":
            run_predictor(tracker)
        elif command in RECORD_COMMANDS:
            return run_record_command(tracker, args)
    except KeyboardInterrupt:
        print()
        return 1
    except GradeTrackError as e:
        logger.debug("Command failed", exc_info=True)
        TerminalDisplay.print_error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
