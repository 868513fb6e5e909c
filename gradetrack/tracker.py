"""
Grade Tracker - Main Orchestrator.

This module contains the GradeTracker class that connects the official
record, the calculation engines and the presentation layer.
"""

import logging
from typing import Optional

from .config import Settings
from .data import DataLoader, LocalStore, RecordRepository, RecordStore, SupabaseStore
from .engines import (
    PredictionSession,
    course_points,
    dashboard_stats,
    grade_distribution,
    search_catalog,
    semester_trend,
    summarize,
    trend_summary,
)
from .exceptions import ValidationError
from .models import AttendanceProfile, Course, Semester
from .ui import TerminalDisplay

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> RecordStore:
    """Hosted database when configured, local JSON file otherwise."""
    if settings.uses_supabase:
        logger.info("Using hosted record at %s", settings.supabase_url)
        return SupabaseStore(
            settings.supabase_url,
            settings.supabase_key,
            access_token=settings.access_token,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
        )
    logger.info("Using local record file %s", settings.store_file)
    return LocalStore(settings.store_file)


class GradeTracker:
    """
    Main interface for the grade tracker.

    ═══════════════════════════════════════════════════════════════════════════
    ROLE: ORCHESTRATOR
    ═══════════════════════════════════════════════════════════════════════════

    1. Loads the user's records through the repository
    2. Calls engine functions to get results (pure data)
    3. Passes that data to the presentation layer for display

    Every ``show_*`` method also returns what it displayed, so the tracker
    can be driven without a terminal.

    USAGE:
        tracker = GradeTracker(load_settings())
        tracker.show_dashboard()
        session = tracker.start_prediction()
    """

    def __init__(self, settings: Optional[Settings] = None, store: Optional[RecordStore] = None,
                 display=None):
        self.settings = settings or Settings()
        self.store = store if store is not None else create_store(self.settings)
        self.repository = RecordRepository(self.store)
        self.loader = DataLoader(self.settings.catalog_file)
        self.display = display or TerminalDisplay()
        self._semesters = None

    @property
    def user_id(self) -> str:
        return self.settings.user_id

    def semesters(self, refresh: bool = False) -> list:
        """The official record, cached until a commit or ``refresh``."""
        if self._semesters is None or refresh:
            self._semesters = self.repository.load_semesters(self.user_id)
        return self._semesters

    def _on_commit(self, snapshot: list):
        self._semesters = snapshot

    # =========================================================================
    #  GRADES
    # =========================================================================

    def show_dashboard(self):
        semesters = self.semesters()
        stats = dashboard_stats(semesters)
        self.display.print_dashboard(stats, semesters)
        return stats

    def show_graphs(self, semester_label: Optional[str] = None):
        """SGPA trend, or the per-course chart for one semester."""
        if semester_label:
            try:
                semester = self.find_semester(semester_label)
            except ValidationError as e:
                self.display.print_error(str(e))
                return None
            points = course_points(semester)
            self.display.print_course_points(semester.label, points)
            return points

        points = semester_trend(self.semesters())
        summary = trend_summary(points)
        self.display.print_trend(points, summary)
        return summary

    def show_grade_distribution(self):
        courses = [c for s in self.semesters() for c in s.courses]
        distribution = grade_distribution(courses)
        self.display.print_grade_distribution(distribution)
        return distribution

    # =========================================================================
    #  RECORD EDITING (written straight to the official record)
    # =========================================================================

    def find_semester(self, ref) -> Semester:
        """Semester by label (case-insensitive) or by number."""
        wanted = str(ref).strip().lower()
        for semester in self.semesters():
            if semester.label.lower() == wanted or str(semester.index) == wanted:
                return semester
        raise ValidationError(f"No semester named '{ref}'")

    @staticmethod
    def find_course(semester: Semester, ref) -> Course:
        """Course by its position in the semester (from 1) or by code."""
        wanted = str(ref).strip()
        if wanted.isdigit():
            position = int(wanted)
            if 1 <= position <= len(semester.courses):
                return semester.courses[position - 1]
        else:
            for course in semester.courses:
                if course.code and course.code.lower() == wanted.lower():
                    return course
        raise ValidationError(f"No course '{ref}' in {semester.label}")

    def next_index(self) -> int:
        semesters = self.semesters()
        return max(s.index for s in semesters) + 1 if semesters else 1

    def add_semester(self, label: Optional[str] = None, index=None) -> Semester:
        """New semester; defaults to the next number and "Semester N"."""
        if index is None:
            index = self.next_index()
        semester = self.repository.create_semester(self.user_id, label or f"Semester {index}", index)
        self._semesters = None
        logger.info("Added semester %s", semester.label)
        return semester

    def delete_semester(self, semester_ref) -> Semester:
        semester = self.find_semester(semester_ref)
        self.repository.delete_semester(semester.id)
        self._semesters = None
        logger.info("Deleted semester %s", semester.label)
        return semester

    def add_course(self, semester_ref, name, grade, credits=None, code=None) -> Course:
        """
        Record a course in a semester.

        If ``name`` is a catalog code, the catalog's name and code are used
        and its credits fill in when ``credits`` is not given.
        """
        semester = self.find_semester(semester_ref)
        item = self.loader.find_by_code(str(name or ""))
        if item is not None:
            name = item.name
            code = code or item.code
            if credits is None:
                credits = item.credits

        course = self.repository.create_course(semester.id, name, code, credits, grade)
        self._semesters = None
        return course

    def edit_course(self, semester_ref, course_ref, **updates) -> Course:
        """Change name, code, credits or grade; ``None`` values are left alone."""
        updates = {key: value for key, value in updates.items() if value is not None}
        if not updates:
            raise ValidationError("Nothing to change")
        course = self.find_course(self.find_semester(semester_ref), course_ref)
        self.repository.update_course(course.id, updates)
        self._semesters = None
        return course

    def delete_course(self, semester_ref, course_ref) -> Course:
        course = self.find_course(self.find_semester(semester_ref), course_ref)
        self.repository.delete_course(course.id)
        self._semesters = None
        return course

    # =========================================================================
    #  ATTENDANCE
    # =========================================================================

    def attendance_profile(self) -> AttendanceProfile:
        return self.repository.load_attendance(self.user_id) or AttendanceProfile.blank()

    def save_attendance(self, profile: AttendanceProfile):
        self.repository.save_attendance(self.user_id, profile)

    def show_attendance(self, profile: Optional[AttendanceProfile] = None):
        profile = profile or self.attendance_profile()
        report = summarize(profile)
        self.display.print_attendance(report, profile.courses)
        return report

    # =========================================================================
    #  CATALOG
    # =========================================================================

    def search(self, query: str) -> list:
        return search_catalog(query, self.loader.catalog)

    def show_search(self, query: str) -> list:
        items = self.search(query)
        self.display.print_search_results(query, items)
        return items

    # =========================================================================
    #  PREDICTOR
    # =========================================================================

    def start_prediction(self) -> PredictionSession:
        """New draft session over the current official record."""
        session = PredictionSession(self.semesters(refresh=True), self.user_id)
        session.subscribe(self._on_commit)
        return session

    def apply_prediction(self, session: PredictionSession):
        return session.commit(self.repository)
