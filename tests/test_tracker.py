"""Tests for the orchestrator and the command-line entry point."""

import pytest

from gradetrack.cli import main
from gradetrack.config import Settings
from gradetrack.exceptions import ValidationError
from gradetrack.models import AttendanceCourse, Grade
from gradetrack.tracker import GradeTracker


@pytest.fixture
def tracker(seeded_repository):
    return GradeTracker(Settings(user_id="u1"), store=seeded_repository.store)


def test_dashboard_returns_stats(tracker, capsys):
    stats = tracker.show_dashboard()
    assert stats.cgpa == pytest.approx(8.6)
    assert "8.60" in capsys.readouterr().out


def test_graphs_by_label_or_number(tracker):
    summary = tracker.show_graphs()
    assert summary.semester_count == 2

    points = tracker.show_graphs("2")
    assert [p.name for p in points] == ["CSE201"]
    assert tracker.show_graphs("semester 1")[0].name == "CSE101"
    assert tracker.show_graphs("Semester 9") is None


def test_attendance_falls_back_to_blank_profile(tracker):
    profile = tracker.attendance_profile()
    assert [c.name for c in profile.courses] == ["Course 1"]

    profile.courses[0].attended = 30
    profile.courses[0].total_classes = 40
    profile.courses.append(AttendanceCourse(id="x", name="Physics", attended=10, total_classes=10))
    tracker.save_attendance(profile)

    report = tracker.show_attendance()
    assert report.totals.attended == 40
    assert report.totals.overall_display == 80


def test_commit_refreshes_cached_record(tracker):
    before = tracker.semesters()
    session = tracker.start_prediction()
    session.delete_semester(session.draft[0].id)
    tracker.apply_prediction(session)

    assert len(before) == 2
    assert len(tracker.semesters()) == 1
    assert len(tracker.semesters(refresh=True)) == 1


def test_search_uses_packaged_catalog(tracker):
    assert tracker.search("operating")[0].code == "CSE316"


def test_cli_commands(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GRADETRACK_SUPABASE_URL", raising=False)
    store_file = str(tmp_path / "record.json")

    assert main(["--store", store_file, "dashboard"]) == 0
    assert "No semesters yet" in capsys.readouterr().out

    assert main(["--store", store_file, "search", "computer", "networks"]) == 0
    assert "CSE306" in capsys.readouterr().out

    assert main(["--store", store_file, "attendance"]) == 0
    assert main(["--config", str(tmp_path / "missing.yaml"), "grades"]) == 1


def test_add_semester_defaults_to_next_number(tracker):
    semester = tracker.add_semester()
    assert semester.index == 3
    assert semester.label == "Semester 3"
    assert [s.label for s in tracker.semesters()][-1] == "Semester 3"


def test_add_course_fills_in_from_catalog(tracker):
    course = tracker.add_course("1", "mth401", "A")
    assert course.name == "Discrete Mathematics"
    assert course.code == "MTH401"
    assert course.credits == 3

    semester = tracker.find_semester("Semester 1")
    assert [c.code for c in semester.courses] == ["CSE101", "PHY101", "MTH401"]


def test_add_course_without_catalog_match_needs_credits(tracker):
    with pytest.raises(ValidationError):
        tracker.add_course("1", "Independent Study", "A")
    course = tracker.add_course("1", "Independent Study", "A", credits="2")
    assert course.credits == 2
    assert course.code is None


def test_edit_and_delete_course(tracker):
    tracker.edit_course("1", "PHY101", grade="O", credits=None)
    semester = tracker.find_semester("1")
    assert semester.courses[1].grade == Grade.O
    assert semester.courses[1].credits == 2

    tracker.delete_course("1", "1")
    assert [c.code for c in tracker.find_semester("1").courses] == ["PHY101"]

    with pytest.raises(ValidationError):
        tracker.edit_course("1", "1")
    with pytest.raises(ValidationError):
        tracker.delete_course("1", "5")


def test_delete_semester_removes_its_courses(tracker, seeded_repository):
    tracker.delete_semester("Semester 1")
    assert [s.label for s in tracker.semesters()] == ["Semester 2"]
    assert len(seeded_repository.store.list("courses")) == 1
    with pytest.raises(ValidationError):
        tracker.delete_semester("Semester 1")


def test_cli_record_editing(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GRADETRACK_SUPABASE_URL", raising=False)
    store = ["--store", str(tmp_path / "record.json")]

    assert main(store + ["add-semester"]) == 0
    assert main(store + ["add-course", "1", "CSE101", "--grade", "A+"]) == 0
    assert main(store + ["add-course", "1", "Seminar", "--grade", "O", "--credits", "1"]) == 0
    assert main(store + ["edit-course", "1", "2", "--grade", "A"]) == 0
    out = capsys.readouterr().out
    assert "Computer Programming" in out
    assert "Seminar" in out

    assert main(store + ["add-course", "1", "Seminar", "--grade", "Z", "--credits", "1"]) == 1
    assert "Unknown grade" in capsys.readouterr().out

    assert main(store + ["delete-course", "1", "CSE101", "--yes"]) == 0
    assert main(store + ["delete-semester", "Semester 1", "--yes"]) == 0
    assert "No semesters yet" in capsys.readouterr().out
