"""Tests for grades, ids and field validation."""

import pytest

from gradetrack.exceptions import ValidationError
from gradetrack.models import (
    GRADES,
    Grade,
    PendingId,
    PersistedId,
    as_entity_id,
    is_pending,
    validate_course_fields,
    validate_semester_fields,
)


def test_grade_points_and_flags():
    assert Grade.O.points == 10
    assert Grade.A_PLUS.points == 9
    assert Grade.D.points == 4
    assert Grade.F.points == 0
    assert Grade.I.points is None
    assert Grade.R.is_counted and not Grade.R.is_passing
    assert not Grade.I.is_counted
    assert [g.value for g in GRADES] == ["O", "A+", "A", "B+", "B", "C", "D", "E", "F", "R", "I"]


def test_grade_parse():
    assert Grade.parse("a+") == Grade.A_PLUS
    assert Grade.parse(" o ") == Grade.O
    assert Grade.parse(Grade.B) == Grade.B
    with pytest.raises(ValidationError):
        Grade.parse("A++")
    with pytest.raises(ValidationError):
        Grade.parse(None)


def test_ids_are_tagged():
    pending = PendingId.new()
    assert is_pending(pending)
    assert not is_pending(PersistedId("abc"))
    assert str(pending).startswith("temp_")
    assert pending != PendingId.new()
    assert as_entity_id("abc") == PersistedId("abc")
    assert as_entity_id(pending) is pending


def test_course_fields_are_cleaned():
    fields = validate_course_fields("  Discrete Mathematics ", "3.5", "b+", code="  ")
    assert fields == {
        "name": "Discrete Mathematics",
        "code": None,
        "credits": 3.5,
        "grade": Grade.B_PLUS,
    }


@pytest.mark.parametrize("credits", [0, -1, "abc", None, True])
def test_bad_credits(credits):
    with pytest.raises(ValidationError):
        validate_course_fields("Maths", credits, "A")


@pytest.mark.parametrize("index", [0, -2, 1.5, "x", False])
def test_bad_semester_index(index):
    with pytest.raises(ValidationError):
        validate_semester_fields("Semester", index)


def test_semester_fields():
    assert validate_semester_fields(" Semester 4 ", "4") == {"label": "Semester 4", "index": 4}
    with pytest.raises(ValidationError):
        validate_semester_fields("  ", 4)
