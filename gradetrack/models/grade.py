"""
Grade model.

Contains the Grade enum and its fixed grade-point mapping.
"""

from enum import Enum
from typing import Optional

from ..config import GRADE_POINTS
from ..exceptions import ValidationError


class Grade(Enum):
    """
    Letter grades on the 10-point scale.

    O through D carry grade points, E/F/R count as zero points (credits still
    count), and I (Incomplete) is excluded from GPA entirely.
    """
    O = "O"
    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    R = "R"
    I = "I"

    @property
    def points(self) -> Optional[int]:
        """Grade points, or None when the grade is not counted."""
        return GRADE_POINTS[self.value]

    @property
    def is_counted(self) -> bool:
        return self.points is not None

    @property
    def is_passing(self) -> bool:
        return bool(self.points)

    @classmethod
    def parse(cls, value) -> "Grade":
        """Accept a Grade or its letter text (case-insensitive)."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            raise ValidationError(f"Unknown grade: {value!r}") from None

    def __str__(self) -> str:
        return self.value


# Display order, best to worst
GRADES = list(Grade)
